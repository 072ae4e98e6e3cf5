import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("users", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Survey",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="【业务说明】记录数据首次写入时间；【用法】只读字段，自动写入。",
                        verbose_name="创建时间",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="【业务说明】记录最新修改时间；【用法】ORM 保存时自动更新。",
                        verbose_name="更新时间",
                    ),
                ),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=200, verbose_name="问卷名称")),
                (
                    "description",
                    models.TextField(
                        blank=True,
                        help_text="支持 Markdown，展示在顾客填写页顶部。",
                        verbose_name="问卷说明",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("DRAFT", "Draft"), ("ACTIVE", "Active"), ("CLOSED", "Closed")],
                        db_index=True,
                        default="ACTIVE",
                        max_length=20,
                        verbose_name="问卷状态",
                    ),
                ),
                (
                    "business",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="surveys",
                        to="users.business",
                        verbose_name="所属商家",
                    ),
                ),
            ],
            options={
                "verbose_name": "问卷",
                "verbose_name_plural": "问卷",
                "ordering": ("-created_at",),
            },
        ),
        migrations.CreateModel(
            name="Question",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("text", models.TextField(verbose_name="题目内容")),
                (
                    "q_type",
                    models.CharField(
                        choices=[
                            ("TEXT", "Text response"),
                            ("RATING_SCALE_5", "Rating (1-5)"),
                            ("YES_NO", "Yes/No"),
                        ],
                        default="TEXT",
                        max_length=20,
                        verbose_name="题目类型",
                    ),
                ),
                ("seq", models.PositiveIntegerField(default=0, verbose_name="排序号")),
                ("is_required", models.BooleanField(default=True, verbose_name="是否必填")),
                (
                    "survey",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="questions",
                        to="surveys.survey",
                        verbose_name="所属问卷",
                    ),
                ),
            ],
            options={
                "verbose_name": "问卷题目",
                "verbose_name_plural": "问卷题目",
                "ordering": ("seq", "id"),
            },
        ),
    ]
