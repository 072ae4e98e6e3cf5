import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("surveys", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ResponseEntity",
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
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("QR_INITIATED_SMS", "QR initiated SMS"),
                            ("DIRECT_SMS", "Direct SMS"),
                            ("QR", "QR"),
                        ],
                        max_length=20,
                        verbose_name="来源渠道",
                    ),
                ),
                ("phone_number", models.CharField(blank=True, max_length=20, verbose_name="手机号")),
                (
                    "status",
                    models.CharField(
                        choices=[("PENDING", "Pending"), ("COMPLETED", "Completed")],
                        db_index=True,
                        default="PENDING",
                        max_length=20,
                        verbose_name="状态",
                    ),
                ),
                ("submitted_at", models.DateTimeField(blank=True, null=True, verbose_name="提交时间")),
                (
                    "survey",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="response_entities",
                        to="surveys.survey",
                        verbose_name="所属问卷",
                    ),
                ),
            ],
            options={
                "verbose_name": "反馈链接",
                "verbose_name_plural": "反馈链接",
                "ordering": ("-created_at",),
            },
        ),
        migrations.CreateModel(
            name="Response",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
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
                ("value", models.TextField(verbose_name="答案")),
                (
                    "question",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="responses",
                        to="surveys.question",
                        verbose_name="题目",
                    ),
                ),
                (
                    "response_entity",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="responses",
                        to="feedback.responseentity",
                        verbose_name="反馈链接",
                    ),
                ),
            ],
            options={
                "verbose_name": "反馈答案",
                "verbose_name_plural": "反馈答案",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("response_entity", "question"),
                        name="uniq_response_per_question",
                    )
                ],
            },
        ),
    ]
