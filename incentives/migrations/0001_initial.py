import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("feedback", "0001_initial"),
        ("users", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="DiscountCode",
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
                ("code", models.CharField(max_length=32, unique=True, verbose_name="优惠码")),
                (
                    "discount_type",
                    models.CharField(
                        choices=[("PERCENTAGE", "Percentage"), ("FIXED_AMOUNT", "Fixed amount")],
                        max_length=20,
                        verbose_name="优惠方式",
                    ),
                ),
                (
                    "discount_value",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="【业务说明】百分比折扣填写 10 表示 10%；固定金额填写减免金额。",
                        max_digits=10,
                        verbose_name="优惠数值",
                    ),
                ),
                ("expires_at", models.DateTimeField(blank=True, null=True, verbose_name="过期时间")),
                ("is_redeemed", models.BooleanField(db_index=True, default=False, verbose_name="是否已核销")),
                ("redeemed_at", models.DateTimeField(blank=True, null=True, verbose_name="核销时间")),
                (
                    "business",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="discount_codes",
                        to="users.business",
                        verbose_name="所属商家",
                    ),
                ),
                (
                    "response_entity",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="discount_code",
                        to="feedback.responseentity",
                        verbose_name="反馈链接",
                    ),
                ),
            ],
            options={
                "verbose_name": "优惠码",
                "verbose_name_plural": "优惠码",
                "ordering": ("-created_at",),
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("discount_value__gt", 0)),
                        name="discount_value_positive",
                    )
                ],
            },
        ),
    ]
