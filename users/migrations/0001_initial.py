import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import users.managers.custom_user


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="CustomUser",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                (
                    "is_superuser",
                    models.BooleanField(
                        default=False,
                        help_text="Designates that this user has all permissions without explicitly assigning them.",
                        verbose_name="superuser status",
                    ),
                ),
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
                (
                    "email",
                    models.EmailField(
                        help_text="【业务说明】登录凭据，统一存储为小写；【示例】owner@example.com",
                        max_length=254,
                        unique=True,
                        verbose_name="登录邮箱",
                    ),
                ),
                (
                    "name",
                    models.CharField(
                        blank=True,
                        help_text="【业务说明】控制台欢迎语与默认商家名称；【示例】Corner Cafe",
                        max_length=150,
                        verbose_name="显示名称",
                    ),
                ),
                (
                    "role",
                    models.PositiveSmallIntegerField(
                        choices=[(1, "Business owner"), (2, "Platform admin")],
                        default=1,
                        help_text="【业务说明】划分账号角色；【用法】创建时指定。",
                        verbose_name="账号角色",
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(
                        default=True,
                        help_text="【业务说明】控制账号启用状态；停用后不能登录，也不能调用商家接口。",
                        verbose_name="是否启用",
                    ),
                ),
                (
                    "is_staff",
                    models.BooleanField(
                        default=False,
                        help_text="【业务说明】标识可登录 Django Admin。",
                        verbose_name="后台权限",
                    ),
                ),
                ("date_joined", models.DateTimeField(auto_now_add=True, verbose_name="注册时间")),
                (
                    "groups",
                    models.ManyToManyField(
                        blank=True,
                        help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.group",
                        verbose_name="groups",
                    ),
                ),
                (
                    "user_permissions",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Specific permissions for this user.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.permission",
                        verbose_name="user permissions",
                    ),
                ),
            ],
            options={
                "verbose_name": "账号",
                "verbose_name_plural": "账号",
            },
            managers=[
                ("objects", users.managers.custom_user.CustomUserManager()),
            ],
        ),
        migrations.CreateModel(
            name="Business",
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
                ("name", models.CharField(max_length=200, verbose_name="商家名称")),
                (
                    "owner",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="business",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="商家账号",
                    ),
                ),
            ],
            options={
                "verbose_name": "商家",
                "verbose_name_plural": "商家",
                "ordering": ("-created_at",),
            },
        ),
    ]
