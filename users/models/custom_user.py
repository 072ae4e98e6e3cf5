from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from users import choices
from users.managers import CustomUserManager
from users.models.base import TimeStampedModel


class CustomUser(TimeStampedModel, AbstractBaseUser, PermissionsMixin):
    """
    【业务说明】平台登录账号：商家（问卷创建者、优惠码核销方）与平台管理员。
    【用法】通过 Django 认证体系创建与登录，邮箱即登录名。
    【使用示例】`CustomUser.objects.create_user(email="owner@example.com", password="secret1")`。
    """

    email = models.EmailField(
        "登录邮箱",
        max_length=254,
        unique=True,
        help_text="【业务说明】登录凭据，统一存储为小写；【示例】owner@example.com",
    )
    name = models.CharField(
        "显示名称",
        max_length=150,
        blank=True,
        help_text="【业务说明】控制台欢迎语与默认商家名称；【示例】Corner Cafe",
    )
    role = models.PositiveSmallIntegerField(
        "账号角色",
        choices=choices.UserRole.choices,
        default=choices.UserRole.BUSINESS_OWNER,
        help_text="【业务说明】划分账号角色；【用法】创建时指定。",
    )
    is_active = models.BooleanField(
        "是否启用",
        default=True,
        help_text="【业务说明】控制账号启用状态；停用后不能登录，也不能调用商家接口。",
    )
    is_staff = models.BooleanField(
        "后台权限",
        default=False,
        help_text="【业务说明】标识可登录 Django Admin。",
    )
    date_joined = models.DateTimeField("注册时间", auto_now_add=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS: list[str] = []

    class Meta:
        verbose_name = "账号"
        verbose_name_plural = "账号"

    def __str__(self) -> str:
        return f"{self.display_name}({self.get_role_display()})"

    @property
    def display_name(self) -> str:
        """控制台展示用称呼，优先名称否则邮箱。"""

        return self.name or self.email

    @property
    def is_business_owner(self) -> bool:
        return self.role == choices.UserRole.BUSINESS_OWNER
