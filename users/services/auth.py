"""
Auth-related service utilities.
"""

import logging
from typing import Optional, Tuple, Union

from django.contrib.auth import authenticate, login
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction

from users import choices
from users.models import Business, CustomUser

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 6


class AuthService:
    """统一处理商家注册、登录与商家档案查询，保证 Session 状态一致。"""

    def register(
        self, name: str, email: str, password: str
    ) -> Tuple[bool, Union[CustomUser, str]]:
        """
        【业务说明】商家自助注册，创建 BUSINESS_OWNER 账号。
        【参数】name: 显示名称（至少 2 个字符）；email: 登录邮箱；password: 至少 6 位。
        【返回值】(True, user) 或 (False, 错误提示)。
        """

        name = (name or "").strip()
        email = (email or "").strip().lower()
        if len(name) < MIN_NAME_LENGTH:
            return False, "Name must be at least 2 characters"
        try:
            validate_email(email)
        except ValidationError:
            return False, "Please enter a valid email address"
        if len(password or "") < MIN_PASSWORD_LENGTH:
            return False, "Password must be at least 6 characters"

        if CustomUser.objects.filter(email__iexact=email).exists():
            return False, "Email already in use. Please use a different email or sign in."

        try:
            user = CustomUser.objects.create_user(
                email=email,
                password=password,
                name=name,
                role=choices.UserRole.BUSINESS_OWNER,
                is_active=True,
            )
        except (IntegrityError, ValidationError):
            logger.exception("注册失败: email=%s", email)
            return False, "Failed to create account. Please try again later."

        logger.info("商家注册成功: user_id=%s", user.id)
        return True, user

    def pc_login(self, request, email: str, password: str) -> Tuple[bool, Union[CustomUser, str]]:
        """邮箱 + 密码登录，走 Django 认证体系。停用账号给出明确提示。"""

        email = (email or "").strip().lower()
        if not email or not password:
            return False, "Please enter your email and password"

        account = CustomUser.objects.filter(email__iexact=email).first()
        if not account:
            return False, "Invalid email or password"
        if not account.is_active:
            return False, "Your account has been deactivated. Please contact support."

        user = authenticate(request, username=account.email, password=password)
        if not user:
            return False, "Invalid email or password"
        login(request, user)
        return True, user

    @staticmethod
    def is_active_business_owner(user) -> bool:
        """
        【业务说明】商家接口的统一身份判断：已登录、账号启用且角色为商家。
        【返回值】bool。
        """

        return bool(
            user is not None
            and getattr(user, "is_authenticated", False)
            and getattr(user, "is_active", False)
            and getattr(user, "role", None) == choices.UserRole.BUSINESS_OWNER
        )

    @staticmethod
    def get_business_for_user(user) -> Optional[Business]:
        """返回账号名下的商家档案，未建档返回 None。"""

        if user is None or not getattr(user, "pk", None):
            return None
        return Business.objects.filter(owner_id=user.pk).first()

    @staticmethod
    def get_or_create_business(user) -> Business:
        """
        【业务说明】根据账号获取或创建商家档案，商家名称默认取账号名称或邮箱。
        【使用场景】首次创建问卷时。
        """

        with transaction.atomic():
            business, created = Business.objects.get_or_create(
                owner=user,
                defaults={"name": user.display_name},
            )
        if created:
            logger.info("自动创建商家档案: business_id=%s user_id=%s", business.id, user.id)
        return business
