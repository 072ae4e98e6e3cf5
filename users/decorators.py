"""
【业务说明】提供商家控制台视图的权限装饰器，防止非商家账号访问。
【用法】在函数视图上添加装饰器，例如 `@check_business_owner`。
【规范】实现依赖 Django 官方的 `user_passes_test`，未登录跳转登录页，权限不足抛 403。
"""

from typing import Callable, Iterable

from django.conf import settings
from django.contrib.auth.decorators import user_passes_test
from django.core.exceptions import PermissionDenied
from django.http import HttpRequest, HttpResponse

from users import choices

ViewFunc = Callable[[HttpRequest], HttpResponse]


LOGIN_URL = getattr(settings, "LOGIN_URL", "users:login")
"""登录地址，供未认证用户重定向使用。"""


def _user_role_guard(user, allowed_roles: Iterable[int]) -> bool:
    """
    【业务说明】统一封装权限判断，满足“未登录 -> False；已登录但停用或角色不符 -> PermissionDenied；通过 -> True”。
    【用法】作为 `user_passes_test` 的 test_func。
    """

    if not getattr(user, "is_authenticated", False):
        return False

    if not getattr(user, "is_active", False):
        raise PermissionDenied("Account is inactive")

    if getattr(user, "role", None) not in allowed_roles:
        raise PermissionDenied("Access denied")

    return True


def _build_role_decorator(*roles: int) -> Callable[[ViewFunc], ViewFunc]:
    """动态生成角色校验装饰器。"""

    def decorator(view_func: ViewFunc) -> ViewFunc:
        return user_passes_test(
            lambda user: _user_role_guard(user, roles),
            login_url=LOGIN_URL,
        )(view_func)

    return decorator


def check_business_owner(view_func: ViewFunc) -> ViewFunc:
    """
    【业务说明】限制仅启用状态的商家访问（问卷管理、优惠码管理）。
    【用法】`@check_business_owner`。
    """

    return _build_role_decorator(choices.UserRole.BUSINESS_OWNER)(view_func)


__all__ = [
    "check_business_owner",
]
