from django.db import models


class UserRole(models.IntegerChoices):
    """【业务说明】区分不同账号角色；【用法】CustomUser.role；【使用示例】UserRole.BUSINESS_OWNER。"""

    BUSINESS_OWNER = 1, "Business owner"
    ADMIN = 2, "Platform admin"
