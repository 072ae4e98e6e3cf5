from django.db import models


class DiscountType(models.TextChoices):
    """【业务说明】优惠方式：按比例折扣或固定金额减免。"""

    PERCENTAGE = "PERCENTAGE", "Percentage"
    FIXED_AMOUNT = "FIXED_AMOUNT", "Fixed amount"


class DiscountCodeStatusFilter(models.TextChoices):
    """
    【业务说明】优惠码列表的筛选项。
    - ACTIVE：未核销且未过期（无过期时间视为长期有效）；
    - REDEEMED：已核销；
    - EXPIRED：未核销且已过期（过期时刻本身算作已过期）。
    """

    ALL = "all", "All"
    ACTIVE = "active", "Active"
    REDEEMED = "redeemed", "Redeemed"
    EXPIRED = "expired", "Expired"
