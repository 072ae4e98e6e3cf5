"""反馈奖励优惠码。"""

from django.db import models
from django.utils import timezone

from incentives.choices import DiscountType
from users.models.base import TimeStampedModel


class DiscountCode(TimeStampedModel):
    """
    【业务说明】顾客提交反馈后获得的优惠码，到店出示后由商家核销。
    【规则】
    - code 全局唯一，由大写字母与数字组成（去掉易混淆的 0/O/1/I）；
    - 一个反馈链接最多对应一张优惠码；
    - 核销是单向操作，核销后不可撤回；
    - expires_at <= 当前时间即视为过期。
    """

    code = models.CharField("优惠码", max_length=32, unique=True)
    discount_type = models.CharField(
        "优惠方式",
        max_length=20,
        choices=DiscountType.choices,
    )
    discount_value = models.DecimalField(
        "优惠数值",
        max_digits=10,
        decimal_places=2,
        help_text="【业务说明】百分比折扣填写 10 表示 10%；固定金额填写减免金额。",
    )
    expires_at = models.DateTimeField("过期时间", null=True, blank=True)
    is_redeemed = models.BooleanField("是否已核销", default=False, db_index=True)
    redeemed_at = models.DateTimeField("核销时间", null=True, blank=True)
    business = models.ForeignKey(
        "users.Business",
        on_delete=models.CASCADE,
        related_name="discount_codes",
        verbose_name="所属商家",
    )
    response_entity = models.OneToOneField(
        "feedback.ResponseEntity",
        on_delete=models.CASCADE,
        related_name="discount_code",
        verbose_name="反馈链接",
    )

    class Meta:
        verbose_name = "优惠码"
        verbose_name_plural = "优惠码"
        ordering = ("-created_at",)
        constraints = [
            models.CheckConstraint(
                condition=models.Q(discount_value__gt=0),
                name="discount_value_positive",
            ),
        ]

    def __str__(self) -> str:
        return self.code

    def is_expired(self, now=None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or timezone.now())

    @property
    def display_value(self) -> str:
        value = self.discount_value.normalize()
        if self.discount_type == DiscountType.PERCENTAGE:
            return f"{value:f}%"
        return f"{value:f} off"
