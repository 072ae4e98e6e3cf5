from django.conf import settings
from django.db import models

from users.models.base import TimeStampedModel


class Business(TimeStampedModel):
    """
    【业务说明】商家档案。一个商家账号对应一个商家，问卷与优惠码均归属商家。
    【用法】首次创建问卷时自动建档，见 `AuthService.get_or_create_business`。
    """

    owner = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="business",
        verbose_name="商家账号",
    )
    name = models.CharField("商家名称", max_length=200)

    class Meta:
        verbose_name = "商家"
        verbose_name_plural = "商家"
        ordering = ("-created_at",)

    def __str__(self) -> str:
        return self.name
