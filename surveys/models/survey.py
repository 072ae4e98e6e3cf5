"""问卷定义。"""

import uuid

from django.db import models

from surveys.choices import SurveyStatus
from users.models.base import TimeStampedModel


class Survey(TimeStampedModel):
    """
    商家创建的问卷。主键使用 UUID，公开扫码地址 `/s/<id>/` 直接暴露该主键。
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    business = models.ForeignKey(
        "users.Business",
        on_delete=models.CASCADE,
        related_name="surveys",
        verbose_name="所属商家",
    )
    name = models.CharField("问卷名称", max_length=200)
    description = models.TextField(
        "问卷说明",
        blank=True,
        help_text="支持 Markdown，展示在顾客填写页顶部。",
    )
    status = models.CharField(
        "问卷状态",
        max_length=20,
        choices=SurveyStatus.choices,
        default=SurveyStatus.ACTIVE,
        db_index=True,
    )

    class Meta:
        verbose_name = "问卷"
        verbose_name_plural = "问卷"
        ordering = ("-created_at",)

    def __str__(self) -> str:
        return self.name

    @property
    def is_active(self) -> bool:
        return self.status == SurveyStatus.ACTIVE
