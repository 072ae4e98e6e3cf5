"""单次有效的反馈链接。"""

import uuid

from django.db import models

from feedback.choices import ResponseStatus, ResponseType
from users.models.base import TimeStampedModel


class ResponseEntity(TimeStampedModel):
    """
    【业务说明】一次反馈机会。主键即链接令牌：`/feedback/<id>/`，提交成功后状态变为 COMPLETED，
    链接随即失效。
    【使用示例】商家短信直发（DIRECT_SMS）、扫码后短信下发（QR_INITIATED_SMS）、扫码直接填写（QR）。
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    survey = models.ForeignKey(
        "surveys.Survey",
        on_delete=models.CASCADE,
        related_name="response_entities",
        verbose_name="所属问卷",
    )
    type = models.CharField(
        "来源渠道",
        max_length=20,
        choices=ResponseType.choices,
    )
    phone_number = models.CharField("手机号", max_length=20, blank=True)
    status = models.CharField(
        "状态",
        max_length=20,
        choices=ResponseStatus.choices,
        default=ResponseStatus.PENDING,
        db_index=True,
    )
    submitted_at = models.DateTimeField("提交时间", null=True, blank=True)

    class Meta:
        verbose_name = "反馈链接"
        verbose_name_plural = "反馈链接"
        ordering = ("-created_at",)

    def __str__(self) -> str:
        return f"{self.get_type_display()} {self.id}"
