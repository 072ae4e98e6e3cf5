from django.db import models


class ResponseType(models.TextChoices):
    """
    【业务说明】反馈链接的来源渠道。
    - QR_INITIATED_SMS：顾客扫码后填写手机号，系统短信下发链接；
    - DIRECT_SMS：商家在控制台直接向顾客手机号发送链接；
    - QR：顾客扫码后直接开始填写。
    """

    QR_INITIATED_SMS = "QR_INITIATED_SMS", "QR initiated SMS"
    DIRECT_SMS = "DIRECT_SMS", "Direct SMS"
    QR = "QR", "QR"


class ResponseStatus(models.TextChoices):
    """【业务说明】反馈链接状态；只能从 PENDING 单向变为 COMPLETED。"""

    PENDING = "PENDING", "Pending"
    COMPLETED = "COMPLETED", "Completed"
