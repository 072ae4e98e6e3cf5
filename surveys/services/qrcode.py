"""问卷二维码生成，使用 segno 输出 PNG。"""

import io

import segno

from surveys.models import Survey


def build_public_survey_url(survey: Survey, base_url: str) -> str:
    """顾客扫码后打开的公开落地页地址：`{base_url}/s/<survey_id>/`。"""

    return f"{base_url.rstrip('/')}/s/{survey.id}/"


def build_survey_qr_png(survey: Survey, base_url: str, scale: int = 6) -> bytes:
    """
    【业务说明】生成问卷落地页的二维码图片，供商家打印张贴。
    【参数】survey: 问卷；base_url: 对外站点根地址；scale: 模块像素倍数。
    【返回值】PNG 二进制内容。
    """

    qr = segno.make(build_public_survey_url(survey, base_url))
    buffer = io.BytesIO()
    qr.save(buffer, kind="png", scale=scale)
    return buffer.getvalue()
