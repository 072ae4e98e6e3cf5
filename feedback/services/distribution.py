"""
反馈链接分发服务：商家短信直发、顾客扫码直接填写、顾客扫码后短信获取链接。

每次分发都会生成一个 PENDING 状态的 ResponseEntity，其主键即链接令牌。
需要发短信的场景，先生成链接再发短信；短信请求不占用数据库事务，发送失败时删除该链接，不留下无效记录。
"""

import logging
import re
import uuid
from dataclasses import dataclass

from django.conf import settings

from feedback.choices import ResponseStatus, ResponseType
from feedback.models import ResponseEntity
from messaging.services import SMSService
from surveys.choices import SurveyStatus
from surveys.models import Survey
from surveys.services import get_active_survey
from users.services import AuthService

logger = logging.getLogger(__name__)

PHONE_NUMBER_RE = re.compile(r"^\+?[0-9]{10,15}$")


class DistributionError(Exception):
    """分发相关业务异常基类。"""

    code = "distribution_error"


class DistributionAccessDeniedError(DistributionError):
    code = "access_denied"

    def __init__(self, message: str = "Unauthorized. Only active business owners can send SMS invites."):
        super().__init__(message)


class InvalidPhoneNumberError(DistributionError):
    code = "validation_error"

    def __init__(
        self,
        message: str = "Invalid phone number format. Use international format (e.g., +998123456789)",
    ):
        super().__init__(message)


class DistributionSurveyNotFoundError(DistributionError):
    code = "survey_not_found"

    def __init__(self, message: str = "Survey not found, inactive, or does not belong to your business"):
        super().__init__(message)


class SmsRateLimitedError(DistributionError):
    code = "rate_limited"

    def __init__(self, message: str = "Too many requests. Please wait a minute and try again."):
        super().__init__(message)


class SmsDeliveryError(DistributionError):
    code = "sms_failed"

    def __init__(self, message: str = "Failed to send SMS invitation. Please try again."):
        super().__init__(message)


@dataclass(frozen=True)
class DistributionResult:
    response_entity: ResponseEntity
    feedback_url: str


def build_feedback_url(response_entity_id) -> str:
    base_url = getattr(settings, "WEB_BASE_URL", "").rstrip("/")
    return f"{base_url}/feedback/{response_entity_id}/"


def normalize_phone_number(phone_number: str) -> str:
    """去除首尾空白并校验格式：可选 `+` 后接 10~15 位数字。"""

    phone_number = (phone_number or "").strip()
    if not PHONE_NUMBER_RE.match(phone_number):
        raise InvalidPhoneNumberError()
    return phone_number


def _create_and_send(survey: Survey, response_type: str, phone_number: str) -> DistributionResult:
    entity = ResponseEntity.objects.create(
        survey=survey,
        type=response_type,
        status=ResponseStatus.PENDING,
        phone_number=phone_number,
    )
    url = build_feedback_url(entity.id)
    body = (
        f"You've been invited to provide feedback for {survey.name}. "
        f"Please click this link: {url}"
    )
    try:
        success, error = SMSService.send_message(phone_number, body)
    except Exception:
        entity.delete()
        raise
    if not success:
        entity.delete()
        logger.warning(
            "反馈邀请短信发送失败，已删除链接: survey_id=%s type=%s error=%s",
            survey.id,
            response_type,
            error,
        )
        raise SmsDeliveryError()

    logger.info(
        "反馈邀请短信已发送: survey_id=%s response_entity_id=%s type=%s",
        survey.id,
        entity.id,
        response_type,
    )
    return DistributionResult(response_entity=entity, feedback_url=url)


def send_direct_feedback_sms(*, user, survey_id, phone_number: str) -> DistributionResult:
    """
    【业务说明】商家向顾客手机号发送一次性反馈链接（DIRECT_SMS），顾客提交后可获得优惠码。
    【参数】user: 当前商家账号；survey_id: 问卷 ID；phone_number: 顾客手机号。
    【返回值】DistributionResult（新建的链接与完整 URL）。
    【异常】DistributionAccessDeniedError、InvalidPhoneNumberError、
           DistributionSurveyNotFoundError、SmsDeliveryError。
    """

    if not AuthService.is_active_business_owner(user):
        raise DistributionAccessDeniedError()
    phone_number = normalize_phone_number(phone_number)

    business = AuthService.get_business_for_user(user)
    if business is None:
        raise DistributionSurveyNotFoundError("Business profile not found")

    pk = _parse_uuid(survey_id)
    survey = (
        Survey.objects.filter(pk=pk, business=business, status=SurveyStatus.ACTIVE).first()
        if pk
        else None
    )
    if survey is None:
        raise DistributionSurveyNotFoundError()

    return _create_and_send(survey, ResponseType.DIRECT_SMS, phone_number)


def start_qr_response(survey_id) -> ResponseEntity:
    """
    【业务说明】顾客扫码后选择直接填写：为启用中的问卷生成一个 QR 类型的链接。
    【异常】DistributionSurveyNotFoundError。
    """

    survey = get_active_survey(survey_id)
    if survey is None:
        raise DistributionSurveyNotFoundError("Survey not found or is inactive.")

    entity = ResponseEntity.objects.create(
        survey=survey,
        type=ResponseType.QR,
        status=ResponseStatus.PENDING,
    )
    logger.info("扫码反馈链接已生成: survey_id=%s response_entity_id=%s", survey.id, entity.id)
    return entity


def request_qr_sms_link(survey_id, phone_number: str) -> DistributionResult:
    """
    【业务说明】顾客扫码后填写手机号，通过短信获取链接（QR_INITIATED_SMS）。
    同一手机号在限流间隔内只能请求一次。
    【异常】InvalidPhoneNumberError、DistributionSurveyNotFoundError、SmsRateLimitedError、SmsDeliveryError。
    """

    phone_number = normalize_phone_number(phone_number)
    survey = get_active_survey(survey_id)
    if survey is None:
        raise DistributionSurveyNotFoundError("Survey not found or is inactive.")

    if not SMSService.check_rate_limit(phone_number):
        raise SmsRateLimitedError()

    try:
        return _create_and_send(survey, ResponseType.QR_INITIATED_SMS, phone_number)
    except SmsDeliveryError:
        SMSService.release_rate_limit(phone_number)
        raise


def _parse_uuid(value):
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None
