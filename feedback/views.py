"""
【业务说明】顾客侧公开页面：扫码落地页、反馈填写页与提交接口。无需登录。
"""

import json
import logging

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.utils.safestring import mark_safe
from django.views.decorators.http import require_POST

from feedback.forms import FeedbackAnswerForm, QrSmsRequestForm
from feedback.models import ResponseEntity
from feedback.schemas import parse_submit_feedback
from feedback.services import (
    AlreadySubmittedError,
    FeedbackSubmissionError,
    InvalidLinkError,
    InvalidQuestionError,
    SurveyInactiveError,
    SurveyMismatchError,
    get_feedback_link,
    submit_feedback,
)
from feedback.services.distribution import (
    DistributionError,
    InvalidPhoneNumberError,
    SmsDeliveryError,
    SmsRateLimitedError,
    request_qr_sms_link,
    start_qr_response,
)
from surveys.services import get_active_survey, render_survey_description

logger = logging.getLogger(__name__)

OWNER_SUBMISSION_MESSAGE = "This is a feedback link for your own survey. Only customers can submit it."

_SUBMISSION_ERROR_STATUS = (
    (InvalidLinkError, 404),
    (SurveyInactiveError, 404),
    (AlreadySubmittedError, 409),
    (SurveyMismatchError, 400),
    (InvalidQuestionError, 400),
)


def _submission_status(exc: FeedbackSubmissionError) -> int:
    for exc_class, status in _SUBMISSION_ERROR_STATUS:
        if isinstance(exc, exc_class):
            return status
    return 400


def _serialize_discount(discount) -> dict | None:
    if discount is None:
        return None
    return {
        "code": discount.code,
        "discount_type": discount.discount_type,
        "discount_value": str(discount.discount_value),
        "display_value": discount.display_value,
        "expires_at": discount.expires_at.isoformat() if discount.expires_at else None,
    }


def _is_survey_owner(request: HttpRequest, survey) -> bool:
    user = request.user
    return bool(user.is_authenticated and survey.business.owner_id == user.pk)


def _owns_link(request: HttpRequest, response_entity_id) -> bool:
    user = request.user
    if not user.is_authenticated:
        return False
    return ResponseEntity.objects.filter(pk=response_entity_id, survey__business__owner_id=user.pk).exists()


def _render_link_error(request: HttpRequest, exc: FeedbackSubmissionError) -> HttpResponse:
    return render(
        request,
        "feedback/link_error.html",
        {"message": str(exc), "error": exc.code},
        status=_submission_status(exc),
    )


def _render_form(request, entity, form, status=200) -> HttpResponse:
    survey = entity.survey
    return render(
        request,
        "feedback/form.html",
        {
            "entity": entity,
            "survey": survey,
            "description_html": mark_safe(render_survey_description(survey.description)),
            "form": form,
            "is_owner": _is_survey_owner(request, survey),
        },
        status=status,
    )


def public_survey_view(request: HttpRequest, survey_id) -> HttpResponse:
    """
    扫码落地页 `/s/<survey_id>/`：
    - POST action=start：生成 QR 链接并跳转填写页；
    - POST action=sms：填写手机号，短信获取链接（QR_INITIATED_SMS）。
    """

    survey = get_active_survey(survey_id)
    if survey is None:
        return render(
            request,
            "feedback/link_error.html",
            {"message": "Survey not found or is inactive.", "error": "survey_inactive"},
            status=404,
        )

    sms_form = QrSmsRequestForm()
    sms_sent = False
    status = 200

    if request.method == "POST":
        action = request.POST.get("action")
        if action == "start":
            try:
                entity = start_qr_response(survey.id)
            except DistributionError as exc:
                return render(
                    request,
                    "feedback/link_error.html",
                    {"message": str(exc), "error": exc.code},
                    status=404,
                )
            return redirect("feedback:form", response_entity_id=entity.id)

        if action == "sms":
            sms_form = QrSmsRequestForm(request.POST)
            if sms_form.is_valid():
                try:
                    request_qr_sms_link(survey.id, sms_form.cleaned_data["phone_number"])
                except InvalidPhoneNumberError as exc:
                    sms_form.add_error("phone_number", str(exc))
                    status = 400
                except SmsRateLimitedError as exc:
                    sms_form.add_error(None, str(exc))
                    status = 429
                except SmsDeliveryError as exc:
                    sms_form.add_error(None, str(exc))
                    status = 502
                except DistributionError as exc:
                    sms_form.add_error(None, str(exc))
                    status = 404
                else:
                    sms_sent = True
            else:
                status = 400

    return render(
        request,
        "feedback/public_survey.html",
        {
            "survey": survey,
            "description_html": mark_safe(render_survey_description(survey.description)),
            "sms_form": sms_form,
            "sms_sent": sms_sent,
        },
        status=status,
    )


def feedback_form_view(request: HttpRequest, response_entity_id) -> HttpResponse:
    """
    反馈填写页 `/feedback/<id>/`。链接无效、已提交或问卷未启用时展示说明；
    商家查看自己问卷的链接时只展示提示，不展示表单。
    """

    try:
        entity = get_feedback_link(response_entity_id)
    except FeedbackSubmissionError as exc:
        return _render_link_error(request, exc)

    form = FeedbackAnswerForm(entity.survey.questions.all())
    return _render_form(request, entity, form)


def _submit_json(request: HttpRequest, response_entity_id) -> JsonResponse:
    try:
        payload = json.loads(request.body.decode("utf-8") or "{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None
    if not isinstance(payload, dict):
        return JsonResponse({"code": 400, "error": "validation_error", "message": "Invalid request body"}, status=400)

    submit_request, errors = parse_submit_feedback(
        {
            "survey_id": payload.get("survey_id"),
            "response_entity_id": str(response_entity_id),
            "answers": payload.get("answers"),
        }
    )
    if errors:
        return JsonResponse(
            {"code": 400, "error": "validation_error", "message": "Validation failed", "details": errors},
            status=400,
        )

    try:
        result = submit_feedback(submit_request)
    except FeedbackSubmissionError as exc:
        status = _submission_status(exc)
        return JsonResponse({"code": status, "error": exc.code, "message": str(exc)}, status=status)

    return JsonResponse(
        {
            "code": 200,
            "message": "Feedback submitted successfully.",
            "data": {
                "response_entity_id": str(result.response_entity.id),
                "discount_code": _serialize_discount(result.discount_code),
            },
        }
    )


@require_POST
def submit_feedback_view(request: HttpRequest, response_entity_id) -> HttpResponse:
    """
    提交反馈。JSON 请求返回 JSON；表单请求成功后渲染感谢页（含优惠码），失败则带错误重新渲染表单。
    """

    # 商家本人不可提交自己问卷的链接
    if _owns_link(request, response_entity_id):
        if request.content_type == "application/json":
            return JsonResponse(
                {"code": 403, "error": "owner_submission", "message": OWNER_SUBMISSION_MESSAGE},
                status=403,
            )
        return render(
            request,
            "feedback/link_error.html",
            {"message": OWNER_SUBMISSION_MESSAGE, "error": "owner_submission"},
            status=403,
        )

    if request.content_type == "application/json":
        return _submit_json(request, response_entity_id)

    try:
        entity = get_feedback_link(response_entity_id)
    except FeedbackSubmissionError as exc:
        return _render_link_error(request, exc)

    form = FeedbackAnswerForm(entity.survey.questions.all(), request.POST)
    if not form.is_valid():
        return _render_form(request, entity, form, status=400)

    submit_request, errors = parse_submit_feedback(
        {
            "survey_id": str(entity.survey_id),
            "response_entity_id": str(entity.id),
            "answers": form.answers(),
        }
    )
    if errors:
        form.add_error(None, "Please answer at least one question.")
        return _render_form(request, entity, form, status=400)

    try:
        result = submit_feedback(submit_request)
    except FeedbackSubmissionError as exc:
        return _render_link_error(request, exc)

    return render(
        request,
        "feedback/thanks.html",
        {"survey": entity.survey, "discount_code": result.discount_code},
    )
