"""
【业务说明】商家控制台的问卷管理页面：列表、创建、详情（含反馈查看）、删除、状态切换、二维码与短信邀请。
"""

import logging

from django.conf import settings
from django.contrib import messages
from django.http import Http404, HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_POST

from feedback.services.distribution import DistributionError, send_direct_feedback_sms
from surveys.forms import QuestionFormSet, SmsInviteForm, SurveyForm, SurveyStatusForm
from surveys.services import (
    QuestionInput,
    SurveyNotFoundError,
    SurveyServiceError,
    SurveyValidationError,
    build_public_survey_url,
    build_survey_qr_png,
    create_survey,
    delete_survey,
    get_survey,
    list_surveys,
    set_survey_status,
)
from users.decorators import check_business_owner

logger = logging.getLogger(__name__)


def _base_url() -> str:
    return getattr(settings, "WEB_BASE_URL", "").rstrip("/")


@check_business_owner
@require_GET
def survey_list_view(request: HttpRequest) -> HttpResponse:
    surveys = list_surveys(user=request.user)
    return render(request, "surveys/list.html", {"surveys": surveys})


@check_business_owner
def survey_create_view(request: HttpRequest) -> HttpResponse:
    """创建问卷：问卷基本信息 + 题目表单集。"""

    form = SurveyForm(request.POST or None)
    formset = QuestionFormSet(request.POST or None, prefix="questions")

    if request.method == "POST" and form.is_valid() and formset.is_valid():
        questions = [
            QuestionInput(
                text=item["text"],
                q_type=item["q_type"],
                is_required=item.get("is_required", False),
            )
            for item in formset.cleaned_data
            if item and not item.get("DELETE")
        ]
        try:
            survey = create_survey(
                user=request.user,
                name=form.cleaned_data["name"],
                description=form.cleaned_data["description"],
                questions=questions,
            )
        except SurveyValidationError as exc:
            for field, errors in exc.errors.items():
                for error in errors:
                    form.add_error(field if field in form.fields else None, error)
        else:
            messages.success(request, "Survey created successfully!")
            return redirect("surveys:detail", survey_id=survey.id)

    return render(request, "surveys/form.html", {"form": form, "formset": formset})


@check_business_owner
@require_GET
def survey_detail_view(request: HttpRequest, survey_id) -> HttpResponse:
    """问卷详情：题目、已发放的反馈链接及其答案、二维码与短信邀请入口。"""

    try:
        survey = get_survey(user=request.user, survey_id=survey_id)
    except SurveyNotFoundError:
        raise Http404("Survey not found")

    return render(
        request,
        "surveys/detail.html",
        {
            "survey": survey,
            "public_url": build_public_survey_url(survey, _base_url()),
            "sms_form": SmsInviteForm(),
            "status_form": SurveyStatusForm(initial={"status": survey.status}),
        },
    )


@check_business_owner
@require_POST
def survey_delete_view(request: HttpRequest, survey_id) -> HttpResponse:
    try:
        delete_survey(user=request.user, survey_id=survey_id)
    except SurveyNotFoundError:
        raise Http404("Survey not found")
    messages.success(request, "Survey deleted.")
    return redirect("surveys:list")


@check_business_owner
@require_POST
def survey_status_view(request: HttpRequest, survey_id) -> HttpResponse:
    form = SurveyStatusForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Please select a valid status.")
        return redirect("surveys:detail", survey_id=survey_id)
    try:
        survey = set_survey_status(
            user=request.user,
            survey_id=survey_id,
            status=form.cleaned_data["status"],
        )
    except SurveyNotFoundError:
        raise Http404("Survey not found")
    messages.success(request, f"Survey is now {survey.get_status_display()}.")
    return redirect("surveys:detail", survey_id=survey.id)


@check_business_owner
@require_GET
def survey_qrcode_view(request: HttpRequest, survey_id) -> HttpResponse:
    """返回问卷落地页二维码 PNG，仅启用中的问卷可生成。"""

    try:
        survey = get_survey(user=request.user, survey_id=survey_id)
    except SurveyNotFoundError:
        raise Http404("Survey not found")
    if not survey.is_active:
        raise Http404("Survey is not active")

    response = HttpResponse(build_survey_qr_png(survey, _base_url()), content_type="image/png")
    response["Content-Disposition"] = f'inline; filename="survey_{survey.id}.png"'
    return response


@check_business_owner
@require_POST
def survey_send_sms_view(request: HttpRequest, survey_id) -> HttpResponse:
    """商家向顾客手机号直接发送反馈链接。"""

    form = SmsInviteForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Please enter a phone number.")
        return redirect("surveys:detail", survey_id=survey_id)

    try:
        send_direct_feedback_sms(
            user=request.user,
            survey_id=survey_id,
            phone_number=form.cleaned_data["phone_number"],
        )
    except (DistributionError, SurveyServiceError) as exc:
        logger.info("短信邀请未发送: survey_id=%s reason=%s", survey_id, exc.code)
        messages.error(request, str(exc))
    else:
        messages.success(request, "Feedback link sent.")
    return redirect("surveys:detail", survey_id=survey_id)
