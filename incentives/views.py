"""
【业务说明】商家优惠码管理：控制台页面（列表 + 核销表单）与 JSON 接口（查询、核销、补发）。
"""

import json
import logging

from django.contrib import messages
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from django.views.decorators.http import require_GET, require_POST

from incentives.forms import DiscountCodeFilterForm, RedeemDiscountCodeForm
from incentives.models import DiscountCode
from incentives.services import (
    AlreadyRedeemedError,
    BusinessNotFoundError,
    CodeAlreadyIssuedError,
    CodeExpiredError,
    CodeNotFoundError,
    CodeUnavailableError,
    DiscountAccessDeniedError,
    DiscountServiceError,
    DiscountValidationError,
    ResponseNotReadyError,
    issue_discount_code_for_owner,
    list_discount_codes,
    redeem_discount_code,
)
from users.decorators import check_business_owner
from users.services import AuthService

logger = logging.getLogger(__name__)

_ERROR_STATUS = (
    (DiscountValidationError, 400),
    (DiscountAccessDeniedError, 403),
    (CodeNotFoundError, 404),
    (BusinessNotFoundError, 404),
    (ResponseNotReadyError, 404),
    (CodeAlreadyIssuedError, 409),
    (AlreadyRedeemedError, 409),
    (CodeExpiredError, 409),
    (CodeUnavailableError, 503),
)


def _status_for(exc: DiscountServiceError) -> int:
    for exc_class, status in _ERROR_STATUS:
        if isinstance(exc, exc_class):
            return status
    return 400


def _serialize_code(discount: DiscountCode) -> dict:
    entity = discount.response_entity
    return {
        "id": discount.id,
        "code": discount.code,
        "discount_type": discount.discount_type,
        "discount_value": str(discount.discount_value),
        "expires_at": discount.expires_at.isoformat() if discount.expires_at else None,
        "is_redeemed": discount.is_redeemed,
        "redeemed_at": discount.redeemed_at.isoformat() if discount.redeemed_at else None,
        "created_at": discount.created_at.isoformat() if discount.created_at else None,
        "response_entity": {
            "id": str(entity.id),
            "type": entity.type,
            "phone_number": entity.phone_number,
            "submitted_at": entity.submitted_at.isoformat() if entity.submitted_at else None,
        },
    }


def _error_json(exc: DiscountServiceError) -> JsonResponse:
    status = _status_for(exc)
    payload = {"code": status, "error": exc.code, "message": str(exc)}
    existing = getattr(exc, "discount_code", None)
    if existing is not None:
        payload["data"] = _serialize_code(existing)
    return JsonResponse(payload, status=status)


def _load_json(request: HttpRequest):
    try:
        payload = json.loads(request.body.decode("utf-8") or "{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return payload if isinstance(payload, dict) else None


def _business_id_for(request: HttpRequest, requested=None):
    if requested not in (None, ""):
        return requested
    business = AuthService.get_business_for_user(request.user)
    return business.pk if business else None


@check_business_owner
@require_GET
def incentives_dashboard_view(request: HttpRequest) -> HttpResponse:
    """优惠码管理页：状态筛选 + 分页列表 + 核销表单。"""

    business = AuthService.get_business_for_user(request.user)
    filter_form = DiscountCodeFilterForm(request.GET or None)
    status, page_number = "all", 1
    if filter_form.is_valid():
        status = filter_form.cleaned_data.get("status") or "all"
        page_number = filter_form.cleaned_data.get("page") or 1

    page = None
    if business is not None:
        try:
            page = list_discount_codes(
                user=request.user,
                business_id=business.pk,
                status=status,
                page=page_number,
                limit=10,
            )
        except DiscountServiceError as exc:
            messages.error(request, str(exc))

    return render(
        request,
        "incentives/dashboard.html",
        {
            "business": business,
            "page": page,
            "status": status,
            "filter_form": filter_form,
            "redeem_form": RedeemDiscountCodeForm(),
        },
    )


@check_business_owner
@require_POST
def redeem_code_view(request: HttpRequest) -> HttpResponse:
    form = RedeemDiscountCodeForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Please enter a discount code.")
        return redirect("incentives:dashboard")

    try:
        result = redeem_discount_code(
            user=request.user,
            business_id=_business_id_for(request),
            code=form.cleaned_data["code"],
        )
    except DiscountServiceError as exc:
        messages.error(request, str(exc))
    else:
        messages.success(request, f"{result.message}: {result.discount_code.code}")
    return redirect("incentives:dashboard")


@check_business_owner
@require_GET
def list_codes_api(request: HttpRequest) -> JsonResponse:
    """GET ?status=all|active|redeemed|expired&page=1&limit=10[&business_id=]"""

    try:
        page = list_discount_codes(
            user=request.user,
            business_id=_business_id_for(request, request.GET.get("business_id")),
            status=request.GET.get("status", "all"),
            page=request.GET.get("page", 1),
            limit=request.GET.get("limit", 10),
        )
    except DiscountServiceError as exc:
        return _error_json(exc)

    return JsonResponse(
        {
            "code": 200,
            "data": {
                "items": [_serialize_code(item) for item in page.items],
                "pagination": {
                    "total": page.total,
                    "page": page.page,
                    "limit": page.limit,
                    "total_pages": page.total_pages,
                },
            },
        }
    )


@check_business_owner
@require_POST
def redeem_code_api(request: HttpRequest) -> JsonResponse:
    """POST {"code": "...", "business_id": 可选}"""

    payload = _load_json(request)
    if payload is None:
        return JsonResponse({"code": 400, "error": "validation_error", "message": "Invalid request body"}, status=400)

    try:
        result = redeem_discount_code(
            user=request.user,
            business_id=_business_id_for(request, payload.get("business_id")),
            code=payload.get("code") or "",
        )
    except DiscountServiceError as exc:
        return _error_json(exc)

    return JsonResponse(
        {"code": 200, "message": result.message, "data": _serialize_code(result.discount_code)}
    )


@check_business_owner
@require_POST
def issue_code_api(request: HttpRequest) -> JsonResponse:
    """POST {"response_entity_id", "discount_type", "discount_value", "expires_at": ISO8601 可选}"""

    payload = _load_json(request)
    if payload is None:
        return JsonResponse({"code": 400, "error": "validation_error", "message": "Invalid request body"}, status=400)

    expires_at = None
    if payload.get("expires_at"):
        try:
            expires_at = parse_datetime(str(payload["expires_at"]))
        except ValueError:
            expires_at = None
        if expires_at is None:
            return JsonResponse(
                {"code": 400, "error": "validation_error", "message": "Invalid expires_at"},
                status=400,
            )
        if timezone.is_naive(expires_at):
            expires_at = timezone.make_aware(expires_at)

    try:
        discount = issue_discount_code_for_owner(
            user=request.user,
            response_entity_id=payload.get("response_entity_id"),
            discount_type=payload.get("discount_type") or "",
            discount_value=payload.get("discount_value"),
            expires_at=expires_at,
        )
    except DiscountServiceError as exc:
        return _error_json(exc)

    return JsonResponse({"code": 201, "data": _serialize_code(discount)}, status=201)
