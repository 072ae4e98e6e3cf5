"""
优惠码发放、核销与查询服务。

【并发约束】
- 发放：DiscountCode.response_entity 为一对一字段，同一反馈链接并发发放时只有一条能写入，
  落败方捕获 IntegrityError 后返回已存在的那张；
- 核销：使用 `UPDATE ... WHERE is_redeemed = false` 条件更新，0 行即说明已被并发核销。
"""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from feedback.choices import ResponseStatus
from feedback.models import ResponseEntity
from incentives.choices import DiscountCodeStatusFilter, DiscountType
from incentives.models import DiscountCode
from incentives.services.code_generator import (
    DEFAULT_MAX_ATTEMPTS,
    CodeGenerationExhaustedError,
    generate_unique_discount_code,
)
from users.models import Business
from users.services import AuthService

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class DiscountServiceError(Exception):
    """优惠码相关业务异常基类。"""

    code = "discount_error"


class DiscountValidationError(DiscountServiceError):
    code = "validation_error"


class DiscountAccessDeniedError(DiscountServiceError):
    code = "access_denied"

    def __init__(self, message: str = "Business not found or you don't have access to it"):
        super().__init__(message)


class ResponseNotReadyError(DiscountServiceError):
    code = "response_not_ready"

    def __init__(self, message: str = "Response entity not found or not completed"):
        super().__init__(message)


class CodeAlreadyIssuedError(DiscountServiceError):
    code = "already_issued"

    def __init__(self, discount_code: DiscountCode):
        super().__init__("Discount code already exists for this response entity")
        self.discount_code = discount_code


class BusinessNotFoundError(DiscountServiceError):
    code = "business_not_found"

    def __init__(self, message: str = "Business not found"):
        super().__init__(message)


class CodeUnavailableError(DiscountServiceError):
    code = "code_unavailable"

    def __init__(self, message: str = "Failed to generate discount code"):
        super().__init__(message)


class CodeNotFoundError(DiscountServiceError):
    code = "code_not_found"

    def __init__(self, message: str = "Discount code not found"):
        super().__init__(message)


class AlreadyRedeemedError(DiscountServiceError):
    code = "already_redeemed"

    def __init__(self, discount_code: DiscountCode):
        super().__init__("Discount code has already been redeemed")
        self.discount_code = discount_code


class CodeExpiredError(DiscountServiceError):
    code = "code_expired"

    def __init__(self, discount_code: DiscountCode):
        super().__init__("Discount code has expired")
        self.discount_code = discount_code


@dataclass(frozen=True)
class RedemptionResult:
    discount_code: DiscountCode
    message: str


@dataclass(frozen=True)
class DiscountCodePage:
    items: list[DiscountCode]
    total: int
    page: int
    limit: int
    total_pages: int


def _parse_uuid(value) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def _clean_discount(discount_type: str, discount_value) -> Decimal:
    if discount_type not in DiscountType.values:
        raise DiscountValidationError("Invalid discount type")
    try:
        value = Decimal(str(discount_value))
    except (InvalidOperation, TypeError, ValueError):
        raise DiscountValidationError("Discount value must be a number")
    if not value.is_finite() or value <= 0:
        raise DiscountValidationError("Discount value must be positive")
    return value


def issue_discount_code(
    response_entity_id,
    business_id,
    discount_type: str,
    discount_value,
    expires_at: Optional[datetime] = None,
) -> DiscountCode:
    """
    为已完成的反馈链接发放一张优惠码。

    【参数说明】
    :param response_entity_id: 已提交（COMPLETED）的反馈链接 ID
    :param business_id: 发放优惠码的商家 ID
    :param discount_type: DiscountType 取值
    :param discount_value: 优惠数值，必须大于 0
    :param expires_at: 过期时间，None 表示长期有效

    【返回值说明】
    :return: 新建的 DiscountCode

    【异常说明】
    - DiscountValidationError: 优惠方式或数值不合法；
    - ResponseNotReadyError: 链接不存在或尚未提交；
    - CodeAlreadyIssuedError: 该链接已有优惠码，exc.discount_code 为已存在的记录；
    - BusinessNotFoundError: 商家不存在；
    - CodeUnavailableError: 多次尝试仍无法生成未占用的优惠码。
    """

    value = _clean_discount(discount_type, discount_value)

    entity_pk = _parse_uuid(response_entity_id)
    entity = None
    if entity_pk is not None:
        entity = ResponseEntity.objects.filter(
            pk=entity_pk,
            status=ResponseStatus.COMPLETED,
        ).first()
    if entity is None:
        raise ResponseNotReadyError()

    existing = DiscountCode.objects.filter(response_entity_id=entity.pk).first()
    if existing is not None:
        raise CodeAlreadyIssuedError(existing)

    try:
        business = Business.objects.filter(pk=int(business_id)).first()
    except (TypeError, ValueError):
        business = None
    if business is None:
        raise BusinessNotFoundError()

    max_attempts = (getattr(settings, "DISCOUNT_CODE", {}) or {}).get(
        "MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS
    )
    for _ in range(max_attempts):
        try:
            code = generate_unique_discount_code()
        except CodeGenerationExhaustedError as exc:
            logger.error("优惠码生成失败: response_entity_id=%s reason=%s", entity.pk, exc)
            raise CodeUnavailableError() from exc

        try:
            with transaction.atomic():
                discount = DiscountCode.objects.create(
                    code=code,
                    discount_type=discount_type,
                    discount_value=value,
                    expires_at=expires_at,
                    business=business,
                    response_entity=entity,
                )
        except IntegrityError:
            winner = DiscountCode.objects.filter(response_entity_id=entity.pk).first()
            if winner is not None:
                raise CodeAlreadyIssuedError(winner)
            # 预检之后 code 被占用，换一个重试
            logger.warning("优惠码写入冲突，重新生成: code=%s", code)
            continue

        logger.info(
            "优惠码已发放: code=%s business_id=%s response_entity_id=%s",
            discount.code,
            business.pk,
            entity.pk,
        )
        return discount

    raise CodeUnavailableError()


def _get_owned_business(user, business_id) -> Business:
    if not AuthService.is_active_business_owner(user):
        raise DiscountAccessDeniedError("Unauthorized. Only business owners can access discount codes.")
    try:
        business_pk = int(business_id)
    except (TypeError, ValueError):
        raise DiscountAccessDeniedError()
    business = Business.objects.filter(pk=business_pk, owner_id=user.pk).first()
    if business is None:
        raise DiscountAccessDeniedError()
    return business


def redeem_discount_code(*, user, business_id, code: str) -> RedemptionResult:
    """
    【业务说明】商家核销顾客出示的优惠码，核销后不可撤回。
    【参数】user: 当前商家账号；business_id: 商家 ID（必须归属当前账号）；code: 优惠码，大小写不敏感。
    【返回值】RedemptionResult。
    【异常】DiscountAccessDeniedError、DiscountValidationError、CodeNotFoundError、
           AlreadyRedeemedError、CodeExpiredError。
    """

    business = _get_owned_business(user, business_id)

    normalized = (code or "").strip().upper()
    if not normalized:
        raise DiscountValidationError("Discount code is required")

    discount = DiscountCode.objects.filter(business=business, code=normalized).first()
    if discount is None:
        raise CodeNotFoundError()
    if discount.is_redeemed:
        raise AlreadyRedeemedError(discount)

    now = timezone.now()
    if discount.is_expired(now):
        raise CodeExpiredError(discount)

    updated = DiscountCode.objects.filter(pk=discount.pk, is_redeemed=False).update(
        is_redeemed=True,
        redeemed_at=now,
        updated_at=now,
    )
    if updated != 1:
        discount.refresh_from_db()
        raise AlreadyRedeemedError(discount)

    discount.is_redeemed = True
    discount.redeemed_at = now
    logger.info("优惠码已核销: code=%s business_id=%s", discount.code, business.pk)
    return RedemptionResult(discount_code=discount, message="Discount code redeemed successfully")


def _parse_positive_int(value, field: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise DiscountValidationError(f"{field} must be an integer")
    if parsed < 1:
        raise DiscountValidationError(f"{field} must be at least 1")
    return parsed


def list_discount_codes(
    *,
    user,
    business_id,
    status: str = DiscountCodeStatusFilter.ALL,
    page=1,
    limit=10,
) -> DiscountCodePage:
    """
    分页查询商家的优惠码，按创建时间倒序。

    status 取值 all / active / redeemed / expired；page >= 1；1 <= limit <= 100。
    每条记录已关联反馈链接（渠道、手机号、提交时间）。
    """

    business = _get_owned_business(user, business_id)

    if status not in DiscountCodeStatusFilter.values:
        raise DiscountValidationError("Invalid status filter")
    page = _parse_positive_int(page, "page")
    limit = _parse_positive_int(limit, "limit")
    if limit > MAX_PAGE_SIZE:
        raise DiscountValidationError(f"limit must be at most {MAX_PAGE_SIZE}")

    now = timezone.now()
    queryset = DiscountCode.objects.filter(business=business)
    if status == DiscountCodeStatusFilter.ACTIVE:
        queryset = queryset.filter(is_redeemed=False).filter(
            Q(expires_at__isnull=True) | Q(expires_at__gt=now)
        )
    elif status == DiscountCodeStatusFilter.REDEEMED:
        queryset = queryset.filter(is_redeemed=True)
    elif status == DiscountCodeStatusFilter.EXPIRED:
        queryset = queryset.filter(is_redeemed=False, expires_at__lte=now)

    total = queryset.count()
    offset = (page - 1) * limit
    items = list(
        queryset.select_related("response_entity").order_by("-created_at", "-id")[offset:offset + limit]
    )
    return DiscountCodePage(
        items=items,
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit),
    )


def issue_discount_code_for_owner(
    *,
    user,
    response_entity_id,
    discount_type: str,
    discount_value,
    expires_at: Optional[datetime] = None,
) -> DiscountCode:
    """
    【业务说明】商家手动为自己问卷下的已提交反馈补发优惠码。
    链接不存在或不属于当前商家的问卷时，按 ResponseNotReadyError 处理，不泄露其他商家数据。
    """

    if not AuthService.is_active_business_owner(user):
        raise DiscountAccessDeniedError("Unauthorized. Only business owners can issue discount codes.")
    business = AuthService.get_business_for_user(user)
    if business is None:
        raise BusinessNotFoundError()
    entity_pk = _parse_uuid(response_entity_id)
    if entity_pk is None or not ResponseEntity.objects.filter(
        pk=entity_pk,
        survey__business=business,
    ).exists():
        raise ResponseNotReadyError()

    return issue_discount_code(
        response_entity_id=entity_pk,
        business_id=business.pk,
        discount_type=discount_type,
        discount_value=discount_value,
        expires_at=expires_at,
    )
