"""
顾客反馈提交服务。

【流程】
1. 前置校验（按顺序，首个失败即返回）：链接存在 -> 链接未使用 -> 问卷启用 -> 链接属于该问卷 -> 题目属于该问卷；
2. 同一事务内批量写入答案，并以 `UPDATE ... WHERE status = PENDING` 将链接置为 COMPLETED；
   条件更新未命中说明并发提交已抢先完成，整个事务回滚；
3. 事务提交后，符合奖励条件的渠道自动发放优惠码。发放失败只记日志，不影响提交结果。
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Prefetch
from django.utils import timezone

from feedback.choices import ResponseStatus, ResponseType
from feedback.models import Response, ResponseEntity
from feedback.schemas import SubmitFeedbackRequest
from incentives.models import DiscountCode
from incentives.services.discount import (
    CodeAlreadyIssuedError,
    DiscountServiceError,
    issue_discount_code,
)
from surveys.choices import SurveyStatus
from surveys.models import Question, Survey

logger = logging.getLogger(__name__)


class FeedbackSubmissionError(Exception):
    """反馈提交相关业务异常基类。"""

    code = "submission_error"


class InvalidLinkError(FeedbackSubmissionError):
    code = "invalid_link"

    def __init__(self, message: str = "Invalid feedback link. Please check the URL and try again."):
        super().__init__(message)


class AlreadySubmittedError(FeedbackSubmissionError):
    code = "already_submitted"

    def __init__(self, message: str = "Feedback has already been submitted for this link."):
        super().__init__(message)


class SurveyInactiveError(FeedbackSubmissionError):
    code = "survey_inactive"

    def __init__(self, message: str = "Survey not found or is inactive."):
        super().__init__(message)


class SurveyMismatchError(FeedbackSubmissionError):
    code = "survey_mismatch"

    def __init__(self, message: str = "Invalid survey for this feedback link."):
        super().__init__(message)


class InvalidQuestionError(FeedbackSubmissionError):
    code = "invalid_question"

    def __init__(self, message: str = "Invalid question ID detected."):
        super().__init__(message)


@dataclass(frozen=True)
class FeedbackSubmissionResult:
    response_entity: ResponseEntity
    discount_code: Optional[DiscountCode] = None


def get_feedback_link(response_entity_id) -> ResponseEntity:
    """
    【业务说明】顾客打开 `/feedback/<id>/` 时加载链接及问卷题目。
    【异常】InvalidLinkError（不存在）、AlreadySubmittedError（已提交）、SurveyInactiveError（问卷未启用）。
    """

    try:
        pk = uuid.UUID(str(response_entity_id))
    except (TypeError, ValueError):
        raise InvalidLinkError()

    entity = (
        ResponseEntity.objects.select_related("survey", "survey__business")
        .prefetch_related(
            Prefetch("survey__questions", queryset=Question.objects.order_by("seq", "id"))
        )
        .filter(pk=pk)
        .first()
    )
    if entity is None:
        raise InvalidLinkError()
    if entity.status != ResponseStatus.PENDING:
        raise AlreadySubmittedError()
    if entity.survey.status != SurveyStatus.ACTIVE:
        raise SurveyInactiveError()
    return entity


def submit_feedback(request: SubmitFeedbackRequest) -> FeedbackSubmissionResult:
    """
    提交一份反馈。

    【参数说明】
    :param request: 已通过 parse_submit_feedback 校验的提交请求。

    【返回值说明】
    :return: FeedbackSubmissionResult，其中 response_entity 为已完成的链接，
             discount_code 为本次发放的优惠码（不符合奖励条件或发放失败时为 None）。

    【异常说明】
    - InvalidLinkError: 链接不存在；
    - AlreadySubmittedError: 链接已提交（含并发提交被抢先的情况）；
    - SurveyInactiveError: 问卷不存在或未启用；
    - SurveyMismatchError: 链接不属于该问卷；
    - InvalidQuestionError: 存在不属于该问卷的题目。
    """

    entity = ResponseEntity.objects.filter(pk=request.response_entity_id).first()
    if entity is None:
        raise InvalidLinkError()
    if entity.status != ResponseStatus.PENDING:
        raise AlreadySubmittedError()

    survey = Survey.objects.filter(pk=request.survey_id, status=SurveyStatus.ACTIVE).first()
    if survey is None:
        raise SurveyInactiveError()
    if entity.survey_id != survey.id:
        raise SurveyMismatchError()

    valid_question_ids = set(survey.questions.values_list("id", flat=True))
    if any(item.question_id not in valid_question_ids for item in request.answers):
        raise InvalidQuestionError()

    now = timezone.now()
    try:
        with transaction.atomic():
            Response.objects.bulk_create(
                [
                    Response(
                        response_entity=entity,
                        question_id=item.question_id,
                        value=item.answer,
                    )
                    for item in request.answers
                ]
            )
            updated = ResponseEntity.objects.filter(
                pk=entity.pk,
                status=ResponseStatus.PENDING,
            ).update(
                status=ResponseStatus.COMPLETED,
                submitted_at=now,
                updated_at=now,
            )
            if updated != 1:
                raise AlreadySubmittedError()
    except IntegrityError:
        # 并发提交已写入同题答案
        raise AlreadySubmittedError()

    entity.status = ResponseStatus.COMPLETED
    entity.submitted_at = now
    logger.info("反馈提交成功: response_entity_id=%s survey_id=%s", entity.id, survey.id)

    discount_code = None
    if entity.type in _qualifying_types():
        discount_code = _issue_reward(entity, survey)

    return FeedbackSubmissionResult(response_entity=entity, discount_code=discount_code)


def _qualifying_types() -> list[str]:
    reward = getattr(settings, "FEEDBACK_REWARD", {}) or {}
    return list(reward.get("QUALIFYING_TYPES", [ResponseType.DIRECT_SMS]))


def _issue_reward(entity: ResponseEntity, survey: Survey) -> Optional[DiscountCode]:
    reward = getattr(settings, "FEEDBACK_REWARD", {}) or {}
    valid_days = int(reward.get("VALID_DAYS", 30))
    try:
        return issue_discount_code(
            response_entity_id=entity.id,
            business_id=survey.business_id,
            discount_type=reward.get("DISCOUNT_TYPE", "PERCENTAGE"),
            discount_value=Decimal(str(reward.get("DISCOUNT_VALUE", "10"))),
            expires_at=timezone.now() + timedelta(days=valid_days),
        )
    except CodeAlreadyIssuedError as exc:
        return exc.discount_code
    except DiscountServiceError:
        logger.exception(
            "反馈提交成功，但优惠码发放失败。response_entity_id=%s business_id=%s",
            entity.id,
            survey.business_id,
        )
        return None
    except Exception:
        # 答案已落库，奖励失败不影响提交结果
        logger.exception(
            "反馈提交成功，但优惠码发放出现未预期错误。response_entity_id=%s business_id=%s",
            entity.id,
            survey.business_id,
        )
        return None
