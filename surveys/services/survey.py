"""
问卷管理相关的领域服务。

【设计说明】
- 视图层只负责 HTTP 解析与响应，问卷的创建、查询、删除与状态切换都在这里完成；
- 所有商家侧方法都显式接收 `user`，按其名下商家做数据隔离；
- 不存在与不属于当前商家的问卷统一抛出 SurveyNotFoundError，不泄露其他商家的数据。
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Iterable

import markdown
from django.db import transaction
from django.db.models import Count, Prefetch, Q
from django.utils.html import escape

from feedback.choices import ResponseStatus
from feedback.models import Response, ResponseEntity
from surveys.choices import QuestionType, SurveyStatus
from surveys.models import Question, Survey
from users.services import AuthService

logger = logging.getLogger(__name__)

MIN_SURVEY_NAME_LENGTH = 3


class SurveyServiceError(Exception):
    """问卷相关业务异常基类。"""

    code = "survey_error"


class SurveyAccessDeniedError(SurveyServiceError):
    """当前账号不是启用状态的商家。"""

    code = "access_denied"


class SurveyNotFoundError(SurveyServiceError):
    """问卷不存在或不属于当前商家。"""

    code = "survey_not_found"


class SurveyValidationError(SurveyServiceError):
    """创建问卷的输入不合法，`errors` 为字段级错误。"""

    code = "validation_error"

    def __init__(self, message: str, errors: dict[str, list[str]] | None = None):
        super().__init__(message)
        self.errors = errors or {}


@dataclass(frozen=True)
class QuestionInput:
    """创建问卷时的一道题目。"""

    text: str
    q_type: str = QuestionType.TEXT
    is_required: bool = True


def _require_business_owner(user) -> None:
    if not AuthService.is_active_business_owner(user):
        raise SurveyAccessDeniedError("Unauthorized. Only active business owners can manage surveys.")


def _coerce_uuid(value: Any) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def _normalize_questions(questions: Iterable[QuestionInput | dict]) -> list[QuestionInput]:
    normalized = []
    for item in questions or []:
        if isinstance(item, QuestionInput):
            normalized.append(item)
            continue
        normalized.append(
            QuestionInput(
                text=str(item.get("text") or ""),
                q_type=str(item.get("q_type") or item.get("type") or QuestionType.TEXT),
                is_required=bool(item.get("is_required", True)),
            )
        )
    return normalized


def validate_survey_input(name: str, questions: list[QuestionInput]) -> dict[str, list[str]]:
    """
    【业务说明】校验创建问卷的输入，返回字段级错误，空 dict 表示通过。
    【规则】名称至少 3 个字符；至少一道题；题目内容必填；题型必须是已知枚举。
    """

    errors: dict[str, list[str]] = {}
    if len((name or "").strip()) < MIN_SURVEY_NAME_LENGTH:
        errors.setdefault("name", []).append("Survey name must be at least 3 characters")
    if not questions:
        errors.setdefault("questions", []).append("At least one question is required")
    for index, question in enumerate(questions):
        if not question.text.strip():
            errors.setdefault(f"questions.{index}.text", []).append("Question text is required")
        if question.q_type not in QuestionType.values:
            errors.setdefault(f"questions.{index}.type", []).append("Please select a question type")
    return errors


def create_survey(
    *,
    user,
    name: str,
    description: str = "",
    questions: Iterable[QuestionInput | dict],
) -> Survey:
    """
    【业务说明】商家创建问卷及其题目，题目顺序即传入顺序。
    【用法】问卷创建页提交后调用；商家档案不存在时自动创建。
    【参数】
    - user: 当前登录账号；
    - name / description: 问卷名称与说明（Markdown）；
    - questions: QuestionInput 或 {"text", "type", "is_required"} 字典列表。
    【返回值】创建好的 Survey（状态 ACTIVE）。
    【异常】SurveyAccessDeniedError、SurveyValidationError。
    """

    _require_business_owner(user)

    question_inputs = _normalize_questions(questions)
    errors = validate_survey_input(name, question_inputs)
    if errors:
        raise SurveyValidationError("Invalid input data", errors)

    with transaction.atomic():
        business = AuthService.get_or_create_business(user)
        survey = Survey.objects.create(
            business=business,
            name=name.strip(),
            description=(description or "").strip(),
            status=SurveyStatus.ACTIVE,
        )
        Question.objects.bulk_create(
            [
                Question(
                    survey=survey,
                    text=item.text.strip(),
                    q_type=item.q_type,
                    seq=index,
                    is_required=item.is_required,
                )
                for index, item in enumerate(question_inputs)
            ]
        )

    logger.info("问卷创建成功: survey_id=%s business_id=%s", survey.id, business.id)
    return survey


def _owned_surveys(user):
    business = AuthService.get_business_for_user(user)
    if business is None:
        return Survey.objects.none()
    return Survey.objects.filter(business=business)


def list_surveys(*, user) -> list[Survey]:
    """
    获取当前商家的问卷列表，按创建时间倒序。

    每个问卷附带统计字段：question_count、response_count（已发放链接数）、
    completed_count（已提交数）。未建档商家返回空列表。
    """

    _require_business_owner(user)
    return list(
        _owned_surveys(user)
        .annotate(
            question_count=Count("questions", distinct=True),
            response_count=Count("response_entities", distinct=True),
            completed_count=Count(
                "response_entities",
                filter=Q(response_entities__status=ResponseStatus.COMPLETED),
                distinct=True,
            ),
        )
        .order_by("-created_at")
    )


def get_survey(*, user, survey_id) -> Survey:
    """
    获取当前商家名下的问卷详情。

    题目按 seq 排序预加载；反馈链接按创建时间倒序，并预加载各自的答案及题目。
    """

    _require_business_owner(user)
    pk = _coerce_uuid(survey_id)
    if pk is None:
        raise SurveyNotFoundError("Survey not found.")

    survey = (
        _owned_surveys(user)
        .prefetch_related(
            Prefetch("questions", queryset=Question.objects.order_by("seq", "id")),
            Prefetch(
                "response_entities",
                queryset=ResponseEntity.objects.order_by("-created_at").prefetch_related(
                    Prefetch(
                        "responses",
                        queryset=Response.objects.select_related("question").order_by(
                            "question__seq", "id"
                        ),
                    )
                ),
            ),
        )
        .filter(pk=pk)
        .first()
    )
    if survey is None:
        raise SurveyNotFoundError("Survey not found.")
    return survey


def delete_survey(*, user, survey_id) -> None:
    """删除问卷，题目、反馈链接及答案随外键级联删除。"""

    _require_business_owner(user)
    pk = _coerce_uuid(survey_id)
    survey = _owned_surveys(user).filter(pk=pk).first() if pk else None
    if survey is None:
        raise SurveyNotFoundError("Survey not found or you don't have permission to delete it.")
    survey.delete()
    logger.info("问卷已删除: survey_id=%s", pk)


def set_survey_status(*, user, survey_id, status: str) -> Survey:
    """切换问卷状态（启用 / 关闭 / 草稿）。关闭后已发出的链接将无法提交。"""

    _require_business_owner(user)
    if status not in SurveyStatus.values:
        raise SurveyValidationError("Invalid survey status", {"status": ["Unknown status"]})
    pk = _coerce_uuid(survey_id)
    survey = _owned_surveys(user).filter(pk=pk).first() if pk else None
    if survey is None:
        raise SurveyNotFoundError("Survey not found.")
    if survey.status != status:
        survey.status = status
        survey.save(update_fields=["status", "updated_at"])
        logger.info("问卷状态变更: survey_id=%s status=%s", survey.id, status)
    return survey


def get_active_survey(survey_id) -> Survey | None:
    """
    【业务说明】公开页面使用的只读查询：返回 ACTIVE 状态的问卷（含商家、按序题目），否则 None。
    """

    pk = _coerce_uuid(survey_id)
    if pk is None:
        return None
    return (
        Survey.objects.select_related("business")
        .prefetch_related(Prefetch("questions", queryset=Question.objects.order_by("seq", "id")))
        .filter(pk=pk, status=SurveyStatus.ACTIVE)
        .first()
    )


def render_survey_description(source: str | None) -> str:
    """
    【业务说明】将问卷说明从 Markdown 渲染为 HTML，供顾客填写页展示。
    说明由商家填写、在公开页面展示，原始 HTML 先转义再交给 Markdown，只保留 Markdown 语法生成的标签。
    【参数】source: Markdown 文本，可为空。
    【返回值】渲染后的 HTML 字符串。
    """

    return markdown.markdown(escape(source or ""), extensions=["extra"])
