"""
反馈提交的请求结构与解析。

parse_submit_feedback 是纯函数：只做格式校验，不访问数据库；返回 (request, None) 或 (None, errors)。
答案按原文保存与校验长度（1~1000 字符），不做首尾空白裁剪。
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Mapping

MAX_ANSWER_LENGTH = 1000


@dataclass(frozen=True)
class AnswerInput:
    question_id: int
    answer: str


@dataclass(frozen=True)
class SubmitFeedbackRequest:
    survey_id: uuid.UUID
    response_entity_id: uuid.UUID
    answers: tuple[AnswerInput, ...]


def _parse_uuid(value: Any) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def _parse_question_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None


def parse_submit_feedback(
    data: Mapping[str, Any],
) -> tuple[SubmitFeedbackRequest | None, dict[str, list[str]] | None]:
    """
    【业务说明】将原始输入（JSON 或表单整理后的 dict）转换为 SubmitFeedbackRequest。
    【参数】data: {"survey_id", "response_entity_id", "answers": [{"question_id", "answer"}, ...]}
    【规则】
    - survey_id / response_entity_id 必须是合法 UUID；
    - 至少一条答案；question_id 为正整数且不重复；
    - 答案去除首尾空白后长度 1~1000。
    【返回值】(request, None) 或 (None, 字段错误 dict)。
    """

    errors: dict[str, list[str]] = {}

    survey_id = _parse_uuid(data.get("survey_id"))
    if survey_id is None:
        errors.setdefault("survey_id", []).append("Invalid survey ID.")

    response_entity_id = _parse_uuid(data.get("response_entity_id"))
    if response_entity_id is None:
        errors.setdefault("response_entity_id", []).append("Invalid response entity ID.")

    raw_answers = data.get("answers")
    if not isinstance(raw_answers, (list, tuple)) or not raw_answers:
        errors.setdefault("answers", []).append("At least one answer is required.")
        raw_answers = []

    answers: list[AnswerInput] = []
    seen: set[int] = set()
    for index, item in enumerate(raw_answers):
        key = f"answers.{index}"
        if not isinstance(item, Mapping):
            errors.setdefault(key, []).append("Invalid answer.")
            continue

        question_id = _parse_question_id(item.get("question_id"))
        if question_id is None:
            errors.setdefault(f"{key}.question_id", []).append("Invalid question ID.")
        elif question_id in seen:
            errors.setdefault(f"{key}.question_id", []).append("Duplicate question ID.")
        else:
            seen.add(question_id)

        answer = item.get("answer")
        if not isinstance(answer, str):
            answer = ""
        if not answer:
            errors.setdefault(f"{key}.answer", []).append("Answer cannot be empty.")
        elif len(answer) > MAX_ANSWER_LENGTH:
            errors.setdefault(f"{key}.answer", []).append("Answer is too long.")

        if question_id is not None and answer:
            answers.append(AnswerInput(question_id=question_id, answer=answer))

    if errors:
        return None, errors

    return (
        SubmitFeedbackRequest(
            survey_id=survey_id,
            response_entity_id=response_entity_id,
            answers=tuple(answers),
        ),
        None,
    )
