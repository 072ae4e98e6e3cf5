from django.db import models

from users.models.base import TimeStampedModel


class Response(TimeStampedModel):
    """单道题目的答案。同一反馈链接下每道题最多一条。"""

    response_entity = models.ForeignKey(
        "feedback.ResponseEntity",
        on_delete=models.CASCADE,
        related_name="responses",
        verbose_name="反馈链接",
    )
    question = models.ForeignKey(
        "surveys.Question",
        on_delete=models.CASCADE,
        related_name="responses",
        verbose_name="题目",
    )
    value = models.TextField("答案")

    class Meta:
        verbose_name = "反馈答案"
        verbose_name_plural = "反馈答案"
        constraints = [
            models.UniqueConstraint(
                fields=["response_entity", "question"],
                name="uniq_response_per_question",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.question_id}: {self.value[:20]}"
