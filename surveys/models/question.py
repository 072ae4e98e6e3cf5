"""问卷题目模型。"""

from django.db import models

from surveys.choices import QuestionType


class Question(models.Model):
    """问卷题目。"""

    survey = models.ForeignKey(
        "surveys.Survey",
        on_delete=models.CASCADE,
        related_name="questions",
        verbose_name="所属问卷",
    )
    text = models.TextField("题目内容")
    q_type = models.CharField(
        "题目类型",
        max_length=20,
        choices=QuestionType.choices,
        default=QuestionType.TEXT,
    )
    seq = models.PositiveIntegerField("排序号", default=0)
    is_required = models.BooleanField("是否必填", default=True)

    class Meta:
        verbose_name = "问卷题目"
        verbose_name_plural = "问卷题目"
        ordering = ("seq", "id")

    def __str__(self) -> str:
        return self.text[:20]
