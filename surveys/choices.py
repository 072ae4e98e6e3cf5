from django.db import models


class SurveyStatus(models.TextChoices):
    """【业务说明】问卷状态；仅 ACTIVE 问卷可被分发与作答。"""

    DRAFT = "DRAFT", "Draft"
    ACTIVE = "ACTIVE", "Active"
    CLOSED = "CLOSED", "Closed"


class QuestionType(models.TextChoices):
    """【业务说明】题目类型；【用法】Question.q_type。"""

    TEXT = "TEXT", "Text response"
    RATING_SCALE_5 = "RATING_SCALE_5", "Rating (1-5)"
    YES_NO = "YES_NO", "Yes/No"
