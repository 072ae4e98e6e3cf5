from django import forms

from feedback.schemas import MAX_ANSWER_LENGTH
from surveys.choices import QuestionType

RATING_CHOICES = [(str(value), str(value)) for value in range(1, 6)]
YES_NO_CHOICES = [("Yes", "Yes"), ("No", "No")]


class FeedbackAnswerForm(forms.Form):
    """按问卷题目动态生成字段，字段名为 `question_<id>`。"""

    def __init__(self, questions, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.questions = list(questions)
        for question in self.questions:
            self.fields[self.field_name(question)] = self._build_field(question)

    @staticmethod
    def field_name(question) -> str:
        return f"question_{question.id}"

    @staticmethod
    def _build_field(question) -> forms.Field:
        if question.q_type == QuestionType.RATING_SCALE_5:
            return forms.ChoiceField(
                label=question.text,
                choices=RATING_CHOICES,
                required=question.is_required,
                widget=forms.RadioSelect,
            )
        if question.q_type == QuestionType.YES_NO:
            return forms.ChoiceField(
                label=question.text,
                choices=YES_NO_CHOICES,
                required=question.is_required,
                widget=forms.RadioSelect,
            )
        return forms.CharField(
            label=question.text,
            max_length=MAX_ANSWER_LENGTH,
            required=question.is_required,
            widget=forms.Textarea(attrs={"rows": 3}),
        )

    def answers(self) -> list[dict]:
        """已填写的答案，供 parse_submit_feedback 使用；未填写的选填题不提交。"""

        result = []
        for question in self.questions:
            value = self.cleaned_data.get(self.field_name(question))
            if value:
                result.append({"question_id": question.id, "answer": str(value)})
        return result


class QrSmsRequestForm(forms.Form):
    phone_number = forms.CharField(label="Phone number", max_length=20)
