from django import forms

from surveys.choices import QuestionType, SurveyStatus
from surveys.services.survey import MIN_SURVEY_NAME_LENGTH


class SurveyForm(forms.Form):
    name = forms.CharField(label="Survey name", min_length=MIN_SURVEY_NAME_LENGTH, max_length=200)
    description = forms.CharField(
        label="Description",
        required=False,
        widget=forms.Textarea(attrs={"rows": 4}),
        help_text="Markdown is supported.",
    )


class QuestionForm(forms.Form):
    text = forms.CharField(label="Question", max_length=1000)
    q_type = forms.ChoiceField(label="Type", choices=QuestionType.choices, initial=QuestionType.TEXT)
    is_required = forms.BooleanField(label="Required", required=False, initial=True)


QuestionFormSet = forms.formset_factory(
    QuestionForm,
    extra=2,
    min_num=1,
    validate_min=True,
)


class SurveyStatusForm(forms.Form):
    status = forms.ChoiceField(choices=SurveyStatus.choices)


class SmsInviteForm(forms.Form):
    phone_number = forms.CharField(label="Phone number", max_length=20)

    def clean_phone_number(self):
        return (self.cleaned_data.get("phone_number") or "").strip()
