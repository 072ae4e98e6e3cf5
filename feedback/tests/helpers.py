from surveys.choices import QuestionType
from surveys.services import QuestionInput, create_survey
from users.models import CustomUser


def make_owner(email="owner@example.com", name="Corner Cafe"):
    return CustomUser.objects.create_user(email=email, password="secret1", name=name)


def make_survey(owner, name="Visit survey"):
    return create_survey(
        user=owner,
        name=name,
        description="Thanks for **visiting**",
        questions=[
            QuestionInput(text="How was the coffee?", q_type=QuestionType.RATING_SCALE_5),
            QuestionInput(text="Would you come back?", q_type=QuestionType.YES_NO),
            QuestionInput(text="Anything else?", is_required=False),
        ],
    )
