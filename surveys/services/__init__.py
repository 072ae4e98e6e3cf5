from .survey import (
    QuestionInput,
    SurveyAccessDeniedError,
    SurveyNotFoundError,
    SurveyServiceError,
    SurveyValidationError,
    create_survey,
    delete_survey,
    get_active_survey,
    get_survey,
    list_surveys,
    render_survey_description,
    set_survey_status,
)
from .qrcode import build_public_survey_url, build_survey_qr_png

__all__ = [
    "QuestionInput",
    "SurveyAccessDeniedError",
    "SurveyNotFoundError",
    "SurveyServiceError",
    "SurveyValidationError",
    "create_survey",
    "delete_survey",
    "get_active_survey",
    "get_survey",
    "list_surveys",
    "render_survey_description",
    "set_survey_status",
    "build_public_survey_url",
    "build_survey_qr_png",
]
