from .submission import (
    AlreadySubmittedError,
    FeedbackSubmissionError,
    FeedbackSubmissionResult,
    InvalidLinkError,
    InvalidQuestionError,
    SurveyInactiveError,
    SurveyMismatchError,
    get_feedback_link,
    submit_feedback,
)

__all__ = [
    "AlreadySubmittedError",
    "FeedbackSubmissionError",
    "FeedbackSubmissionResult",
    "InvalidLinkError",
    "InvalidQuestionError",
    "SurveyInactiveError",
    "SurveyMismatchError",
    "get_feedback_link",
    "submit_feedback",
]
