from .survey import Survey
from .question import Question

__all__ = ["Survey", "Question"]
