# Schemas package
from .question_schema import (
    HistoryItem,
    NextQuestionRequest,
    NextQuestionResponse,
    Option,
    OptionDetails,
    Question,
)
from .blueprint_schema import (
    BusinessBlueprint,
    ErrorResponse,
    GenerateBlueprintRequest,
    GenerateBlueprintResponse,
)

__all__ = [
    "OptionDetails",
    "Option",
    "Question",
    "HistoryItem",
    "NextQuestionRequest",
    "NextQuestionResponse",
    "BusinessBlueprint",
    "GenerateBlueprintRequest",
    "GenerateBlueprintResponse",
    "ErrorResponse",
]
