"""
Validation layer.

Rule language, pydantic-backed annotation validation and the two
strategies a session switches between.
"""

from .rules import FormValidationRule, RuleError, RuleValidator
from .annotation_validator import AnnotationValidator, ValidatorCache, MODEL_LEVEL_FIELD
from .strategies import ValidationStrategy, AnnotationStrategy, RuleStrategy

__all__ = [
    "FormValidationRule",
    "RuleError",
    "RuleValidator",
    "AnnotationValidator",
    "ValidatorCache",
    "MODEL_LEVEL_FIELD",
    "ValidationStrategy",
    "AnnotationStrategy",
    "RuleStrategy",
]
