"""
pyqt-formsession: form session management for PyQt6 forms.

Binds one editable model to dynamically registered field editors, runs
either annotation-driven (pydantic) or rule-driven validation, and keeps a
live edit context consistent when the model is replaced.

Architecture:
- Tier 1 (Core): FieldIdentity, EditContext - no Qt, no validation library
- Tier 2 (Protocols): FieldItem/ControlAccessor ABCs, session views, config
- Tier 3 (Validation + Services): strategies, rules, context migration
- Tier 4 (Forms): FormSession, FormProvider, headless field editors
- Tier 5 (Widgets): PyQt6 field editors and signal bridge (imported explicitly)
"""

__version__ = "0.1.0"

from .exceptions import FormSessionError, ModelConstructionError, NoEditContextError
from .core import EditContext, EditContextEvent, FieldIdentity
from .protocols import (
    ControlAccessor,
    FieldItem,
    FormLocale,
    FormSessionConfig,
    FormValidateMode,
    ValidateMessages,
)
from .validation import FormValidationRule, RuleError
from .forms import FormCallbacks, FormProvider, FormSession, RuleFieldItem

__all__ = [
    "__version__",
    "FormSessionError",
    "ModelConstructionError",
    "NoEditContextError",
    "EditContext",
    "EditContextEvent",
    "FieldIdentity",
    "ControlAccessor",
    "FieldItem",
    "FormLocale",
    "FormSessionConfig",
    "FormValidateMode",
    "ValidateMessages",
    "FormValidationRule",
    "RuleError",
    "FormCallbacks",
    "FormProvider",
    "FormSession",
    "RuleFieldItem",
]
