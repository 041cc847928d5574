"""
Session protocol definitions and configuration.

ABC-based contracts between the session, field editors and the rendering
layer, plus the passive configuration a session is created with.
"""

from .form_item_protocols import FieldItem, ControlAccessor
from .session_protocols import FormSessionPublic, FormSessionInternal
from .form_config import (
    FormSessionConfig,
    FormLayout,
    FormRequiredMark,
    FormValidateMode,
    FormLocale,
    ValidateMessages,
    ColLayoutParam,
    LabelAlign,
    set_form_config,
    get_form_config,
)

__all__ = [
    "FieldItem",
    "ControlAccessor",
    "FormSessionPublic",
    "FormSessionInternal",
    "FormSessionConfig",
    "FormLayout",
    "FormRequiredMark",
    "FormValidateMode",
    "FormLocale",
    "ValidateMessages",
    "ColLayoutParam",
    "LabelAlign",
    "set_form_config",
    "get_form_config",
]
