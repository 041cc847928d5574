"""Configuration for form sessions.

Mostly passive presentation data handed through to the rendering layer.
Only ``validate_mode`` and ``locale`` influence session behavior: together
they decide which validation strategy is active.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class FormLayout:
    """Layout names understood by the rendering layer."""
    HORIZONTAL = "Horizontal"
    VERTICAL = "Vertical"
    INLINE = "Inline"


class FormRequiredMark(Enum):
    """How required/optional field labels are displayed."""
    REQUIRED = "required"   # Mark required fields
    OPTIONAL = "optional"   # Mark optional fields
    NONE = "none"           # Mark no fields


class FormValidateMode(Enum):
    """Validation mode requested by the caller.

    Anything other than DEFAULT switches the session to rule validation.
    """
    DEFAULT = "default"
    RULES = "rules"
    COMPLEX = "complex"


class LabelAlign(Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass
class ColLayoutParam:
    """Grid column placement for labels and wrappers."""
    span: Optional[Union[str, int]] = None
    offset: Optional[Union[str, int]] = None


@dataclass
class ValidateMessages:
    """Default rule messages. ``{label}`` and rule bounds are substituted."""
    default: str = "Field validation error for {label}"
    required: str = "{label} is required"
    whitespace: str = "{label} cannot be empty"
    one_of: str = "{label} must be one of {one_of}"
    pattern_mismatch: str = "{label} does not match pattern {pattern}"
    string_len: str = "{label} must be exactly {len} characters"
    string_min: str = "{label} must be at least {min} characters"
    string_max: str = "{label} cannot be longer than {max} characters"
    string_range: str = "{label} must be between {min} and {max} characters"
    number_len: str = "{label} must equal {len}"
    number_min: str = "{label} cannot be less than {min}"
    number_max: str = "{label} cannot be greater than {max}"
    number_range: str = "{label} must be between {min} and {max}"
    array_len: str = "{label} must be exactly {len} in length"
    array_min: str = "{label} cannot be less than {min} in length"
    array_max: str = "{label} cannot be greater than {max} in length"
    array_range: str = "{label} must be between {min} and {max} in length"


@dataclass
class FormLocale:
    """Locale-driven strings for a form.

    When ``default_validate_messages`` is set the session validates with
    rules, using these templates for messages the rules do not override.
    """
    name: str = "en-US"
    optional: str = "(optional)"
    default_validate_messages: Optional[ValidateMessages] = None


@dataclass
class FormSessionConfig:
    """Configuration for a FormSession.

    Attributes:
        layout: One of the FormLayout names
        required_mark: How required fields are marked by the renderer
        label_col / wrapper_col: Grid placement for labels and inputs
        validate_on_change: Whether field editors validate on every edit
        validate_mode: Non-default values activate rule validation
        locale: Locale strings; default messages activate rule validation
        name: Form handler name, also the key used by FormProvider
    """

    layout: str = FormLayout.HORIZONTAL
    required_mark: FormRequiredMark = FormRequiredMark.REQUIRED
    label_col: ColLayoutParam = field(default_factory=ColLayoutParam)
    wrapper_col: ColLayoutParam = field(default_factory=ColLayoutParam)
    label_align: Optional[LabelAlign] = None
    size: Optional[str] = None
    name: Optional[str] = None
    method: str = "get"
    loading: bool = False
    validate_on_change: bool = False
    validate_mode: FormValidateMode = FormValidateMode.DEFAULT
    locale: FormLocale = field(default_factory=FormLocale)
    enhance: bool = False
    autocomplete: str = "off"

    def __post_init__(self):
        if not isinstance(self.validate_mode, FormValidateMode):
            raise TypeError(f"validate_mode must be a FormValidateMode, got {self.validate_mode!r}")

    @property
    def use_locale_validate_message(self) -> bool:
        return self.locale.default_validate_messages is not None

    @property
    def use_rules_validator(self) -> bool:
        """Strategy selection, derived from configuration on every call."""
        return self.use_locale_validate_message or self.validate_mode != FormValidateMode.DEFAULT


# Global config instance (set by application)
_form_config: Optional[FormSessionConfig] = None


def set_form_config(config: FormSessionConfig) -> None:
    """Set the default configuration used by sessions created without one.

    Args:
        config: FormSessionConfig instance
    """
    global _form_config
    _form_config = config


def get_form_config() -> FormSessionConfig:
    """Get the current default configuration.

    Returns:
        Current FormSessionConfig or a fresh default if not set
    """
    if _form_config is None:
        return FormSessionConfig()
    return _form_config
