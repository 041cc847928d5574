"""
Two views of one form session.

FormSessionPublic is what the rendering layer sees: configuration,
submission, reset and read accessors. FormSessionInternal is what field
editors see: registration and the live edit context. One concrete
FormSession implements both; editors are typed against the internal view
so they never reach for submission or reset.

Semantics (component equivalents):
- Public: the form component's parameters and methods
- Internal: the cascading form value field editors bind to at mount time
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Sequence

if TYPE_CHECKING:
    from pyqt_formsession.core import EditContext
    from .form_config import FormLocale, FormSessionConfig, FormValidateMode
    from .form_item_protocols import ControlAccessor, FieldItem


class FormSessionPublic(ABC):
    """Rendering-facing contract."""

    config: 'FormSessionConfig'

    # ==================== READ ACCESSORS ====================

    @property
    @abstractmethod
    def edit_context(self) -> 'EditContext':
        pass

    @property
    @abstractmethod
    def is_modified(self) -> bool:
        pass

    @property
    @abstractmethod
    def model(self) -> Any:
        pass

    # ==================== OPERATIONS ====================

    @abstractmethod
    def validate(self) -> bool:
        """Validate the whole model with the active strategy."""
        pass

    @abstractmethod
    def submit(self) -> bool:
        """Validate, then run the finish or finish-failed callbacks."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Reset every control and rebuild the edit context."""
        pass

    @abstractmethod
    def validation_reset(self) -> None:
        """Rebuild the edit context without touching controls."""
        pass

    @abstractmethod
    def set_validation_messages(self, field_name: str, messages: Sequence[str]) -> None:
        """Push externally supplied messages to the matching field item."""
        pass

    @abstractmethod
    def add_state_changed_listener(self, callback: Callable[[], None]) -> None:
        """Register a "please re-render" callback."""
        pass

    @abstractmethod
    def remove_state_changed_listener(self, callback: Callable[[], None]) -> None:
        pass


class FormSessionInternal(ABC):
    """Field-editor-facing contract."""

    # ==================== READ ACCESSORS ====================

    @property
    @abstractmethod
    def edit_context(self) -> 'EditContext':
        pass

    @property
    @abstractmethod
    def model(self) -> Any:
        pass

    @property
    @abstractmethod
    def locale(self) -> 'FormLocale':
        pass

    @property
    @abstractmethod
    def validate_mode(self) -> 'FormValidateMode':
        pass

    @property
    @abstractmethod
    def validate_on_change(self) -> bool:
        pass

    @property
    @abstractmethod
    def use_locale_validate_message(self) -> bool:
        pass

    @property
    @abstractmethod
    def use_rules_validator(self) -> bool:
        """True when per-field rules (not annotations) drive validation."""
        pass

    # ==================== REGISTRATION ====================

    @abstractmethod
    def add_form_item(self, form_item: 'FieldItem') -> None:
        pass

    @abstractmethod
    def remove_form_item(self, form_item: 'FieldItem') -> None:
        pass

    @abstractmethod
    def add_control(self, control: 'ControlAccessor') -> None:
        pass

    @abstractmethod
    def remove_control(self, control: 'ControlAccessor') -> None:
        pass

    @abstractmethod
    def add_finish_listener(self, callback: Callable[[Any], None]) -> None:
        """Subscribe to successful submissions; called with the session."""
        pass

    @abstractmethod
    def remove_finish_listener(self, callback: Callable[[Any], None]) -> None:
        pass

    # ==================== NOTIFICATIONS ====================

    @abstractmethod
    def notify_field_changed(self, field_name: str) -> None:
        """Report that ``field_name`` on the current model was edited."""
        pass
