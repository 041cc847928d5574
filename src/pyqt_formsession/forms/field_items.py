"""
Reusable field editor behavior.

FieldEditorMixin implements both FieldItem and ControlAccessor on top of a
session and a field name. It defines no ``__init__`` so it can sit next to
a Qt widget class in a cooperative MRO; concrete editors call
``_bind_field()`` once their own initialization is done.

RuleFieldItem is the UI-less editor: it stores pushed errors in
``self.errors`` and is what headless callers and tests use.
"""

import copy
import logging
from typing import Any, Iterable, List, Optional, Sequence

from pyqt_formsession.core import EditContext, EditContextEvent, FieldIdentity, ValidationStateChangedEventArgs
from pyqt_formsession.protocols import ControlAccessor, FieldItem, FormSessionInternal
from pyqt_formsession.validation import FormValidationRule, RuleError, RuleValidator

logger = logging.getLogger(__name__)


class FieldEditorMixin(FieldItem, ControlAccessor):
    """
    FieldItem + ControlAccessor for one field of the session's model.

    Lifecycle:
        _bind_field()  - register item and control, subscribe to validation state
        detach()       - deregister and unsubscribe (call on unmount)

    Hooks for subclasses:
        _render_errors(messages)  - show messages in the UI
        _render_value(value)      - show a value without reporting an edit
    """

    session: FormSessionInternal
    field_name: str
    label: str
    rules: List[FormValidationRule]
    errors: List[str]

    def _bind_field(self, session: FormSessionInternal, field_name: str,
                    rules: Iterable[FormValidationRule] = (), label: Optional[str] = None) -> None:
        self.session = session
        self.field_name = field_name
        self.label = label or field_name
        self.rules = list(rules)
        self.errors = []
        self._initial_value = copy.deepcopy(getattr(session.model, field_name))

        session.edit_context.subscribe(EditContextEvent.VALIDATION_STATE_CHANGED, self._on_validation_state_changed)
        session.add_form_item(self)
        session.add_control(self)
        logger.debug(f"Bound field editor {type(self).__name__} to {field_name!r}")

    def detach(self) -> None:
        """Deregister from the session; safe to call more than once."""
        self.session.remove_form_item(self)
        self.session.remove_control(self)
        self.session.edit_context.unsubscribe(EditContextEvent.VALIDATION_STATE_CHANGED, self._on_validation_state_changed)

    # ==================== VALUE ====================

    @property
    def model_value(self) -> Any:
        return getattr(self.session.model, self.field_name)

    def write_value(self, value: Any) -> None:
        """Store ``value`` on the model and report the edit to the session."""
        setattr(self.session.model, self.field_name, value)
        self.session.notify_field_changed(self.field_name)

    def _render_value(self, value: Any) -> None:
        pass

    # ==================== FieldItem ====================

    def get_field_identity(self) -> FieldIdentity:
        return self.session.edit_context.field(self.field_name)

    def validate_against_rules(self) -> List[RuleError]:
        messages = self.session.locale.default_validate_messages
        return RuleValidator.validate(self.label, self.model_value, self.rules, messages)

    def display_errors(self, messages: Sequence[str]) -> None:
        self.errors = list(messages)
        self._render_errors(self.errors)

    def _render_errors(self, messages: List[str]) -> None:
        pass

    def _on_validation_state_changed(self, sender: EditContext, args: ValidationStateChangedEventArgs) -> None:
        # Rule mode pushes errors directly; annotation results live in the context store
        if not self.session.use_rules_validator:
            self.display_errors(sender.get_validation_messages(self.get_field_identity()))

    # ==================== ControlAccessor ====================

    def reset(self) -> None:
        value = copy.deepcopy(self._initial_value)
        setattr(self.session.model, self.field_name, value)
        self._render_value(value)
        self.display_errors([])


class RuleFieldItem(FieldEditorMixin):
    """
    Headless field editor.

    Example:
        name = RuleFieldItem(session, "name", [FormValidationRule(required=True)])
        name.write_value("Ada")
        name.errors   # [] once the rule passes
    """

    def __init__(self, session: FormSessionInternal, field_name: str,
                 rules: Iterable[FormValidationRule] = (), label: Optional[str] = None):
        self._bind_field(session, field_name, rules, label)

    def __repr__(self) -> str:
        return f"RuleFieldItem({self.field_name!r}, errors={self.errors!r})"
