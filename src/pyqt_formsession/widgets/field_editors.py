"""
Qt field editors that take part in a form session.

Each editor is a Qt input widget that also implements FieldItem and
ControlAccessor (through FieldEditorMixin), so one widget registers in
both session registries:

- user edits are written to the model and reported to the session
- programmatic updates (initial value, reset) happen with signals blocked
- errors show as a tooltip plus an ``invalid`` dynamic property that
  stylesheets can target: ``QLineEdit[invalid="true"] { border-color: red; }``

Mirrors the widget adapter pattern - one adapter per Qt widget type,
normalizing their inconsistent change signals.
"""

from abc import ABCMeta
from typing import Any, Iterable, List, Optional
import logging

from PyQt6.QtCore import QObject
from PyQt6.QtWidgets import QCheckBox, QDoubleSpinBox, QLineEdit, QSpinBox, QWidget

from pyqt_formsession.forms.field_items import FieldEditorMixin
from pyqt_formsession.protocols import FormSessionInternal
from pyqt_formsession.services.signal_service import SignalService
from pyqt_formsession.validation import FormValidationRule

logger = logging.getLogger(__name__)


# Order matters: Qt's metaclass first, ABCMeta supplies abstract-method checks
class PyQtWidgetMeta(type(QObject), ABCMeta):
    """Metaclass for PyQt widgets that need ABC support."""
    pass


def _apply_error_state(widget: QWidget, messages: List[str]) -> None:
    widget.setToolTip("\n".join(messages))
    widget.setProperty("invalid", bool(messages))
    # Re-polish so stylesheet selectors on the dynamic property update
    widget.style().unpolish(widget)
    widget.style().polish(widget)


class LineEditField(QLineEdit, FieldEditorMixin, metaclass=PyQtWidgetMeta):
    """Text field. Empty text is stored as an empty string."""

    _widget_id = "line_edit"

    def __init__(self, session: FormSessionInternal, field_name: str,
                 rules: Iterable[FormValidationRule] = (), label: Optional[str] = None,
                 parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._bind_field(session, field_name, rules, label)
        self._render_value(self.model_value)
        # textEdited fires for user input only, never for setText
        self.textEdited.connect(self.write_value)

    def _render_value(self, value: Any) -> None:
        SignalService.update_widget_value(self, value)

    def _render_errors(self, messages: List[str]) -> None:
        _apply_error_state(self, messages)


class SpinBoxField(QSpinBox, FieldEditorMixin, metaclass=PyQtWidgetMeta):
    """Integer field; None on the model shows as the minimum."""

    _widget_id = "spin_box"

    def __init__(self, session: FormSessionInternal, field_name: str,
                 rules: Iterable[FormValidationRule] = (), label: Optional[str] = None,
                 minimum: int = -2147483648, maximum: int = 2147483647,
                 parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setRange(minimum, maximum)
        self._bind_field(session, field_name, rules, label)
        self._render_value(self.model_value)
        self.valueChanged.connect(self.write_value)

    def _render_value(self, value: Any) -> None:
        SignalService.update_widget_value(self, value)

    def _render_errors(self, messages: List[str]) -> None:
        _apply_error_state(self, messages)


class DoubleSpinBoxField(QDoubleSpinBox, FieldEditorMixin, metaclass=PyQtWidgetMeta):
    """Floating-point field."""

    _widget_id = "double_spin_box"

    def __init__(self, session: FormSessionInternal, field_name: str,
                 rules: Iterable[FormValidationRule] = (), label: Optional[str] = None,
                 minimum: float = -1e308, maximum: float = 1e308, decimals: int = 6,
                 parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setRange(minimum, maximum)
        self.setDecimals(decimals)
        self._bind_field(session, field_name, rules, label)
        self._render_value(self.model_value)
        self.valueChanged.connect(self.write_value)

    def _render_value(self, value: Any) -> None:
        SignalService.update_widget_value(self, value)

    def _render_errors(self, messages: List[str]) -> None:
        _apply_error_state(self, messages)


class CheckBoxField(QCheckBox, FieldEditorMixin, metaclass=PyQtWidgetMeta):
    """Boolean field; None on the model shows unchecked."""

    _widget_id = "check_box"

    def __init__(self, session: FormSessionInternal, field_name: str,
                 rules: Iterable[FormValidationRule] = (), label: Optional[str] = None,
                 parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._bind_field(session, field_name, rules, label)
        self.setText(self.label)
        self._render_value(self.model_value)
        self.toggled.connect(self.write_value)

    def _render_value(self, value: Any) -> None:
        SignalService.update_widget_value(self, value)

    def _render_errors(self, messages: List[str]) -> None:
        _apply_error_state(self, messages)


FIELD_EDITORS = {
    editor._widget_id: editor
    for editor in (LineEditField, SpinBoxField, DoubleSpinBoxField, CheckBoxField)
}
