"""
Qt signal helpers for field editors.

Editors render model values (on construction and on reset) through
``update_widget_value``. Signals stay blocked during the update, so a
programmatic value never comes back to the session as a user edit.
"""

from contextlib import contextmanager
from typing import Any, Callable, Optional
from PyQt6.QtWidgets import QWidget, QCheckBox, QLineEdit, QComboBox, QSpinBox, QDoubleSpinBox
import logging

logger = logging.getLogger(__name__)


class SignalService:
    """
    Signal blocking for programmatic widget updates.

    Examples:
        with SignalService.block_signals(name_edit, age_spin):
            name_edit.setText(person.name)
            age_spin.setValue(person.age)

        SignalService.update_widget_value(age_spin, None)   # shows the minimum
    """

    @staticmethod
    @contextmanager
    def block_signals(*widgets: Optional[QWidget]):
        """Block signals on every non-None widget; restore each previous state on exit."""
        previous = []
        for widget in widgets:
            if widget is not None:
                previous.append((widget, widget.blockSignals(True)))

        try:
            yield
        finally:
            for widget, was_blocked in previous:
                widget.blockSignals(was_blocked)

    @staticmethod
    def update_widget_value(widget: QWidget, value: Any, setter: Optional[Callable[[QWidget, Any], None]] = None) -> None:
        """Show ``value`` in ``widget`` without emitting change signals."""
        with SignalService.block_signals(widget):
            if setter:
                setter(widget, value)
            elif isinstance(widget, QCheckBox):
                widget.setChecked(bool(value))
            elif isinstance(widget, QLineEdit):
                widget.setText(str(value) if value is not None else "")
            elif isinstance(widget, QComboBox):
                index = widget.findData(value)
                widget.setCurrentIndex(index)
            elif isinstance(widget, (QSpinBox, QDoubleSpinBox)):
                widget.setValue(widget.minimum() if value is None else value)
            else:
                raise ValueError(f"Cannot auto-detect setter for {type(widget).__name__}")
        logger.debug(f"Updated {type(widget).__name__} to {value!r} with signals blocked")
