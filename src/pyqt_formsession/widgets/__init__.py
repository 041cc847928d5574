"""
PyQt6 binding layer.

Qt field editors implementing the session's FieldItem and ControlAccessor
contracts, and a QObject bridge turning session notifications into
signals. Importing this package requires PyQt6.
"""

from .field_editors import (
    PyQtWidgetMeta,
    LineEditField,
    SpinBoxField,
    DoubleSpinBoxField,
    CheckBoxField,
    FIELD_EDITORS,
)
from .session_bridge import FormSessionBridge

__all__ = [
    "PyQtWidgetMeta",
    "LineEditField",
    "SpinBoxField",
    "DoubleSpinBoxField",
    "CheckBoxField",
    "FIELD_EDITORS",
    "FormSessionBridge",
]
