"""
Core session primitives.

Pure Python building blocks with no Qt or validation-library dependencies:
field identities, edit context events and the EditContext itself.
"""

from .field_identity import FieldIdentity
from .events import (
    EditContextEvent,
    EditContextHandler,
    FieldChangedEventArgs,
    ValidationRequestedEventArgs,
    ValidationStateChangedEventArgs,
)
from .edit_context import EditContext, read_model_fields

__all__ = [
    "FieldIdentity",
    "EditContextEvent",
    "EditContextHandler",
    "FieldChangedEventArgs",
    "ValidationRequestedEventArgs",
    "ValidationStateChangedEventArgs",
    "EditContext",
    "read_model_fields",
]
