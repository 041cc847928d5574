"""
Edit context event kinds and their argument types.

Every handler subscribed to an EditContext is called as
``handler(sender, args)`` where ``sender`` is the context that raised the
event and ``args`` is one of the dataclasses below.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from .field_identity import FieldIdentity


class EditContextEvent(Enum):
    """The three subscriber lists owned by an EditContext."""
    FIELD_CHANGED = "field_changed"
    VALIDATION_REQUESTED = "validation_requested"
    VALIDATION_STATE_CHANGED = "validation_state_changed"


@dataclass(frozen=True)
class FieldChangedEventArgs:
    """Raised after a field editor changed a value on the model."""
    field: FieldIdentity


@dataclass(frozen=True)
class ValidationRequestedEventArgs:
    """Raised when whole-model validation is requested."""


@dataclass(frozen=True)
class ValidationStateChangedEventArgs:
    """Raised after the set of validation messages changed."""


EditContextHandler = Callable[[Any, Any], None]
