"""
EditContext - the live binding and validation context for one model.

Key features:
1. Explicit, enumerable subscriber lists (one per EditContextEvent)
2. Validation message store keyed by FieldIdentity
3. Modification tracking against a snapshot taken at construction

Subscriber lists are plain lists owned by the context rather than opaque
event primitives, so a FormSession can move every handler onto a fresh
context when the model is replaced (see ContextMigrationService).
"""

import copy
import dataclasses
import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from .events import (
    EditContextEvent,
    EditContextHandler,
    FieldChangedEventArgs,
    ValidationRequestedEventArgs,
    ValidationStateChangedEventArgs,
)
from .field_identity import FieldIdentity

logger = logging.getLogger(__name__)


def read_model_fields(model: Any) -> Dict[str, Any]:
    """Return the model's field values by name.

    Dataclasses and pydantic models expose their declared fields; any other
    object falls back to its instance ``__dict__``.
    """
    if dataclasses.is_dataclass(model) and not isinstance(model, type):
        return {f.name: getattr(model, f.name) for f in dataclasses.fields(model)}
    model_fields = getattr(type(model), "model_fields", None)
    if isinstance(model_fields, dict):
        return {name: getattr(model, name) for name in model_fields}
    return dict(getattr(model, "__dict__", {}))


def _snapshot_value(value: Any) -> Any:
    try:
        return copy.deepcopy(value)
    except (TypeError, copy.Error):
        # Uncopyable values (locks, handles) are compared by reference
        return value


class EditContext:
    """
    Binding context wrapping exactly one model instance.

    Handlers are invoked synchronously in registration order as
    ``handler(self, args)``. Adding the same handler twice means it runs
    twice; ``unsubscribe`` removes one occurrence and ignores handlers that
    are not present.
    """

    def __init__(self, model: Any):
        if model is None:
            raise ValueError("EditContext requires a model instance")
        self.model = model
        self._subscribers: Dict[EditContextEvent, List[EditContextHandler]] = {
            kind: [] for kind in EditContextEvent
        }
        self._messages: Dict[FieldIdentity, List[str]] = {}
        self._tracked_fields: Set[FieldIdentity] = set()
        self._initial_values = {name: _snapshot_value(value) for name, value in read_model_fields(model).items()}

    # ========== SUBSCRIPTIONS ==========

    def subscribe(self, kind: EditContextEvent, handler: EditContextHandler) -> None:
        """Append ``handler`` to the subscriber list for ``kind``."""
        if not callable(handler):
            raise TypeError(f"Handler for {kind.value} must be callable, got {type(handler).__name__}")
        self._subscribers[kind].append(handler)

    def unsubscribe(self, kind: EditContextEvent, handler: EditContextHandler) -> None:
        """Remove the most recently added occurrence of ``handler``, if any."""
        handlers = self._subscribers[kind]
        for index in range(len(handlers) - 1, -1, -1):
            if handlers[index] == handler:
                del handlers[index]
                return

    def get_subscribers(self, kind: EditContextEvent) -> Tuple[EditContextHandler, ...]:
        """Snapshot of the handlers for ``kind`` in registration order."""
        return tuple(self._subscribers[kind])

    def _raise(self, kind: EditContextEvent, args: Any) -> None:
        # Iterate over a copy: handlers may unsubscribe while being dispatched
        for handler in tuple(self._subscribers[kind]):
            handler(self, args)

    # ========== FIELDS ==========

    def field(self, field_name: str) -> FieldIdentity:
        """FieldIdentity for ``field_name`` on the root model."""
        return FieldIdentity(self.model, field_name)

    def notify_field_changed(self, field: FieldIdentity) -> None:
        """Mark ``field`` as tracked and fan out to field-changed subscribers."""
        self._tracked_fields.add(field)
        self._raise(EditContextEvent.FIELD_CHANGED, FieldChangedEventArgs(field))

    def is_modified(self, field: Optional[FieldIdentity] = None) -> bool:
        """True if any tracked field (or just ``field``) differs from its initial value."""
        fields: Iterable[FieldIdentity] = self._tracked_fields if field is None else (
            [field] if field in self._tracked_fields else []
        )
        return any(self._differs_from_initial(f) for f in fields)

    def _differs_from_initial(self, field: FieldIdentity) -> bool:
        if field.owner is not self.model or field.field_name not in self._initial_values:
            # No snapshot for substructures; reported changes count as modifications
            return True
        return field.get_value() != self._initial_values[field.field_name]

    def mark_as_unmodified(self, field: Optional[FieldIdentity] = None) -> None:
        """Stop tracking ``field`` (or every field) and re-snapshot the model."""
        if field is None:
            self._tracked_fields.clear()
            self._initial_values = {
                name: _snapshot_value(value) for name, value in read_model_fields(self.model).items()
            }
            return
        self._tracked_fields.discard(field)
        if field.owner is self.model:
            self._initial_values[field.field_name] = _snapshot_value(field.get_value())

    # ========== VALIDATION ==========

    def validate(self) -> bool:
        """Request validation from subscribers; True when no messages remain."""
        self._raise(EditContextEvent.VALIDATION_REQUESTED, ValidationRequestedEventArgs())
        self.notify_validation_state_changed()
        return not self._messages

    def notify_validation_state_changed(self) -> None:
        self._raise(EditContextEvent.VALIDATION_STATE_CHANGED, ValidationStateChangedEventArgs())

    def add_validation_messages(self, field: FieldIdentity, messages: Iterable[str]) -> None:
        """Append messages for ``field``; empty input leaves the store unchanged."""
        messages = list(messages)
        if messages:
            self._messages.setdefault(field, []).extend(messages)

    def clear_validation_messages(self, field: Optional[FieldIdentity] = None) -> None:
        if field is None:
            self._messages.clear()
        else:
            self._messages.pop(field, None)

    def get_validation_messages(self, field: Optional[FieldIdentity] = None) -> List[str]:
        """Messages for ``field``, or every message in the store when omitted."""
        if field is not None:
            return list(self._messages.get(field, []))
        return [message for messages in self._messages.values() for message in messages]

    def __repr__(self) -> str:
        counts = ", ".join(f"{kind.value}={len(handlers)}" for kind, handlers in self._subscribers.items())
        return f"EditContext(model={type(self.model).__name__}, {counts})"
