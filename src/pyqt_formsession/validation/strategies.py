"""
Validation strategies.

Exactly one strategy is active per session. A strategy owns a pair of
edit context handlers (field-changed and validation-requested) and is
attached to the live context only while it is active:

    strategy.attach(context)    # subscribe both handlers
    strategy.detach(context)    # unsubscribe both handlers

Handlers use the ``sender`` argument rather than a stored context, so they
keep working after the session migrates them onto a new context.

Strategies:
- AnnotationStrategy: pydantic-backed annotation validation of the model
- RuleStrategy: per-field rules evaluated by the registered FieldItems
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Sequence

from pyqt_formsession.core import (
    EditContext,
    EditContextEvent,
    FieldChangedEventArgs,
    FieldIdentity,
    ValidationRequestedEventArgs,
)
from pyqt_formsession.protocols.form_item_protocols import FieldItem
from .annotation_validator import AnnotationValidator

logger = logging.getLogger(__name__)


class ValidationStrategy(ABC):
    """Base for the two mutually exclusive validation strategies."""

    name: str = "abstract"

    def attach(self, context: EditContext) -> None:
        context.subscribe(EditContextEvent.FIELD_CHANGED, self.on_field_changed)
        context.subscribe(EditContextEvent.VALIDATION_REQUESTED, self.on_validation_requested)
        logger.debug(f"Attached {self.name} strategy to {context!r}")

    def detach(self, context: EditContext) -> None:
        context.unsubscribe(EditContextEvent.FIELD_CHANGED, self.on_field_changed)
        context.unsubscribe(EditContextEvent.VALIDATION_REQUESTED, self.on_validation_requested)
        logger.debug(f"Detached {self.name} strategy from {context!r}")

    def is_attached(self, context: EditContext) -> bool:
        return (self.on_field_changed in context.get_subscribers(EditContextEvent.FIELD_CHANGED)
                or self.on_validation_requested in context.get_subscribers(EditContextEvent.VALIDATION_REQUESTED))

    @abstractmethod
    def on_field_changed(self, sender: EditContext, args: FieldChangedEventArgs) -> None:
        pass

    @abstractmethod
    def on_validation_requested(self, sender: EditContext, args: ValidationRequestedEventArgs) -> None:
        pass

    def reset_state(self) -> None:
        """Forget validation results after the session rebuilt its context."""


class AnnotationStrategy(ValidationStrategy):
    """Delegates to the model's annotations; results land in the context message store."""

    name = "annotation"

    def __init__(self, validator: Optional[AnnotationValidator] = None):
        self.validator = validator or AnnotationValidator()

    def on_field_changed(self, sender: EditContext, args: FieldChangedEventArgs) -> None:
        sender.clear_validation_messages(args.field)
        sender.add_validation_messages(args.field, self.validator.validate_field(sender.model, args.field))
        sender.notify_validation_state_changed()

    def on_validation_requested(self, sender: EditContext, args: ValidationRequestedEventArgs) -> None:
        sender.clear_validation_messages()
        for field, messages in self.validator.validate_model(sender.model).items():
            sender.add_validation_messages(field, messages)


class RuleStrategy(ValidationStrategy):
    """
    Rule validation through the session's registered FieldItems.

    Keeps the error mapping (FieldIdentity -> messages) and mirrors it into
    the context message store so ``EditContext.validate()`` reports rule
    failures too.
    """

    name = "rules"

    def __init__(self, items_provider: Callable[[], Sequence[FieldItem]]):
        self._items_provider = items_provider
        self.errors: Dict[FieldIdentity, List[str]] = {}

    def _find_item(self, field: FieldIdentity) -> Optional[FieldItem]:
        for item in self._items_provider():
            if item.get_field_identity() == field:
                return item
        return None

    def clear_error(self, context: EditContext, field: FieldIdentity) -> None:
        self.errors.pop(field, None)
        context.clear_validation_messages(field)

    def clear_errors(self, context: EditContext) -> None:
        self.errors.clear()
        context.clear_validation_messages()

    def display_errors(self, errors: Dict[FieldIdentity, List[str]]) -> None:
        """Push each item its own list; items missing from ``errors`` are cleared."""
        for item in self._items_provider():
            item.display_errors(list(errors.get(item.get_field_identity(), [])))

    def on_field_changed(self, sender: EditContext, args: FieldChangedEventArgs) -> None:
        self.clear_error(sender, args.field)

        form_item = self._find_item(args.field)
        if form_item is None:
            return

        messages = [error.message for error in form_item.validate_against_rules()]
        if messages:
            self.errors[args.field] = messages
            sender.add_validation_messages(args.field, messages)
        form_item.display_errors(messages)
        sender.notify_validation_state_changed()

    def on_validation_requested(self, sender: EditContext, args: ValidationRequestedEventArgs) -> None:
        self.clear_errors(sender)

        errors: Dict[FieldIdentity, List[str]] = {}
        for form_item in self._items_provider():
            result = form_item.validate_against_rules()
            if result:
                errors[form_item.get_field_identity()] = [error.message for error in result]

        self.errors.update(errors)
        for field, messages in errors.items():
            sender.add_validation_messages(field, messages)
        self.display_errors(errors)
        logger.debug(f"Rule validation: {len(errors)} field(s) with errors")

    def reset_state(self) -> None:
        self.errors.clear()
        self.display_errors({})
