"""Form session - binds one model to its field editors and validation strategy."""

import asyncio
import dataclasses
import inspect
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, List, Optional, Sequence, Set, Tuple, Union

from pyqt_formsession.core import (
    EditContext,
    EditContextEvent,
    FieldChangedEventArgs,
    FieldIdentity,
    ValidationRequestedEventArgs,
    ValidationStateChangedEventArgs,
)
from pyqt_formsession.exceptions import ModelConstructionError, NoEditContextError
from pyqt_formsession.protocols import (
    ControlAccessor,
    FieldItem,
    FormLocale,
    FormSessionConfig,
    FormSessionInternal,
    FormSessionPublic,
    FormValidateMode,
    get_form_config,
)
from pyqt_formsession.services import (
    ContextMigrationService,
    FieldChangeDispatcher,
    FieldChangeEvent,
    FlagContextManager,
)
from pyqt_formsession.validation import (
    AnnotationStrategy,
    AnnotationValidator,
    RuleStrategy,
    ValidationStrategy,
)

logger = logging.getLogger(__name__)


@dataclass
class FormCallbacks:
    """
    Externally supplied handlers for a FormSession.

    Consolidates the optional callbacks into one object. Callbacks may be
    plain functions or coroutine functions; the session waits for them to
    complete either way.

    The three event forwarders are attached to the edit context only when
    set, and travel with every other subscriber on context migration.
    """
    on_finish: Optional[Callable[[EditContext], Any]] = None
    on_finish_failed: Optional[Callable[[EditContext], Any]] = None
    on_field_changed: Optional[Callable[[FieldChangedEventArgs], Any]] = None
    on_validation_requested: Optional[Callable[[ValidationRequestedEventArgs], Any]] = None
    on_validation_state_changed: Optional[Callable[[ValidationStateChangedEventArgs], Any]] = None


async def _await(result: Any) -> Any:
    return await result


class FormSession(FormSessionPublic, FormSessionInternal):
    """
    Session manager for one editable model.

    Owns the live EditContext, the active validation strategy and the
    registries of field items and controls. Whenever the model is replaced
    (or the form is reset) the session builds a fresh EditContext and moves
    every subscriber onto it, so editors that subscribed at mount time keep
    working.

    Key behaviors:
    - Strategy selection is derived from config on every change
      (locale default messages or a non-default validate mode -> rules)
    - Only the active strategy's handlers are attached to the context
    - Validation failures never raise; they flow through return values and
      FieldItem.display_errors
    """

    def __init__(self, model: Any = None, config: Optional[FormSessionConfig] = None, *,
                 model_factory: Optional[Callable[[], Any]] = None,
                 callbacks: Optional[FormCallbacks] = None,
                 annotation_validator: Optional[AnnotationValidator] = None,
                 provider: Optional[Any] = None):
        """
        Args:
            model: Object to edit. Built with ``model_factory`` when None.
            config: Session configuration (copy of the global default if None)
            model_factory: Zero-argument callable building a default model
            callbacks: Finish and event-forwarding callbacks
            annotation_validator: Validator (and its schema cache) for annotation mode
            provider: Optional FormProvider this session registers with
        """
        self.config = config if config is not None else dataclasses.replace(get_form_config())
        self.callbacks = callbacks or FormCallbacks()
        self._model_factory = model_factory
        self._annotation_validator = annotation_validator or AnnotationValidator()
        self._provider = provider

        self._form_items: List[FieldItem] = []
        self._controls: List[ControlAccessor] = []
        self._finish_listeners: List[Callable[[Any], None]] = []
        self._state_changed_listeners: List[Callable[[], None]] = []

        # Flags managed through FlagContextManager
        self._in_reset = False
        self._dispatching = False

        # Field changes reported while another one fans out; drained by the dispatcher
        self._queued_field_changes: Deque[FieldChangeEvent] = deque()
        # Awaitable callback results scheduled on a running loop; awaited by submit_async
        self._pending_callbacks: Set[asyncio.Future] = set()

        self._model = model if model is not None else self._construct_model()
        self._edit_context: Optional[EditContext] = EditContext(self._model)

        if self._provider is not None:
            self._provider.add_form(self)

        self._attach_forwarders(self._edit_context)

        self._strategy: ValidationStrategy = self._create_strategy()
        self._strategy.attach(self._edit_context)
        logger.debug(f"FormSession initialized for {type(self._model).__name__} "
                     f"with {self._strategy.name} strategy")

    # ==================== MODEL ====================

    def _construct_model(self) -> Any:
        if self._model_factory is None:
            raise ModelConstructionError(
                "FormSession needs a model or a model_factory to build a default one"
            )
        # Factory errors propagate: a session cannot run without a model
        return self._model_factory()

    @property
    def model(self) -> Any:
        return self._model

    @model.setter
    def model(self, value: Any) -> None:
        if self._model is value:
            return
        # Build the replacement first so a failing factory leaves the session untouched
        new_model = value if value is not None else self._construct_model()
        self._model = new_model
        self._rebuild_context()

    # ==================== EDIT CONTEXT ====================

    @property
    def edit_context(self) -> EditContext:
        if self._edit_context is None:
            raise NoEditContextError("FormSession has been disposed")
        return self._edit_context

    @property
    def is_modified(self) -> bool:
        return self.edit_context.is_modified()

    def _rebuild_context(self) -> None:
        """Replace the edit context, carrying every subscriber over."""
        if self._edit_context is None:
            return

        new_context = EditContext(self._model)
        ContextMigrationService.migrate(self._edit_context, new_context)
        self._edit_context = new_context

        self._strategy.reset_state()
        new_context.notify_validation_state_changed()
        self._notify_state_changed()

    def _attach_forwarders(self, context: EditContext) -> None:
        if self.callbacks.on_field_changed is not None:
            context.subscribe(EditContextEvent.FIELD_CHANGED, self._forward_field_changed)
        if self.callbacks.on_validation_requested is not None:
            context.subscribe(EditContextEvent.VALIDATION_REQUESTED, self._forward_validation_requested)
        if self.callbacks.on_validation_state_changed is not None:
            context.subscribe(EditContextEvent.VALIDATION_STATE_CHANGED, self._forward_validation_state_changed)

    def _detach_forwarders(self, context: EditContext) -> None:
        if self.callbacks.on_field_changed is not None:
            context.unsubscribe(EditContextEvent.FIELD_CHANGED, self._forward_field_changed)
        if self.callbacks.on_validation_requested is not None:
            context.unsubscribe(EditContextEvent.VALIDATION_REQUESTED, self._forward_validation_requested)
        if self.callbacks.on_validation_state_changed is not None:
            context.unsubscribe(EditContextEvent.VALIDATION_STATE_CHANGED, self._forward_validation_state_changed)

    def _forward_field_changed(self, sender: EditContext, args: FieldChangedEventArgs) -> None:
        self._complete_callback(self.callbacks.on_field_changed(args))

    def _forward_validation_requested(self, sender: EditContext, args: ValidationRequestedEventArgs) -> None:
        self._complete_callback(self.callbacks.on_validation_requested(args))

    def _forward_validation_state_changed(self, sender: EditContext, args: ValidationStateChangedEventArgs) -> None:
        self._complete_callback(self.callbacks.on_validation_state_changed(args))

    # ==================== AWAITABLE CALLBACKS ====================

    def _complete_callback(self, result: Any) -> None:
        """
        Finish an awaitable callback result.

        Without a running loop the result is run to completion here. Inside
        a running loop it becomes a task held in ``_pending_callbacks`` until
        ``submit_async`` awaits it.
        """
        if not inspect.isawaitable(result):
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(_await(result))
            return
        task = asyncio.ensure_future(result)
        self._pending_callbacks.add(task)
        task.add_done_callback(self._pending_callbacks.discard)

    async def _await_pending_callbacks(self) -> None:
        """Await every scheduled callback, including ones scheduled meanwhile; errors propagate."""
        while self._pending_callbacks:
            pending = tuple(self._pending_callbacks)
            try:
                await asyncio.gather(*pending)
            finally:
                self._pending_callbacks.difference_update(task for task in pending if task.done())

    # ==================== VALIDATION STRATEGY ====================

    @property
    def use_locale_validate_message(self) -> bool:
        return self.config.use_locale_validate_message

    @property
    def use_rules_validator(self) -> bool:
        return self.config.use_rules_validator

    @property
    def active_strategy(self) -> ValidationStrategy:
        return self._strategy

    @property
    def rule_errors(self) -> Dict[FieldIdentity, List[str]]:
        """Current rule error mapping; empty in annotation mode."""
        if isinstance(self._strategy, RuleStrategy):
            return {field: list(messages) for field, messages in self._strategy.errors.items()}
        return {}

    def _create_strategy(self) -> ValidationStrategy:
        if self.config.use_rules_validator:
            return RuleStrategy(lambda: tuple(self._form_items))
        return AnnotationStrategy(self._annotation_validator)

    def _sync_strategy(self) -> None:
        """Swap strategies if the configuration now selects the other one."""
        wants_rules = self.config.use_rules_validator
        if isinstance(self._strategy, RuleStrategy) == wants_rules:
            return

        context = self.edit_context
        old_strategy = self._strategy
        old_strategy.detach(context)
        old_strategy.reset_state()
        context.clear_validation_messages()

        self._strategy = self._create_strategy()
        self._strategy.attach(context)
        logger.info(f"Validation strategy switched: {old_strategy.name} -> {self._strategy.name}")
        context.notify_validation_state_changed()

    @property
    def validate_mode(self) -> FormValidateMode:
        return self.config.validate_mode

    @validate_mode.setter
    def validate_mode(self, value: FormValidateMode) -> None:
        if not isinstance(value, FormValidateMode):
            raise TypeError(f"validate_mode must be a FormValidateMode, got {value!r}")
        self.config.validate_mode = value
        self._sync_strategy()

    @property
    def locale(self) -> FormLocale:
        return self.config.locale

    @locale.setter
    def locale(self, value: FormLocale) -> None:
        self.config.locale = value
        self._sync_strategy()

    def apply_config(self, config: FormSessionConfig) -> None:
        """Replace the whole configuration and re-select the strategy."""
        self.config = config
        self._sync_strategy()

    # ==================== PASSIVE CONFIG ====================

    @property
    def name(self) -> Optional[str]:
        return self.config.name

    @property
    def loading(self) -> bool:
        return self.config.loading

    @property
    def validate_on_change(self) -> bool:
        return self.config.validate_on_change

    # ==================== REGISTRIES ====================

    @property
    def form_items(self) -> Tuple[FieldItem, ...]:
        return tuple(self._form_items)

    @property
    def controls(self) -> Tuple[ControlAccessor, ...]:
        return tuple(self._controls)

    def add_form_item(self, form_item: FieldItem) -> None:
        if form_item in self._form_items:
            logger.debug(f"Form item {form_item!r} already registered")
            return
        self._form_items.append(form_item)

    def remove_form_item(self, form_item: FieldItem) -> None:
        if form_item in self._form_items:
            self._form_items.remove(form_item)

    def add_control(self, control: ControlAccessor) -> None:
        if control in self._controls:
            return
        self._controls.append(control)

    def remove_control(self, control: ControlAccessor) -> None:
        if control in self._controls:
            self._controls.remove(control)

    def _find_form_item(self, field: FieldIdentity) -> Optional[FieldItem]:
        for form_item in self._form_items:
            if form_item.get_field_identity() == field:
                return form_item
        return None

    # ==================== LISTENERS ====================

    def add_state_changed_listener(self, callback: Callable[[], None]) -> None:
        self._state_changed_listeners.append(callback)

    def remove_state_changed_listener(self, callback: Callable[[], None]) -> None:
        if callback in self._state_changed_listeners:
            self._state_changed_listeners.remove(callback)

    def _notify_state_changed(self) -> None:
        for callback in tuple(self._state_changed_listeners):
            callback()

    def add_finish_listener(self, callback: Callable[[Any], None]) -> None:
        self._finish_listeners.append(callback)

    def remove_finish_listener(self, callback: Callable[[Any], None]) -> None:
        if callback in self._finish_listeners:
            self._finish_listeners.remove(callback)

    def _raise_finish_event(self) -> None:
        for callback in tuple(self._finish_listeners):
            callback(self)

    # ==================== FIELD CHANGES ====================

    def notify_field_changed(self, field: Union[str, FieldIdentity]) -> bool:
        """Report an edit of ``field``; returns False if a guard suppressed it."""
        return FieldChangeDispatcher.instance().dispatch(FieldChangeEvent(field, self))

    # ==================== PUBLIC OPERATIONS ====================

    def validate(self) -> bool:
        return self.edit_context.validate()

    def submit(self) -> bool:
        """
        Validate and run the finish (or finish-failed) callbacks.

        Awaitable callback results are run to completion before returning
        when no event loop is running. Inside a running loop use
        ``submit_async``.

        Returns:
            Whether the model was valid.
        """
        context = self.edit_context
        is_valid = self.validate()
        if is_valid:
            if self.callbacks.on_finish is not None:
                self._complete_callback(self.callbacks.on_finish(context))
            self._raise_finish_event()
        elif self.callbacks.on_finish_failed is not None:
            self._complete_callback(self.callbacks.on_finish_failed(context))
        if self._pending_callbacks:
            logger.warning(f"{len(self._pending_callbacks)} awaitable callback(s) still running on the "
                           f"event loop; use submit_async() to await them")
        logger.debug(f"Submit of {type(self._model).__name__}: valid={is_valid}")
        return is_valid

    async def submit_async(self) -> bool:
        """
        Like ``submit`` but awaits coroutine callbacks on the running loop.

        Awaitable results of the forwarded event callbacks (field changed,
        validation requested, validation state changed) are awaited too,
        so every callback has finished when this returns.
        """
        context = self.edit_context
        is_valid = self.validate()
        await self._await_pending_callbacks()
        if is_valid:
            if self.callbacks.on_finish is not None:
                result = self.callbacks.on_finish(context)
                if inspect.isawaitable(result):
                    await result
            self._raise_finish_event()
        elif self.callbacks.on_finish_failed is not None:
            result = self.callbacks.on_finish_failed(context)
            if inspect.isawaitable(result):
                await result
        # Finish handlers may have edited fields and scheduled more callbacks
        await self._await_pending_callbacks()
        return is_valid

    def reset(self) -> None:
        """Reset every control in registration order, then rebuild the context."""
        with FlagContextManager.reset_context(self):
            for control in tuple(self._controls):
                control.reset()
        self._rebuild_context()

    def validation_reset(self) -> None:
        """Rebuild the context without touching controls; clears validation state."""
        self._rebuild_context()

    def set_validation_messages(self, field_name: str, messages: Sequence[str]) -> None:
        """Show ``messages`` on the item for ``field_name``, bypassing the strategy."""
        form_item = self._find_form_item(self.edit_context.field(field_name))
        if form_item is None:
            logger.debug(f"No form item for {field_name!r}; messages dropped")
            return
        form_item.display_errors(list(messages))

    def dispose(self) -> None:
        """Detach every session-owned handler from the live context."""
        if self._edit_context is None:
            return
        self._detach_forwarders(self._edit_context)
        self._strategy.detach(self._edit_context)
        if self._provider is not None:
            self._provider.remove_form(self)
        self._edit_context = None
        logger.debug(f"FormSession for {type(self._model).__name__} disposed")

    def __repr__(self) -> str:
        return (f"FormSession(model={type(self._model).__name__}, strategy={self._strategy.name}, "
                f"items={len(self._form_items)}, controls={len(self._controls)})")
