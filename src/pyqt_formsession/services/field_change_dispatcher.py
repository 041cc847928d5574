"""
Unified Field Change Dispatcher.

Single path from a field editor's edit to the session's edit context.
Editors never raise field-changed on a context themselves; they report the
edit to the session, which hands it here.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from pyqt_formsession.core import FieldIdentity
from .flag_context_manager import FlagContextManager, SessionFlag

if TYPE_CHECKING:
    from pyqt_formsession.forms.form_session import FormSession

logger = logging.getLogger(__name__)

# Debug flag for verbose dispatcher logging
DEBUG_DISPATCHER = False


@dataclass(frozen=True)
class FieldChangeEvent:
    """Immutable event representing a field edit."""
    field: Union[str, FieldIdentity]   # Field name on the root model, or a full identity
    source_session: 'FormSession'      # Session the editor is registered with


class FieldChangeDispatcher:
    """Singleton dispatcher for all field changes. Stateless."""

    _instance = None

    @classmethod
    def instance(cls) -> 'FieldChangeDispatcher':
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def dispatch(self, event: FieldChangeEvent) -> bool:
        """
        Forward a field edit to the session's current edit context.

        A change reported while another one is fanning out (a handler that
        writes a dependent field) is queued and delivered once the current
        fan-out finishes, in reporting order.

        Returns:
            True if the change reached (or is queued for) the context,
            False if the session is resetting.
        """
        session = event.source_session

        if FlagContextManager.is_flag_set(session, SessionFlag.IN_RESET):
            if DEBUG_DISPATCHER:
                logger.info(f"DISPATCH BLOCKED: {event.field!r} during reset")
            return False

        if FlagContextManager.is_flag_set(session, SessionFlag.DISPATCHING):
            if DEBUG_DISPATCHER:
                logger.info(f"DISPATCH QUEUED: {event.field!r} (fan-out in progress)")
            session._queued_field_changes.append(event)
            return True

        with FlagContextManager.manage_flags(session, **{SessionFlag.DISPATCHING.value: True}):
            try:
                self._deliver(event)
                while session._queued_field_changes:
                    self._deliver(session._queued_field_changes.popleft())
            finally:
                session._queued_field_changes.clear()
        return True

    def _deliver(self, event: FieldChangeEvent) -> None:
        context = event.source_session.edit_context
        field = event.field if isinstance(event.field, FieldIdentity) else context.field(event.field)

        if DEBUG_DISPATCHER:
            logger.info(f"DISPATCH: {field!r} = {repr(field.get_value())[:50]}")

        context.notify_field_changed(field)
        logger.debug(f"Dispatched field change for {field.field_name}")
