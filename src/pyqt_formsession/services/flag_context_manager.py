"""
Scoped boolean flags on a FormSession.

The session keeps two guards as plain attributes: ``_in_reset`` while
controls restore their initial values (field change dispatch is dropped)
and ``_dispatching`` while a field change fans out (nested changes are
queued). They are only ever set through ``manage_flags``:

    with FlagContextManager.manage_flags(session, _in_reset=True):
        for control in controls:
            control.reset()

Previous values are restored even when the block raises, so flags nest.
"""

from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Set
import logging

logger = logging.getLogger(__name__)


class SessionFlag(Enum):
    """
    Registry of valid FormSession flags.

    Add new flags here as they're introduced; manage_flags rejects any
    name not listed.
    """
    IN_RESET = '_in_reset'
    DISPATCHING = '_dispatching'


class FlagContextManager:
    """
    Universal save/set/restore for boolean flags on a session.

    Examples:
        with FlagContextManager.manage_flags(session, _dispatching=True):
            context.notify_field_changed(field)

        with FlagContextManager.reset_context(session):
            for control in controls:
                control.reset()
    """

    VALID_FLAGS: Set[str] = {flag.value for flag in SessionFlag}

    @staticmethod
    @contextmanager
    def manage_flags(obj: Any, **flags: bool):
        """
        Set flags on entry and restore their previous values on exit.

        Raises:
            ValueError: If any flag name is not in VALID_FLAGS
            AttributeError: If ``obj`` never initialized one of the flags
        """
        invalid_flags = set(flags.keys()) - FlagContextManager.VALID_FLAGS
        if invalid_flags:
            raise ValueError(
                f"Invalid flags: {invalid_flags}. "
                f"Valid flags: {FlagContextManager.VALID_FLAGS}. "
                f"Add new flags to SessionFlag enum."
            )

        # No getattr default: every flag must be initialized in __init__
        prev_values: Dict[str, bool] = {name: getattr(obj, name) for name in flags}

        for flag_name, flag_value in flags.items():
            setattr(obj, flag_name, flag_value)
            logger.debug(f"Setting flag {flag_name}={flag_value} on {type(obj).__name__}")

        try:
            yield
        finally:
            for flag_name, prev_value in prev_values.items():
                setattr(obj, flag_name, prev_value)

    @staticmethod
    @contextmanager
    def reset_context(obj: Any):
        """Mark ``obj`` as resetting; field change dispatch is suppressed meanwhile."""
        with FlagContextManager.manage_flags(obj, **{SessionFlag.IN_RESET.value: True}):
            yield

    @staticmethod
    def is_flag_set(obj: Any, flag: SessionFlag) -> bool:
        return getattr(obj, flag.value)
