"""
Service layer for form sessions.

Stateless services for context migration, field change dispatch and flag
management. SignalService needs PyQt6 and is loaded on first access only,
so the Qt-free session core never imports Qt.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

from .context_migration_service import ContextMigrationService
from .flag_context_manager import FlagContextManager, SessionFlag
from .field_change_dispatcher import FieldChangeDispatcher, FieldChangeEvent

if TYPE_CHECKING:
    from .signal_service import SignalService

_LAZY_EXPORTS = {
    "SignalService": ("pyqt_formsession.services.signal_service", "SignalService"),
}


def __getattr__(name: str):
    if name in _LAZY_EXPORTS:
        module_name, attr = _LAZY_EXPORTS[name]
        module = importlib.import_module(module_name)
        value = getattr(module, attr)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "ContextMigrationService",
    "FlagContextManager",
    "SessionFlag",
    "FieldChangeDispatcher",
    "FieldChangeEvent",
    "SignalService",
]
