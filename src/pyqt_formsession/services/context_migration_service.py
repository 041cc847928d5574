"""
Context migration.

Moves every subscriber from one EditContext onto another so field editors
holding handlers on "the current context" keep receiving events after the
session replaces its model.

Key features:
1. Plain iterate-and-reattach over the context's explicit subscriber lists
2. Per-list order preserved; nothing dropped, nothing duplicated
3. Old context left with empty lists so stray references go quiet
"""

import logging
from typing import Dict

from pyqt_formsession.core import EditContext, EditContextEvent

logger = logging.getLogger(__name__)


class ContextMigrationService:
    """Stateless subscriber transplant between edit contexts."""

    @staticmethod
    def migrate(old_context: EditContext, new_context: EditContext) -> Dict[EditContextEvent, int]:
        """
        Move all handlers from ``old_context`` to ``new_context``.

        Handlers are appended after anything already on ``new_context``, in
        their original order within each event kind.

        Returns:
            Number of handlers moved per event kind.
        """
        if old_context is new_context:
            raise ValueError("Cannot migrate an edit context onto itself")

        moved: Dict[EditContextEvent, int] = {}
        for kind in EditContextEvent:
            handlers = old_context.get_subscribers(kind)
            for handler in handlers:
                old_context.unsubscribe(kind, handler)
                new_context.subscribe(kind, handler)
            moved[kind] = len(handlers)

        logger.debug(
            "Migrated subscribers to new context: "
            + ", ".join(f"{kind.value}={count}" for kind, count in moved.items())
        )
        return moved
