"""Qt signal bridge for a FormSession."""

import logging
from typing import Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from pyqt_formsession.forms.form_session import FormSession

logger = logging.getLogger(__name__)


class FormSessionBridge(QObject):
    """
    Re-emits session notifications as Qt signals.

    The session's abstract "state changed" callback becomes a queued
    ``state_changed`` signal: several rebuilds within one event-loop turn
    collapse into a single emission, so views re-render once.

    Usage:
        bridge = FormSessionBridge(session, parent=window)
        bridge.state_changed.connect(window.refresh)
        bridge.finished.connect(on_saved)
        submit_button.clicked.connect(bridge.submit)
    """

    state_changed = pyqtSignal()
    finished = pyqtSignal(object)       # EditContext
    finish_failed = pyqtSignal(object)  # EditContext

    def __init__(self, session: FormSession, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.session = session
        self._render_pending = False
        session.add_state_changed_listener(self._schedule_state_changed)
        session.add_finish_listener(self._on_session_finished)

    def _schedule_state_changed(self) -> None:
        if self._render_pending:
            return
        self._render_pending = True
        QTimer.singleShot(0, self._emit_state_changed)

    def _emit_state_changed(self) -> None:
        self._render_pending = False
        self.state_changed.emit()

    def _on_session_finished(self, session: FormSession) -> None:
        self.finished.emit(session.edit_context)

    def submit(self) -> bool:
        """Submit the session; emits ``finished`` or ``finish_failed``."""
        is_valid = self.session.submit()
        if not is_valid:
            self.finish_failed.emit(self.session.edit_context)
        return is_valid

    def detach(self) -> None:
        self.session.remove_state_changed_listener(self._schedule_state_changed)
        self.session.remove_finish_listener(self._on_session_finished)
        logger.debug("FormSessionBridge detached")
