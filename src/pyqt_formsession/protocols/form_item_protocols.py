"""
Field editor ABC contracts.

Defines the capabilities a field editor must implement to take part in a
form session. Explicit inheritance instead of duck typing: a session only
ever talks to editors through these ABCs.

Design Philosophy:
- Explicit inheritance over duck typing
- Fail-loud over fail-silent
- Multiple inheritance for composable capabilities (an editor is usually
  both a FieldItem and a ControlAccessor)
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Sequence

if TYPE_CHECKING:
    from pyqt_formsession.core import FieldIdentity
    from pyqt_formsession.validation.rules import RuleError


class FieldItem(ABC):
    """
    ABC for one logical form field.

    Registered with the session while the editor is mounted. The session
    looks items up by FieldIdentity when routing rule validation and
    externally supplied messages.
    """

    @abstractmethod
    def get_field_identity(self) -> 'FieldIdentity':
        """
        Identity of the field this item edits.

        Returns:
            FieldIdentity on the session's current model.
        """
        pass

    @abstractmethod
    def validate_against_rules(self) -> List['RuleError']:
        """
        Validate the field's current value against its configured rules.

        Returns:
            One RuleError per violated rule; empty when the value is valid.
        """
        pass

    @abstractmethod
    def display_errors(self, messages: Sequence[str]) -> None:
        """
        Show ``messages`` for this field, replacing whatever was shown before.

        Args:
            messages: Error messages to display. Empty clears the display.
        """
        pass


class ControlAccessor(ABC):
    """
    ABC for a resettable input control.

    Narrower than FieldItem; registered in its own registry.
    """

    @abstractmethod
    def reset(self) -> None:
        """Restore the control to its initial value."""
        pass
