"""Coordinator for several form sessions that finish independently."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class FormProviderFinishEventArgs:
    """Passed to ``on_form_finish`` when one of the provider's forms submits successfully."""
    form_name: Optional[str]
    forms: Dict[str, Any] = field(default_factory=dict)


class FormProvider:
    """
    Collects sessions and relays their successful submissions.

    Sessions created with ``provider=`` register themselves; the provider
    listens to each session's finish event and calls ``on_form_finish``
    with the finished form's name and every named form it knows.
    """

    def __init__(self, on_form_finish: Optional[Callable[[FormProviderFinishEventArgs], None]] = None):
        self.on_form_finish = on_form_finish
        self._forms: List[Any] = []

    @property
    def forms(self) -> Dict[str, Any]:
        """Registered sessions by name; unnamed sessions are left out."""
        return {form.name: form for form in self._forms if form.name}

    def add_form(self, form: Any) -> None:
        if form in self._forms:
            return
        self._forms.append(form)
        form.add_finish_listener(self._on_form_finish)
        logger.debug(f"FormProvider: added form {form.name!r} ({len(self._forms)} total)")

    def remove_form(self, form: Any) -> None:
        if form not in self._forms:
            return
        self._forms.remove(form)
        form.remove_finish_listener(self._on_form_finish)

    def get_form(self, name: str) -> Optional[Any]:
        return self.forms.get(name)

    def _on_form_finish(self, form: Any) -> None:
        if self.on_form_finish is not None:
            self.on_form_finish(FormProviderFinishEventArgs(form_name=form.name, forms=self.forms))
