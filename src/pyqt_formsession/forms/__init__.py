"""
Form sessions and headless field editors.

FormSession ties a model to its edit context, validation strategy and
registered editors. FormProvider groups sessions; RuleFieldItem and
FieldEditorMixin supply the editor side of the contract.
"""

from .form_session import FormSession, FormCallbacks
from .form_provider import FormProvider, FormProviderFinishEventArgs
from .field_items import FieldEditorMixin, RuleFieldItem

__all__ = [
    "FormSession",
    "FormCallbacks",
    "FormProvider",
    "FormProviderFinishEventArgs",
    "FieldEditorMixin",
    "RuleFieldItem",
]
