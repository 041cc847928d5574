"""
Rule-based field validation.

A field item carries a list of FormValidationRule and asks RuleValidator
to check its current value against them. Messages fall back to the
locale's ValidateMessages templates when a rule has no explicit message.

Pattern:
    rules = [FormValidationRule(required=True), FormValidationRule(min=0, max=120)]
    errors = RuleValidator.validate("Age", 200, rules)
    # [RuleError(message='Age must be between 0 and 120', rule=...)]
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence

from pyqt_formsession.protocols.form_config import ValidateMessages

logger = logging.getLogger(__name__)


@dataclass
class FormValidationRule:
    """
    One validation rule for a field.

    Attributes:
        required: Value must be present (not None, not empty)
        min / max: Bounds on numbers, or on the length of strings and sequences
        len: Exact number, or exact length of strings and sequences
        pattern: Regular expression strings must fully match
        one_of: Allowed values
        whitespace: Strings made only of whitespace count as empty
        validator: Callable returning an error message or None
        message: Overrides the generated message for this rule
    """
    required: bool = False
    min: Optional[float] = None
    max: Optional[float] = None
    len: Optional[int] = None
    pattern: Optional[str] = None
    one_of: Optional[Sequence[Any]] = None
    whitespace: bool = False
    validator: Optional[Callable[[Any], Optional[str]]] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class RuleError:
    """A violated rule and the message to show for it."""
    message: str
    rule: Optional[FormValidationRule] = None


def _is_empty(value: Any, whitespace: bool) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return (value.strip() if whitespace else value) == ""
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def _kind(value: Any) -> str:
    """Template family for a value: number, string or array."""
    if isinstance(value, bool):
        return "number"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "array"


class RuleValidator:
    """Stateless rule checker."""

    @staticmethod
    def validate(label: str, value: Any, rules: Iterable[FormValidationRule],
                 messages: Optional[ValidateMessages] = None) -> List[RuleError]:
        """
        Check ``value`` against every rule.

        Args:
            label: Field label substituted into message templates
            value: Current field value
            rules: Rules to check, in order
            messages: Templates for generated messages (English defaults if None)

        Returns:
            One RuleError per failing rule, in rule order.
        """
        messages = messages or ValidateMessages()
        errors = []
        for rule in rules:
            message = RuleValidator._check(label, value, rule, messages)
            if message is not None:
                errors.append(RuleError(message=message, rule=rule))
        return errors

    @staticmethod
    def _check(label: str, value: Any, rule: FormValidationRule, messages: ValidateMessages) -> Optional[str]:
        def fail(template: str, **params: Any) -> str:
            if rule.message is not None:
                return rule.message.format(label=label, **params)
            return template.format(label=label, **params)

        empty = _is_empty(value, rule.whitespace)
        if empty:
            if rule.required:
                return fail(messages.whitespace if rule.whitespace and isinstance(value, str) else messages.required)
            # Remaining checks apply to present values only
            return None

        kind = _kind(value)
        measured = value if kind == "number" else len(value) if hasattr(value, "__len__") else None

        if rule.len is not None and measured is not None and measured != rule.len:
            return fail(getattr(messages, f"{kind}_len"), len=rule.len)

        if measured is not None:
            too_small = rule.min is not None and measured < rule.min
            too_large = rule.max is not None and measured > rule.max
            if too_small or too_large:
                if rule.min is not None and rule.max is not None:
                    return fail(getattr(messages, f"{kind}_range"), min=rule.min, max=rule.max)
                if too_small:
                    return fail(getattr(messages, f"{kind}_min"), min=rule.min)
                return fail(getattr(messages, f"{kind}_max"), max=rule.max)

        if rule.pattern is not None and isinstance(value, str) and re.fullmatch(rule.pattern, value) is None:
            return fail(messages.pattern_mismatch, pattern=rule.pattern)

        if rule.one_of is not None and value not in rule.one_of:
            return fail(messages.one_of, one_of=", ".join(str(v) for v in rule.one_of))

        if rule.validator is not None:
            result = rule.validator(value)
            if result:
                logger.debug(f"Custom validator rejected {label}: {result}")
                return rule.message.format(label=label) if rule.message else result

        return None
