"""
Declarative form validation.

Rules are declared once per form; validate() returns a mapping of field
name to message for every field that currently fails. Errors are always
computed for all fields but only shown for touched ones, except after a
submit attempt, which touches every field.
"""

import re
import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Pattern, Set, Union

logger = logging.getLogger(__name__)

EMAIL_PATTERN = r'^[^\s@]+@[^\s@]+\.[^\s@]+$'
PASSWORD_PATTERN = r'^(?=.*[A-Za-z])(?=.*\d)[A-Za-z\d@$!%*#?&^_-]{8,}$'
URL_PATTERN = re.compile(r'^(https?://)[^\s$.?#].[^\s]*$', re.IGNORECASE)
PRICE_PATTERN = r'^\d+(\.\d+)?$'
DATE_PATTERN = r'^\d{4}-\d{2}-\d{2}$'


def as_text(value: Any) -> str:
    """Normalise a form value to stripped text; None becomes ''."""
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value).strip()


def digits_only(value: Any, max_length: Optional[int] = None) -> str:
    """Strip every non-digit character and optionally truncate."""
    digits = re.sub(r'\D', '', as_text(value))
    if max_length is not None:
        digits = digits[:max_length]
    return digits


def parse_date(value: Any) -> Optional[date]:
    """Parse a date input (date object or YYYY-MM-DD text); None if unparseable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = as_text(value)
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


class FieldRule:
    """
    Validation rule for a single field.

    Checks run in order: required, exact digit count, minimum length,
    pattern. Optional fields are skipped entirely when blank.
    Values are stripped before checking unless `strip` is False, in which
    case the value is checked exactly as it will be sent.
    """

    def __init__(
        self,
        name: str,
        label: Optional[str] = None,
        required: bool = False,
        pattern: Optional[Union[str, Pattern[str]]] = None,
        pattern_message: Optional[str] = None,
        exact_digits: Optional[int] = None,
        min_length: Optional[int] = None,
        required_message: Optional[str] = None,
        digits_message: Optional[str] = None,
        min_length_message: Optional[str] = None,
        strip: bool = True,
    ):
        self.name = name
        self.label = label or name.replace('_', ' ').capitalize()
        self.required = required
        self.pattern = re.compile(pattern) if pattern else None
        self.strip = strip
        self.pattern_message = pattern_message or f"Enter a valid {self.label.lower()}."
        self.exact_digits = exact_digits
        self.min_length = min_length
        self.required_message = required_message or f"{self.label} is required."
        self.digits_message = digits_message or f"{self.label} must be {exact_digits} digits."
        self.min_length_message = min_length_message or (
            f"{self.label} must be at least {min_length} characters."
        )

    def check(self, value: Any) -> Optional[str]:
        """Return the error message for a value, or None if it is valid."""
        if self.strip or value is None:
            text = as_text(value)
        else:
            text = str(value)

        if not text:
            return self.required_message if self.required else None

        if self.exact_digits is not None:
            if not text.isdigit() or len(text) != self.exact_digits:
                return self.digits_message

        if self.min_length is not None and len(text) < self.min_length:
            return self.min_length_message

        if self.pattern is not None and not self.pattern.match(text):
            return self.pattern_message

        return None

    def __repr__(self) -> str:
        return f"FieldRule({self.name!r}, required={self.required})"


class PairRule:
    """
    Cross-field rule comparing two values.

    The error is reported on `target` (the second field by default). The
    comparison is only evaluated when both values are present; presence
    itself is a FieldRule concern.
    """

    def __init__(
        self,
        first: str,
        second: str,
        compare: Callable[[Any, Any], bool],
        message: str,
        target: Optional[str] = None,
    ):
        self.first = first
        self.second = second
        self.compare = compare
        self.message = message
        self.target = target or second

    def check(self, values: Mapping[str, Any]) -> Optional[str]:
        first = values.get(self.first)
        second = values.get(self.second)
        if not as_text(first) or not as_text(second):
            return None
        return None if self.compare(first, second) else self.message


def end_not_before_start(start: Any, end: Any) -> bool:
    """Comparator: end date is the same day as or after the start date."""
    start_date = parse_date(start)
    end_date = parse_date(end)
    if start_date is None or end_date is None:
        return True
    return end_date >= start_date


class FormValidator:
    """
    Validates a whole form and tracks which fields the user has touched.

    Validation is all-or-nothing per submit attempt: submit() touches
    every field and the form may only be sent when it returns no errors.
    """

    def __init__(self, rules: Iterable[FieldRule], pair_rules: Optional[Iterable[PairRule]] = None):
        self.rules: List[FieldRule] = list(rules)
        self.pair_rules: List[PairRule] = list(pair_rules or [])
        self.touched: Set[str] = set()

    @property
    def fields(self) -> List[str]:
        return [rule.name for rule in self.rules]

    def rule_for(self, name: str) -> FieldRule:
        for rule in self.rules:
            if rule.name == name:
                return rule
        raise KeyError(f"No rule declared for field '{name}'")

    def validate(self, values: Mapping[str, Any]) -> Dict[str, str]:
        """
        Compute errors for every field.

        Args:
            values: Current form values

        Returns:
            Mapping of field name to message; valid fields are absent.
        """
        errors: Dict[str, str] = {}
        for rule in self.rules:
            message = rule.check(values.get(rule.name))
            if message:
                errors[rule.name] = message

        for pair in self.pair_rules:
            if pair.target in errors:
                continue
            message = pair.check(values)
            if message:
                errors[pair.target] = message

        return errors

    def validate_field(self, name: str, values: Mapping[str, Any]) -> Optional[str]:
        """Validate one field, including pair rules that report on it."""
        return self.validate(values).get(name)

    def touch(self, name: str) -> None:
        self.touched.add(name)

    def touch_all(self) -> None:
        self.touched.update(self.fields)
        self.touched.update(pair.target for pair in self.pair_rules)

    def reset(self) -> None:
        self.touched.clear()

    def visible_errors(self, errors: Mapping[str, str]) -> Dict[str, str]:
        """Errors for touched fields only."""
        return {name: message for name, message in errors.items() if name in self.touched}

    def submit(self, values: Mapping[str, Any]) -> Dict[str, str]:
        """
        Validate for a submit attempt.

        Every field is forced touched so all errors become visible. The
        caller must not issue a request unless the result is empty.
        """
        self.touch_all()
        errors = self.validate(values)
        if errors:
            logger.info(f"Form submission blocked by {len(errors)} invalid field(s): {sorted(errors)}")
        return errors

    def is_valid(self, values: Mapping[str, Any]) -> bool:
        return not self.validate(values)
