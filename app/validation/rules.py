"""
Declarative field validation.

A rule set maps each field to an ordered list of rules. Every failing rule
contributes one message, looked up as ``"<field>.<rule>"`` in the message
table, so a field can report several problems at once.

Only implicit rules (``required``) run against an absent value, that is a
missing key, ``None`` or an empty string. All other rules are skipped for
absent values.
"""
import math
import re
from typing import Any, Callable, Dict, List, Mapping

from app.exceptions import ValidationFailed

MISSING = object()

# Signed 64-bit range of an INTEGER column
INTEGER_MIN = -(2 ** 63)
INTEGER_MAX = 2 ** 63 - 1

_NUMERIC_RE = re.compile(r"^[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?$")
_INTEGER_RE = re.compile(r"^-?[0-9]+$")


def is_absent(value: Any) -> bool:
    """True for a missing key, ``None`` or an empty string."""
    return value is MISSING or value is None or value == ""


def _is_finite(value: Any) -> bool:
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def is_numeric(value: Any) -> bool:
    """
    True for finite JSON numbers and numeric strings.

    Booleans are not numbers. Only ASCII digits count.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return _is_finite(value)
    if isinstance(value, str):
        return bool(_NUMERIC_RE.match(value)) and _is_finite(value)
    return False


def is_integer(value: Any) -> bool:
    """True for integers, whole floats and integer strings within 64 bits."""
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        if not (math.isfinite(value) and value.is_integer()):
            return False
        value = int(value)
    elif isinstance(value, str):
        if not _INTEGER_RE.match(value):
            return False
        value = int(value)
    elif not isinstance(value, int):
        return False
    return INTEGER_MIN <= value <= INTEGER_MAX


class Rule:
    """Base class for a single field constraint."""

    name = ""
    implicit = False

    def passes(self, value: Any, numeric_field: bool) -> bool:
        raise NotImplementedError


class Required(Rule):
    name = "required"
    implicit = True

    def passes(self, value, numeric_field):
        if is_absent(value):
            return False
        if isinstance(value, str):
            return value.strip() != ""
        if isinstance(value, (list, dict)):
            return len(value) > 0
        return True


class Nullable(Rule):
    """Marks ``None`` as acceptable. Never fails."""

    name = "nullable"

    def passes(self, value, numeric_field):
        return True


class String(Rule):
    name = "string"

    def passes(self, value, numeric_field):
        return isinstance(value, str)


class Numeric(Rule):
    name = "numeric"

    def passes(self, value, numeric_field):
        return is_numeric(value)


class Integer(Rule):
    name = "integer"

    def passes(self, value, numeric_field):
        return is_integer(value)


def value_size(value: Any, numeric_field: bool) -> float:
    """
    Size used by ``min`` and ``max``.

    Numeric fields compare by value, everything else by length.
    """
    if numeric_field and is_numeric(value):
        return float(value)
    if isinstance(value, (list, dict)):
        return len(value)
    return len(str(value))


class Min(Rule):
    name = "min"

    def __init__(self, limit: float):
        self.limit = limit

    def passes(self, value, numeric_field):
        return value_size(value, numeric_field) >= self.limit


class Max(Rule):
    name = "max"

    def __init__(self, limit: float):
        self.limit = limit

    def passes(self, value, numeric_field):
        return value_size(value, numeric_field) <= self.limit


class Unique(Rule):
    """
    Fails when ``exists(value)`` reports the value as already taken.

    Only text is looked up; other types are left to the ``string`` rule.

    Args:
        exists: Callback asking the store whether another record uses the value
    """

    name = "unique"

    def __init__(self, exists: Callable[[Any], bool]):
        self.exists = exists

    def passes(self, value, numeric_field):
        if not isinstance(value, str):
            return True
        return not self.exists(value)


class Validator:
    """
    Runs a rule set against submitted data.

    Args:
        rules: Field name to ordered list of rules
        messages: ``"field.rule"`` to human-readable message
    """

    def __init__(self, rules: Dict[str, List[Rule]], messages: Dict[str, str]):
        self.rules = rules
        self.messages = messages

    def errors(self, data: Mapping[str, Any]) -> Dict[str, List[str]]:
        """Collect messages for every failing rule, grouped by field."""
        errors: Dict[str, List[str]] = {}
        for field, rules in self.rules.items():
            field_errors = self._check_field(field, data.get(field, MISSING), rules)
            if field_errors:
                errors[field] = field_errors
        return errors

    def validate(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Validate data and return the ruled fields that were submitted.

        Empty strings come back as ``None``; unknown fields are dropped.

        Raises:
            ValidationFailed: If any rule fails
        """
        errors = self.errors(data)
        if errors:
            raise ValidationFailed(errors)

        validated = {}
        for field in self.rules:
            if field in data:
                value = data[field]
                validated[field] = None if value == "" else value
        return validated

    def _check_field(self, field: str, value: Any, rules: List[Rule]) -> List[str]:
        absent = is_absent(value)
        numeric_field = any(isinstance(rule, (Numeric, Integer)) for rule in rules)

        failures = []
        for rule in rules:
            if absent and not rule.implicit:
                continue
            if not rule.passes(value, numeric_field):
                failures.append(self._message(field, rule))
        return failures

    def _message(self, field: str, rule: Rule) -> str:
        key = f"{field}.{rule.name}"
        return self.messages.get(key, f"Kolom {field} tidak valid.")
