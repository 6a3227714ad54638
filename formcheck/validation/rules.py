"""
Formcheck Validation Rules
==========================

Collection of built-in validation rules.

Each rule implements the Rule interface and can be
composed to create complex validation logic.
"""

from __future__ import annotations

import math
import re
from abc import ABC
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Pattern, Tuple, Union

from formcheck.validation.context import ValidationContext
from formcheck.validation.paths import MISSING

Number = Union[int, float]


@dataclass
class Outcome:
    """
    Result of evaluating one rule against one value.

    Attributes:
        messages: Failure messages, empty when the rule passed
        stop: Skip the remaining rules of this field occurrence
    """

    messages: List[str] = field(default_factory=list)
    stop: bool = False

    @property
    def passed(self) -> bool:
        return not self.messages


class Rule(ABC):
    """
    Abstract validation rule.

    Override `passes` for a simple yes/no rule; the failure message
    is looked up by `name`. Override `evaluate` directly for rules
    that produce several messages.

    Example:
        class IsPositive(Rule):
            name = "positive"

            def passes(self, value, attribute, context) -> bool:
                return isinstance(value, (int, float)) and value > 0
    """

    name: str = "invalid"
    # Implicit rules run even when the value is missing or blank.
    implicit: bool = False

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        """
        Check the value.

        Args:
            value: Value to validate
            attribute: Concrete field path
            context: Validation context

        Returns:
            True if valid, False otherwise
        """
        return True

    def parameters(self) -> Dict[str, Any]:
        """Placeholder values for the failure message."""
        return {}

    def variant(self, value: Any, attribute: str, context: ValidationContext) -> Optional[str]:
        """Message variant, e.g. ``string`` for ``min.string``."""
        return None

    def evaluate(self, attribute: str, value: Any, context: ValidationContext) -> Outcome:
        if self.passes(value, attribute, context):
            return Outcome()
        message = context.message(
            self.name,
            attribute,
            self.parameters(),
            self.variant(value, attribute, context),
        )
        return Outcome([message], stop=self.implicit)


def format_number(value: Number) -> str:
    """Render 6.0 as "6" and 2.5 as "2.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_number(raw: str) -> Number:
    """Parse a rule parameter as int or float."""
    raw = raw.strip()
    try:
        return int(raw)
    except ValueError:
        number = float(raw)
    if not math.isfinite(number):
        raise ValueError(f"{raw!r} is not a finite number")
    return number


def is_numeric(value: Any) -> bool:
    """Finite numbers and numeric strings; booleans are not numeric."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, str):
        try:
            return math.isfinite(float(value.strip()))
        except ValueError:
            return False
    return False


@dataclass
class Required(Rule):
    """Require field to be present and not empty."""

    name = "required"
    implicit = True

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        if value is MISSING or value is None:
            return False
        if isinstance(value, str) and not value.strip():
            return False
        if isinstance(value, (list, tuple, dict)) and len(value) == 0:
            return False
        return True


@dataclass
class Nullable(Rule):
    """Allow field to be null (skips other rules when null)."""

    name = "nullable"


@dataclass
class Bail(Rule):
    """Stop validating a field after its first failure."""

    name = "bail"


@dataclass
class Email(Rule):
    """Validate email format."""

    name = "email"

    _pattern: Pattern = re.compile(
        r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    )

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        if not isinstance(value, str):
            return False
        return bool(self._pattern.match(value))


class SizeRule(Rule):
    """
    Base for rules comparing a value's size.

    The size of a value depends on its type:

    - int/float (not bool): the number itself
    - str: character count, or the number when the field also has
      a ``numeric``/``integer`` rule and the string is numeric
    - list/tuple/dict: item count
    - anything else: no size, the rule fails
    """

    def measure(
        self,
        value: Any,
        attribute: str,
        context: ValidationContext,
    ) -> Tuple[Optional[Number], str]:
        if isinstance(value, bool):
            return None, "string"
        if isinstance(value, (int, float)):
            return (value if is_numeric(value) else None), "numeric"
        if isinstance(value, str):
            if is_numeric(value) and context.has_rule(attribute, ("numeric", "integer")):
                return float(value.strip()), "numeric"
            return len(value), "string"
        if isinstance(value, (list, tuple, dict)):
            return len(value), "array"
        return None, "string"

    def compare(self, size: Number) -> bool:
        raise NotImplementedError

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        size, _ = self.measure(value, attribute, context)
        if size is None:
            return False
        return self.compare(size)

    def variant(self, value: Any, attribute: str, context: ValidationContext) -> Optional[str]:
        return self.measure(value, attribute, context)[1]


@dataclass
class Min(SizeRule):
    """Minimum value for numbers, length for strings/arrays."""

    min_value: Number
    name = "min"

    def compare(self, size: Number) -> bool:
        return size >= self.min_value

    def parameters(self) -> Dict[str, Any]:
        return {"min": format_number(self.min_value)}


@dataclass
class Max(SizeRule):
    """Maximum value for numbers, length for strings/arrays."""

    max_value: Number
    name = "max"

    def compare(self, size: Number) -> bool:
        return size <= self.max_value

    def parameters(self) -> Dict[str, Any]:
        return {"max": format_number(self.max_value)}


@dataclass
class Between(SizeRule):
    """Size within an inclusive range."""

    min_value: Number
    max_value: Number
    name = "between"

    def compare(self, size: Number) -> bool:
        return self.min_value <= size <= self.max_value

    def parameters(self) -> Dict[str, Any]:
        return {
            "min": format_number(self.min_value),
            "max": format_number(self.max_value),
        }


@dataclass
class Size(SizeRule):
    """Exact size."""

    size: Number
    name = "size"

    def compare(self, size: Number) -> bool:
        return size == self.size

    def parameters(self) -> Dict[str, Any]:
        return {"size": format_number(self.size)}


def _membership(value: Any, allowed: List[Any]) -> bool:
    """Compare scalars by their string form; lists need every item allowed."""
    if isinstance(value, (list, tuple)):
        return all(_membership(item, allowed) for item in value)
    if isinstance(value, dict):
        return False
    if value in allowed:
        return True
    return str(value) in {str(item) for item in allowed}


class In(Rule):
    """
    Value must be in allowed list.

    Example:
        In("Ahzi", "Budi", "Joko")
        In(["draft", "published"])
    """

    name = "in"

    def __init__(self, *values: Any) -> None:
        if len(values) == 1 and isinstance(values[0], (list, tuple, set)):
            values = tuple(values[0])
        self.allowed: List[Any] = list(values)

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        return _membership(value, self.allowed)

    def parameters(self) -> Dict[str, Any]:
        return {"values": ", ".join(str(v) for v in self.allowed)}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.allowed!r})"


class NotIn(In):
    """Value must not be in disallowed list."""

    name = "not_in"

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        if isinstance(value, (list, tuple)):
            return not any(_membership(item, self.allowed) for item in value)
        return not _membership(value, self.allowed)


@dataclass
class Numeric(Rule):
    """Value must be numeric."""

    name = "numeric"

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        return is_numeric(value)


@dataclass
class Integer(Rule):
    """Value must be an integer."""

    name = "integer"

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return True
        if isinstance(value, str):
            try:
                int(value.strip())
                return True
            except ValueError:
                return False
        return False


@dataclass
class String(Rule):
    """Value must be a string."""

    name = "string"

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        return isinstance(value, str)


@dataclass
class Boolean(Rule):
    """Value must be a boolean."""

    name = "boolean"

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        if isinstance(value, bool):
            return True
        return value in [1, 0, "1", "0", "true", "false"]


@dataclass
class Array(Rule):
    """Value must be an array/list."""

    name = "array"

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        return isinstance(value, (list, dict))


@dataclass
class Alpha(Rule):
    """Value must contain only letters."""

    name = "alpha"

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        if not isinstance(value, str):
            return False
        return value.isalpha()


@dataclass
class AlphaNumeric(Rule):
    """Value must contain only letters and numbers."""

    name = "alpha_num"

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        if not isinstance(value, (str, int)) or isinstance(value, bool):
            return False
        return str(value).isalnum()


@dataclass
class Regex(Rule):
    """Match regular expression (searched, anchor it yourself)."""

    pattern: Union[str, Pattern]
    name = "regex"

    def __post_init__(self):
        if isinstance(self.pattern, str):
            source = _strip_delimiters(self.pattern)
            if not source.strip():
                raise ValueError("regex rule needs a non-empty pattern")
            self.pattern = re.compile(source)

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        if not isinstance(value, (str, int, float)) or isinstance(value, bool):
            return False
        return bool(self.pattern.search(str(value)))


def _strip_delimiters(pattern: str) -> str:
    """Accept ``/^abc$/`` as well as ``^abc$``."""
    if len(pattern) >= 2 and pattern.startswith("/") and pattern.endswith("/"):
        return pattern[1:-1]
    return pattern


@dataclass
class Same(Rule):
    """Value must match another field."""

    other_field: str
    name = "same"

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        return value == context.value(self.other_field)

    def parameters(self) -> Dict[str, Any]:
        return {"other": self.other_field}


@dataclass
class Different(Rule):
    """Value must be different from another field."""

    other_field: str
    name = "different"

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        other = context.value(self.other_field)
        if other is MISSING:
            return True
        return value != other

    def parameters(self) -> Dict[str, Any]:
        return {"other": self.other_field}


@dataclass
class Confirmed(Rule):
    """Value must match {field}_confirmation."""

    name = "confirmed"

    def passes(self, value: Any, attribute: str, context: ValidationContext) -> bool:
        return value == context.value(f"{attribute}_confirmation")
