"""
Formcheck Custom Rules
======================

Application-defined rules: rule objects and inline closures.

Rule object:
    class Uppercase(ValidationRule):
        def evaluate(self, attribute, value):
            if value != value.upper():
                return "The :attribute must be UPPERCASE"

Closure:
    def uppercase(attribute, value, fail):
        if value != value.upper():
            fail(":attribute must be UPPERCASE")

Both are wrapped into engine rules by the registry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Union

from formcheck.validation.context import ValidationContext
from formcheck.validation.rules import Outcome, Rule

Failure = Union[None, str, List[str]]


class ValidationRule(ABC):
    """
    Base class for application rule objects.

    Set ``implicit = True`` to have the rule run even when the
    field is missing or blank.
    """

    implicit: bool = False

    @abstractmethod
    def evaluate(self, attribute: str, value: Any) -> Failure:
        """
        Check the value.

        Returns:
            None when valid, otherwise a message or list of messages.
            Messages may use ``:attribute`` or be catalog keys.
        """
        ...


class DataAwareRule(ValidationRule):
    """Rule object that also sees the full input."""

    def __init__(self) -> None:
        self.data: Dict[str, Any] = {}

    def set_data(self, data: Dict[str, Any]) -> "DataAwareRule":
        self.data = data
        return self


def _as_list(failure: Failure) -> List[str]:
    if failure is None:
        return []
    if isinstance(failure, str):
        return [failure] if failure else []
    return [str(item) for item in failure if item]


class ObjectRule(Rule):
    """Adapter running a ValidationRule inside the engine."""

    def __init__(self, rule: ValidationRule) -> None:
        self.rule = rule
        self.name = type(rule).__name__
        self.implicit = getattr(rule, "implicit", False)

    def evaluate(self, attribute: str, value: Any, context: ValidationContext) -> Outcome:
        if isinstance(self.rule, DataAwareRule):
            self.rule.set_data(context.data)

        failures = _as_list(self.rule.evaluate(attribute, value))
        return Outcome(
            [context.formatter.custom(message, attribute) for message in failures],
            stop=self.implicit and bool(failures),
        )

    def __repr__(self) -> str:
        return f"ObjectRule({self.rule!r})"


class ClosureRule(Rule):
    """
    Adapter for ``fn(attribute, value, fail)`` callables.

    ``fail(message)`` records a failure; ``fail(message, bail=True)``
    also skips the field's remaining rules.
    """

    name = "closure"

    def __init__(self, func: Callable[[str, Any, Callable[..., None]], Any]) -> None:
        self.func = func

    def evaluate(self, attribute: str, value: Any, context: ValidationContext) -> Outcome:
        outcome = Outcome()

        def fail(message: str, bail: bool = False) -> None:
            outcome.messages.append(context.formatter.custom(message, attribute))
            if bail:
                outcome.stop = True

        self.func(attribute, value, fail)
        return outcome

    def __repr__(self) -> str:
        name: Optional[str] = getattr(self.func, "__qualname__", None)
        return f"ClosureRule({name or self.func!r})"
