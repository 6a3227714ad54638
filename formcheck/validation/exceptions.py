"""
Formcheck Validation Exceptions
===============================

Error kinds raised by the validation engine.

- ConfigurationError: rule setup is wrong (fatal, raised early)
- ValidationError: input failed its rules (recoverable, carries the report)
- HookError: a post-validation hook crashed (fatal)
- RuleError: a rule raised while evaluating a value (fatal)
"""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

if TYPE_CHECKING:
    from formcheck.validation.validator import Validator


class FormcheckError(Exception):
    """Base class for all formcheck errors."""


class ConfigurationError(FormcheckError):
    """
    Invalid validator setup.

    Raised while rules are parsed, before any input is evaluated:
    unknown rule names, missing or malformed parameters, unsupported
    rule specification types.
    """

    def __init__(self, message: str, rule: Optional[str] = None) -> None:
        super().__init__(message)
        self.rule = rule


class ValidationError(FormcheckError):
    """
    Validation failed exception.

    Carries the validator that failed so callers can inspect the
    full error report.

    Example:
        try:
            data = validator.validate()
        except ValidationError as e:
            return {"errors": e.errors}
    """

    status_code: int = HTTPStatus.UNPROCESSABLE_ENTITY

    def __init__(
        self,
        validator: "Validator",
        message: str = "The given data was invalid.",
    ) -> None:
        super().__init__(message)
        self.validator = validator

    @property
    def errors(self) -> Dict[str, List[str]]:
        """Structured error report."""
        return self.validator.errors().to_dict()

    def first(self, field_name: Optional[str] = None) -> Optional[str]:
        """Get first error message."""
        return self.validator.errors().first(field_name)

    def __str__(self) -> str:
        lines = []
        for field_name, messages in self.errors.items():
            for msg in messages:
                lines.append(f"  - {field_name}: {msg}")
        if not lines:
            return super().__str__()
        return "Validation failed:\n" + "\n".join(lines)


class HookError(FormcheckError):
    """
    A post-validation hook raised.

    The original exception is chained as ``__cause__`` and kept on
    ``original``.
    """

    def __init__(self, hook: Callable[..., Any], original: BaseException) -> None:
        name = getattr(hook, "__qualname__", repr(hook))
        super().__init__(f"Post-validation hook {name} failed: {original}")
        self.hook = hook
        self.original = original


class RuleError(FormcheckError):
    """
    A rule raised instead of reporting a failure.

    Raised for rule objects and closures that crash; the original
    exception is chained as ``__cause__`` and kept on ``original``.
    """

    def __init__(self, rule: Any, attribute: str, original: BaseException) -> None:
        name = getattr(rule, "name", None) or type(rule).__name__
        super().__init__(f"Rule {name} crashed on {attribute!r}: {original}")
        self.rule = rule
        self.attribute = attribute
        self.original = original
