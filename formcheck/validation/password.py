"""
Formcheck Password Rule
=======================

Configurable password policy.

Example:
    Password.min(8).letters().mixed_case().numbers().symbols()
"""

from __future__ import annotations

from typing import Any, List, Optional

from formcheck.validation.context import ValidationContext
from formcheck.validation.rules import Outcome, Rule

PASSWORD_FLAGS = ("letters", "mixed", "numbers", "symbols")


class Password(Rule):
    """
    Password policy rule.

    Unlike simple rules, a password can fail several checks at
    once and every failed check is reported.
    """

    name = "password"

    def __init__(self, min_length: int = 8) -> None:
        self.min_length = min_length
        self.max_length: Optional[int] = None
        self.require_letters = False
        self.require_mixed_case = False
        self.require_numbers = False
        self.require_symbols = False

    @classmethod
    def min(cls, length: int) -> "Password":
        """Create a policy with a minimum length."""
        return cls(length)

    @classmethod
    def from_flags(cls, min_length: int, flags: List[str]) -> "Password":
        """
        Build a policy from string flags.

        Raises:
            ValueError: On an unknown flag
        """
        policy = cls(min_length)
        for flag in flags:
            if flag not in PASSWORD_FLAGS:
                raise ValueError(f"Unknown password flag: {flag}")
            setattr(policy, _FLAG_ATTRS[flag], True)
        return policy

    def max(self, length: int) -> "Password":
        self.max_length = length
        return self

    def letters(self) -> "Password":
        """Require at least one letter."""
        self.require_letters = True
        return self

    def mixed_case(self) -> "Password":
        """Require at least one uppercase and one lowercase letter."""
        self.require_mixed_case = True
        return self

    def numbers(self) -> "Password":
        """Require at least one digit."""
        self.require_numbers = True
        return self

    def symbols(self) -> "Password":
        """Require at least one symbol (anything not a letter or digit)."""
        self.require_symbols = True
        return self

    def evaluate(self, attribute: str, value: Any, context: ValidationContext) -> Outcome:
        if not isinstance(value, str):
            return Outcome([context.message("string", attribute)], stop=True)

        messages: List[str] = []

        if len(value) < self.min_length:
            messages.append(
                context.message("min", attribute, {"min": self.min_length}, "string")
            )
        if self.max_length is not None and len(value) > self.max_length:
            messages.append(
                context.message("max", attribute, {"max": self.max_length}, "string")
            )
        if self.require_letters and not any(c.isalpha() for c in value):
            messages.append(context.message(self.name, attribute, variant="letters"))
        if self.require_mixed_case and not (
            any(c.isupper() for c in value) and any(c.islower() for c in value)
        ):
            messages.append(context.message(self.name, attribute, variant="mixed"))
        if self.require_numbers and not any(c.isdigit() for c in value):
            messages.append(context.message(self.name, attribute, variant="numbers"))
        if self.require_symbols and not any(not c.isalnum() for c in value):
            messages.append(context.message(self.name, attribute, variant="symbols"))

        return Outcome(messages)

    def __repr__(self) -> str:
        flags = [
            flag for flag in PASSWORD_FLAGS
            if getattr(self, _FLAG_ATTRS[flag])
        ]
        return f"Password(min={self.min_length}, flags={flags})"


_FLAG_ATTRS = {
    "letters": "require_letters",
    "mixed": "require_mixed_case",
    "numbers": "require_numbers",
    "symbols": "require_symbols",
}
