"""
Formcheck - Rule-Based Request Validation
=========================================

Validate nested request data against declarative rules and get
back either the validated fields or a per-field error report.

Features:
---------
- Rule strings, rule objects and closures
- Dotted and wildcard field paths
- Overridable, locale-aware messages
- Post-validation hooks for cross-field checks
- Declarative forms

Quick Start:
    from formcheck import Validator

    validator = Validator(
        {"username": "admin@mail.com", "password": "rahasia"},
        {"username": "required|email|max:100", "password": "required|min:6"},
    )
    data = validator.validate()
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

from formcheck.core.config import Config
from formcheck.validation import (
    ConfigurationError,
    Form,
    FormField,
    HookError,
    RuleError,
    MessageBag,
    MessageCatalog,
    Password,
    ValidationError,
    ValidationRule,
    Validator,
    ValidatorFactory,
    make,
    validate,
    validate_or_fail,
)

__all__ = [
    "__version__",
    "Config",
    "ConfigurationError",
    "Form",
    "FormField",
    "HookError",
    "RuleError",
    "MessageBag",
    "MessageCatalog",
    "Password",
    "ValidationError",
    "ValidationRule",
    "Validator",
    "ValidatorFactory",
    "make",
    "validate",
    "validate_or_fail",
]
