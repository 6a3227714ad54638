"""
Formcheck Validation System
===========================

Rule-based validation for request data and forms.

Features:
- Rule strings ("required|email|max:100"), rule objects and closures
- Nested and wildcard field paths ("address.*.city")
- Localized, overridable error messages
- Post-validation hooks
- Form validation helpers
"""

from formcheck.validation.validator import (
    Validator,
    ValidatorFactory,
    ValidatorState,
    ValidationResult,
    make,
    validate,
    validate_or_fail,
)
from formcheck.validation.exceptions import (
    ConfigurationError,
    FormcheckError,
    HookError,
    RuleError,
    ValidationError,
)
from formcheck.validation.messages import MessageBag
from formcheck.validation.translator import MessageCatalog
from formcheck.validation.registry import RuleRegistry
from formcheck.validation.context import MessageFormatter, ValidationContext
from formcheck.validation.paths import MISSING, resolve
from formcheck.validation.rules import (
    Rule,
    Outcome,
    Required,
    Nullable,
    Bail,
    Email,
    Min,
    Max,
    Between,
    Size,
    In,
    NotIn,
    Numeric,
    Integer,
    String,
    Boolean,
    Array,
    Alpha,
    AlphaNumeric,
    Regex,
    Same,
    Different,
    Confirmed,
)
from formcheck.validation.password import Password
from formcheck.validation.custom import (
    ValidationRule,
    DataAwareRule,
    ObjectRule,
    ClosureRule,
)
from formcheck.validation.form import (
    FormField,
    Form,
)

__all__ = [
    # Core
    "Validator",
    "ValidatorFactory",
    "ValidatorState",
    "ValidationResult",
    "make",
    "validate",
    "validate_or_fail",
    # Errors
    "ConfigurationError",
    "FormcheckError",
    "HookError",
    "RuleError",
    "ValidationError",
    # Reports and messages
    "MessageBag",
    "MessageCatalog",
    "MessageFormatter",
    "ValidationContext",
    "RuleRegistry",
    # Paths
    "MISSING",
    "resolve",
    # Rules
    "Rule",
    "Outcome",
    "Required",
    "Nullable",
    "Bail",
    "Email",
    "Min",
    "Max",
    "Between",
    "Size",
    "In",
    "NotIn",
    "Numeric",
    "Integer",
    "String",
    "Boolean",
    "Array",
    "Alpha",
    "AlphaNumeric",
    "Regex",
    "Same",
    "Different",
    "Confirmed",
    "Password",
    # Custom rules
    "ValidationRule",
    "DataAwareRule",
    "ObjectRule",
    "ClosureRule",
    # Form
    "FormField",
    "Form",
]
