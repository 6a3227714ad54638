"""
Formcheck Validator
===================

Core validation engine.

Validates data against rules and returns results
with detailed error messages.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from formcheck.core.config import Config, get_config
from formcheck.validation.context import MessageFormatter, ValidationContext
from formcheck.validation.exceptions import (
    ConfigurationError,
    FormcheckError,
    HookError,
    RuleError,
    ValidationError,
)
from formcheck.validation.messages import MessageBag
from formcheck.validation.paths import MISSING, ResolvedField, assign, resolve
from formcheck.validation.registry import RuleRegistry, RuleSpec
from formcheck.validation.rules import Bail, Nullable, Rule
from formcheck.validation.translator import MessageCatalog

Hook = Callable[["Validator"], Any]


class ValidatorState(Enum):
    """
    Lifecycle of a validator. There is no way back.

    ERRORED means a rule or hook crashed; the run has no verdict.
    """

    UNVALIDATED = "unvalidated"
    RESOLVING = "resolving"
    EVALUATING = "evaluating"
    POST_HOOKS = "post_hooks"
    PASSED = "passed"
    FAILED = "failed"
    ERRORED = "errored"


@dataclass
class ValidationResult:
    """
    Result of validation.

    Contains validated data and any errors.
    """

    valid: bool
    data: Dict[str, Any] = field(default_factory=dict)
    errors: Dict[str, List[str]] = field(default_factory=dict)

    def __bool__(self) -> bool:
        """Allow using result as boolean."""
        return self.valid

    def failed(self) -> bool:
        """Check if validation failed."""
        return not self.valid

    def has_error(self, field_name: str) -> bool:
        """Check if field has error."""
        return field_name in self.errors

    def get_errors(self, field_name: str) -> List[str]:
        """Get errors for field."""
        return self.errors.get(field_name, [])

    def first_error(self, field_name: Optional[str] = None) -> Optional[str]:
        """Get first error message."""
        if field_name:
            messages = self.errors.get(field_name, [])
            return messages[0] if messages else None
        for messages in self.errors.values():
            if messages:
                return messages[0]
        return None

    def all_errors(self) -> List[str]:
        """Get all error messages as flat list."""
        all_msgs = []
        for messages in self.errors.values():
            all_msgs.extend(messages)
        return all_msgs


def _is_blank(value: Any) -> bool:
    return value is MISSING or (isinstance(value, str) and not value.strip())


class Validator:
    """
    Main validation class.

    One validator validates one input against one rule map. The
    run happens on first use and its outcome is cached.

    Example:
        validator = Validator(
            {"username": "admin", "password": "secret"},
            {
                "username": "required|email|max:100",
                "password": ["required", "min:6", "max:20"],
            },
        )

        if validator.fails():
            print(validator.errors().to_dict())
    """

    def __init__(
        self,
        data: Dict[str, Any],
        rules: Dict[str, RuleSpec],
        messages: Optional[Dict[str, Any]] = None,
        attributes: Optional[Dict[str, str]] = None,
        *,
        locale: Optional[str] = None,
        fallback_locale: Optional[str] = None,
        catalog: Optional[MessageCatalog] = None,
        registry: Optional[RuleRegistry] = None,
        config: Optional[Config] = None,
    ) -> None:
        """
        Initialize validator.

        Args:
            data: Input to validate (copied, never modified)
            rules: Validation rules per field path
            messages: Custom error messages
            attributes: Custom field names for messages
            locale: Message locale (``validation.locale`` when omitted)
            fallback_locale: Locale used for missing keys
            catalog: Message catalog
            registry: Rule registry used to parse string rules
            config: Configuration (the global one when omitted)

        Raises:
            ConfigurationError: If a rule specification is invalid
        """
        config = config or get_config()
        self.registry = registry or RuleRegistry()
        self.rules: Dict[str, List[Rule]] = self.registry.parse_map(rules)
        self.bail_all = config.get_bool("validation.bail", False)

        self.formatter = MessageFormatter(
            messages=messages,
            attributes=attributes,
            catalog=catalog,
            locale=locale or config.get_str("validation.locale", "en"),
            fallback_locale=fallback_locale or config.get_str("validation.fallback", "en"),
        )
        self._data: Dict[str, Any] = copy.deepcopy(dict(data))
        self._hooks: List[Hook] = []
        self._errors = MessageBag()
        self._resolved: Dict[str, List[ResolvedField]] = {}
        self._fault: Optional[FormcheckError] = None
        self.state = ValidatorState.UNVALIDATED

    @property
    def locale(self) -> str:
        return self.formatter.locale

    def get_data(self) -> Dict[str, Any]:
        """Copy of the input being validated."""
        return copy.deepcopy(self._data)

    def after(self, hook: Hook) -> "Validator":
        """
        Register a post-validation hook.

        Hooks run after every field rule, receive the validator and
        may add messages through ``validator.errors().add()``.

        Raises:
            ConfigurationError: If validation already ran
        """
        if self.state is not ValidatorState.UNVALIDATED:
            raise ConfigurationError("Cannot register a hook after validation has run")
        self._hooks.append(hook)
        return self

    def passes(self) -> bool:
        """
        Run validation (once) and report success.

        Raises:
            HookError: If a post-validation hook crashed
            RuleError: If a rule crashed
        """
        self._run()
        return self.state is ValidatorState.PASSED

    def fails(self) -> bool:
        return not self.passes()

    def errors(self) -> MessageBag:
        """
        Error report.

        Inside a post-validation hook this is the live report;
        afterwards it is frozen.
        """
        if self.state in (ValidatorState.UNVALIDATED, ValidatorState.ERRORED):
            self._run()
        return self._errors

    get_message_bag = errors

    def validate(self) -> Dict[str, Any]:
        """
        Validate and return the validated data.

        Returns:
            Only the declared fields, nested the same way as the input

        Raises:
            ValidationError: If validation failed
        """
        if self.fails():
            raise ValidationError(self)
        return self.validated()

    def validated(self) -> Dict[str, Any]:
        """
        Declared fields present in the input.

        Raises:
            ValidationError: If validation failed
        """
        if self.fails():
            raise ValidationError(self)

        result: Dict[str, Any] = {}
        for entries in self._resolved.values():
            for entry in entries:
                if not entry.missing:
                    assign(result, entry.segments, copy.deepcopy(entry.value))
        return result

    def result(self) -> ValidationResult:
        """Non-raising summary of the run."""
        if self.passes():
            return ValidationResult(valid=True, data=self.validated())
        return ValidationResult(valid=False, errors=self._errors.to_dict())

    def _run(self) -> None:
        if self._fault is not None:
            raise self._fault
        if self.state is not ValidatorState.UNVALIDATED:
            return

        try:
            self._evaluate()
        except FormcheckError as e:
            self._fault = e
            self._errors.freeze()
            self.state = ValidatorState.ERRORED
            raise

        self._errors.freeze()
        if self._errors.is_empty():
            self.state = ValidatorState.PASSED
        else:
            self.state = ValidatorState.FAILED

    def _evaluate(self) -> None:
        self.state = ValidatorState.RESOLVING
        for pattern in self.rules:
            self._resolved[pattern] = resolve(pattern, self._data)

        self.state = ValidatorState.EVALUATING
        context = ValidationContext(self._data, self.rules, self.formatter)
        for pattern, rules in self.rules.items():
            for entry in self._resolved[pattern]:
                self._validate_field(entry, rules, context)

        self.state = ValidatorState.POST_HOOKS
        for hook in self._hooks:
            try:
                hook(self)
            except Exception as e:
                raise HookError(hook, e) from e

    def _validate_field(
        self,
        entry: ResolvedField,
        rules: List[Rule],
        context: ValidationContext,
    ) -> None:
        """Run one field occurrence through its rules, in order."""
        value = entry.value
        bail = self.bail_all or any(isinstance(r, Bail) for r in rules)
        nullable = any(isinstance(r, Nullable) for r in rules)

        for rule in rules:
            if not rule.implicit:
                if _is_blank(value):
                    continue
                if value is None and nullable:
                    continue

            try:
                outcome = rule.evaluate(entry.path, value, context)
            except FormcheckError:
                raise
            except Exception as e:
                raise RuleError(rule, entry.path, e) from e
            for message in outcome.messages:
                self._errors.add(entry.path, message)

            if outcome.stop or (bail and not outcome.passed):
                break

    def __repr__(self) -> str:
        return f"<Validator fields={list(self.rules)} state={self.state.value}>"


class ValidatorFactory:
    """
    Builds validators sharing a registry, catalog and locale.

    Example:
        factory = ValidatorFactory(locale="id")
        factory.catalog.add("id", {"validation": {"required": ":attribute wajib diisi."}})
        factory.extend("uppercase", lambda params: Uppercase())

        validator = factory.make(data, {"username": "required|uppercase"})
    """

    def __init__(
        self,
        catalog: Optional[MessageCatalog] = None,
        registry: Optional[RuleRegistry] = None,
        locale: Optional[str] = None,
        fallback_locale: Optional[str] = None,
        config: Optional[Config] = None,
    ) -> None:
        self.catalog = catalog or MessageCatalog()
        self.registry = registry or RuleRegistry()
        self.locale = locale
        self.fallback_locale = fallback_locale
        self.config = config

    def extend(self, name: str, factory: Callable[[List[str]], Any]) -> "ValidatorFactory":
        """Register a named rule for validators made by this factory."""
        self.registry.extend(name, factory)
        return self

    def make(
        self,
        data: Dict[str, Any],
        rules: Dict[str, RuleSpec],
        messages: Optional[Dict[str, Any]] = None,
        attributes: Optional[Dict[str, str]] = None,
        locale: Optional[str] = None,
    ) -> Validator:
        """Create a validator for one input."""
        return Validator(
            data,
            rules,
            messages,
            attributes,
            locale=locale or self.locale,
            fallback_locale=self.fallback_locale,
            catalog=self.catalog,
            registry=self.registry,
            config=self.config,
        )


# Convenience functions

def make(
    data: Dict[str, Any],
    rules: Dict[str, RuleSpec],
    messages: Optional[Dict[str, Any]] = None,
    attributes: Optional[Dict[str, str]] = None,
    **options: Any,
) -> Validator:
    """Create a validator with default registry and catalog."""
    return Validator(data, rules, messages, attributes, **options)


def validate(
    data: Dict[str, Any],
    rules: Dict[str, RuleSpec],
    messages: Optional[Dict[str, Any]] = None,
) -> ValidationResult:
    """
    Validate data with rules.

    Example:
        result = validate(
            {"email": "test@example.com"},
            {"email": "required|email"},
        )
    """
    return Validator(data, rules, messages).result()


def validate_or_fail(
    data: Dict[str, Any],
    rules: Dict[str, RuleSpec],
    messages: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Validate data and raise on failure.

    Returns validated data if successful.
    Raises ValidationError if validation fails.

    Example:
        try:
            data = validate_or_fail(form_data, {"email": "required|email"})
        except ValidationError as e:
            return {"errors": e.errors}
    """
    return Validator(data, rules, messages).validate()
