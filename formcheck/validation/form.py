"""
Formcheck Forms
===============

Declarative forms built on the validator.

Features:
- Form class definition
- Fields with rules, labels and defaults
- Custom messages per form
- Post-validation hook method
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from formcheck.validation.registry import RuleSpec
from formcheck.validation.translator import MessageCatalog
from formcheck.validation.validator import Validator


@dataclass
class FormField:
    """
    Form field definition.

    Example:
        email = FormField(rules="required|email", label="Email Address")
    """

    rules: RuleSpec = field(default_factory=list)
    label: str = ""
    default: Any = None
    required: bool = False

    # Current value and error
    value: Any = None
    error: Optional[str] = None

    def rule_list(self) -> List[Any]:
        """Rules as a list, with ``required`` first when flagged."""
        if isinstance(self.rules, str):
            items: List[Any] = [p for p in self.rules.split("|") if p.strip()]
        elif isinstance(self.rules, (list, tuple)):
            items = list(self.rules)
        else:
            items = [self.rules]

        if self.required and "required" not in items:
            items.insert(0, "required")
        return items


class FormMeta(type):
    """Metaclass for Form to collect field definitions."""

    def __new__(
        mcs,
        name: str,
        bases: tuple,
        namespace: dict,
    ) -> "FormMeta":
        fields: Dict[str, FormField] = {}

        # Get fields from base classes
        for base in bases:
            if hasattr(base, "_fields"):
                fields.update(base._fields)

        # Get fields from current class
        for key, value in list(namespace.items()):
            if isinstance(value, FormField):
                if not value.label:
                    value.label = key.replace("_", " ")
                fields[key] = value

        namespace["_fields"] = fields

        return super().__new__(mcs, name, bases, namespace)


class Form(metaclass=FormMeta):
    """
    Base form class.

    Define fields as class attributes with FormField instances.

    Example:
        class LoginForm(Form):
            username = FormField(rules="required|email|max:100")
            password = FormField(rules=["required", "min:6", "max:20"])

            messages = {"required": ":attribute tidak boleh kosong"}

            def after_validation(self, validator):
                data = validator.get_data()
                if data.get("username") == data.get("password"):
                    validator.errors().add("password", "password must differ from username")

        form = LoginForm(request_data)
        if form.validate():
            credentials = form.validated
    """

    _fields: Dict[str, FormField]

    messages: Dict[str, Any] = {}
    locale: Optional[str] = None
    catalog: Optional[MessageCatalog] = None

    def __init__(
        self,
        data: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> None:
        """
        Initialize form.

        Args:
            data: Initial data to bind
            **kwargs: Additional field values
        """
        self._data: Dict[str, Any] = {}
        self._errors: Dict[str, List[str]] = {}
        self._validated: Optional[Dict[str, Any]] = None
        self._checked = False

        # Fields are copied per instance
        self.fields: Dict[str, FormField] = {}
        for name, field_def in self._fields.items():
            self.fields[name] = FormField(
                rules=field_def.rules,
                label=field_def.label,
                default=field_def.default,
                required=field_def.required,
            )

        self.bind({**(data or {}), **kwargs})

    def bind(self, data: Dict[str, Any]) -> "Form":
        """
        Bind data to form.

        Args:
            data: Data dictionary

        Returns:
            Self for chaining
        """
        for name, form_field in self.fields.items():
            if name in data:
                form_field.value = data[name]
                self._data[name] = data[name]
            elif form_field.default is not None:
                form_field.value = form_field.default
                self._data[name] = form_field.default

        self._checked = False
        return self

    def after_validation(self, validator: Validator) -> None:
        """Hook run after field rules. Override to add cross-field checks."""

    def make_validator(self) -> Validator:
        """Build the validator for the bound data."""
        rules = {
            name: form_field.rule_list()
            for name, form_field in self.fields.items()
            if form_field.rule_list()
        }
        attributes = {name: f.label for name, f in self.fields.items()}

        validator = Validator(
            self._data,
            rules,
            self.messages,
            attributes,
            locale=self.locale,
            catalog=self.catalog,
        )
        validator.after(self.after_validation)
        return validator

    def validate(self) -> bool:
        """
        Validate form data.

        Returns:
            True if valid
        """
        validator = self.make_validator()
        valid = validator.passes()

        self._errors = validator.errors().to_dict()
        self._validated = validator.validated() if valid else None
        self._checked = True

        for name, form_field in self.fields.items():
            errors = self._errors.get(name, [])
            form_field.error = errors[0] if errors else None

        return valid

    @property
    def is_valid(self) -> bool:
        """Check if form is valid (validates on first access)."""
        if not self._checked:
            return self.validate()
        return len(self._errors) == 0

    @property
    def errors(self) -> Dict[str, List[str]]:
        """Get all validation errors."""
        return self._errors

    @property
    def data(self) -> Dict[str, Any]:
        """Bound data."""
        return dict(self._data)

    @property
    def validated(self) -> Optional[Dict[str, Any]]:
        """Declared fields after a successful validation, else None."""
        return self._validated

    def has_error(self, field_name: str) -> bool:
        return field_name in self._errors

    def get_error(self, field_name: str) -> Optional[str]:
        """First error for a field."""
        return self.fields[field_name].error if field_name in self.fields else None

    def __getitem__(self, name: str) -> FormField:
        return self.fields[name]

    def __contains__(self, name: str) -> bool:
        return name in self.fields
