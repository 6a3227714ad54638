"""
Formcheck Rule Registry
=======================

Turns rule specifications into Rule objects.

Accepted specifications:

    "required|email|max:100"              pipe-separated string
    ["required", "min:6", Max(20)]        list of items
    Required()                            Rule instance
    Uppercase()                           ValidationRule instance
    lambda attribute, value, fail: ...    closure

Every problem is reported as ConfigurationError while parsing, so
a bad rule map fails before any input is looked at.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Union

from formcheck.validation.custom import ClosureRule, ObjectRule, ValidationRule
from formcheck.validation.exceptions import ConfigurationError
from formcheck.validation.password import Password
from formcheck.validation.rules import (
    Alpha,
    AlphaNumeric,
    Array,
    Bail,
    Between,
    Boolean,
    Confirmed,
    Different,
    Email,
    In,
    Integer,
    Max,
    Min,
    NotIn,
    Nullable,
    Numeric,
    Regex,
    Required,
    Rule,
    Same,
    Size,
    String,
    parse_number,
)

RuleSpec = Union[str, Rule, ValidationRule, Callable, List[Any]]
RuleFactory = Callable[[List[str]], Rule]


def _no_params(rule_class: Callable[[], Rule]) -> RuleFactory:
    def factory(params: List[str]) -> Rule:
        if params:
            raise ValueError("takes no parameters")
        return rule_class()
    return factory


def _one_number(rule_class: Callable[[Any], Rule]) -> RuleFactory:
    def factory(params: List[str]) -> Rule:
        if len(params) != 1:
            raise ValueError("expects exactly one numeric parameter")
        return rule_class(parse_number(params[0]))
    return factory


def _one_field(rule_class: Callable[[str], Rule]) -> RuleFactory:
    def factory(params: List[str]) -> Rule:
        if len(params) != 1 or not params[0]:
            raise ValueError("expects a field name")
        return rule_class(params[0])
    return factory


def _between(params: List[str]) -> Rule:
    if len(params) != 2:
        raise ValueError("expects min and max parameters")
    return Between(parse_number(params[0]), parse_number(params[1]))


def _values(rule_class: Callable[..., Rule]) -> RuleFactory:
    def factory(params: List[str]) -> Rule:
        values = [p.strip().strip('"') for p in params]
        if not values or not any(values):
            raise ValueError("expects at least one value")
        return rule_class(*values)
    return factory


def _regex(params: List[str]) -> Rule:
    # The pattern itself may contain commas.
    return Regex(",".join(params))


def _password(params: List[str]) -> Rule:
    if not params:
        return Password()
    return Password.from_flags(int(params[0]), [p.strip() for p in params[1:]])


BUILTIN_RULES: Dict[str, RuleFactory] = {
    "required": _no_params(Required),
    "nullable": _no_params(Nullable),
    "bail": _no_params(Bail),
    "email": _no_params(Email),
    "min": _one_number(Min),
    "max": _one_number(Max),
    "between": _between,
    "size": _one_number(Size),
    "in": _values(In),
    "not_in": _values(NotIn),
    "numeric": _no_params(Numeric),
    "integer": _no_params(Integer),
    "string": _no_params(String),
    "boolean": _no_params(Boolean),
    "array": _no_params(Array),
    "alpha": _no_params(Alpha),
    "alpha_num": _no_params(AlphaNumeric),
    "regex": _regex,
    "same": _one_field(Same),
    "different": _one_field(Different),
    "confirmed": _no_params(Confirmed),
    "password": _password,
}


class RuleRegistry:
    """
    Maps rule names to rule factories.

    Example:
        registry = RuleRegistry()
        registry.extend("uppercase", lambda params: Uppercase())

        registry.parse("required|uppercase|max:20")
    """

    def __init__(self) -> None:
        self._factories: Dict[str, RuleFactory] = dict(BUILTIN_RULES)

    def extend(self, name: str, factory: Callable[[List[str]], Any]) -> "RuleRegistry":
        """
        Register a named rule.

        The factory receives the rule's string parameters and returns
        a Rule or ValidationRule.
        """
        self._factories[name.lower()] = factory
        return self

    def has(self, name: str) -> bool:
        return name.lower() in self._factories

    def names(self) -> List[str]:
        return sorted(self._factories)

    def parse_map(self, rules: Dict[str, RuleSpec]) -> Dict[str, List[Rule]]:
        """Parse a whole field-path-to-rules map."""
        parsed: Dict[str, List[Rule]] = {}

        for field_name, spec in rules.items():
            if not isinstance(field_name, str) or not field_name:
                raise ConfigurationError(f"Invalid field path: {field_name!r}")
            parsed[field_name] = self.parse(spec)

        return parsed

    def parse(self, spec: RuleSpec) -> List[Rule]:
        """Parse a single rule specification."""
        if isinstance(spec, str):
            rules: List[Rule] = []
            for part in spec.split("|"):
                part = part.strip()
                if part:
                    rules.append(self.create(part))
            return rules

        if isinstance(spec, (list, tuple)):
            rules = []
            for item in spec:
                if isinstance(item, str):
                    # List items are never split on "|" so regex
                    # patterns may contain it.
                    rules.append(self.create(item.strip()))
                else:
                    rules.extend(self.parse(item))
            return rules

        return [self._wrap(spec)]

    def _wrap(self, spec: Any) -> Rule:
        if isinstance(spec, Rule):
            return spec
        if isinstance(spec, ValidationRule):
            return ObjectRule(spec)
        if callable(spec):
            return ClosureRule(spec)
        raise ConfigurationError(
            f"Unsupported rule specification: {spec!r}"
        )

    def create(self, rule: str) -> Rule:
        """
        Create a rule from ``name`` or ``name:param1,param2``.

        Raises:
            ConfigurationError: Unknown name or bad parameters
        """
        if ":" in rule:
            name, params_str = rule.split(":", 1)
            params = params_str.split(",")
        else:
            name, params = rule, []

        name = name.strip().lower()
        factory = self._factories.get(name)
        if factory is None:
            raise ConfigurationError(f"Unknown validation rule: {name!r}", rule=name)

        try:
            created = factory(params)
        except (TypeError, ValueError, IndexError, re.error) as e:
            raise ConfigurationError(
                f"Invalid parameters for rule {name!r}: {e}", rule=name
            ) from e

        return self._wrap(created)
