import pytest

from formcheck.validation import (
    ClosureRule,
    ConfigurationError,
    Max,
    ObjectRule,
    Password,
    Required,
    RuleRegistry,
    Validator,
)
from tests.conftest import Uppercase


@pytest.fixture
def registry():
    return RuleRegistry()


def test_parse_pipe_string(registry):
    rules = registry.parse("required|email|max:100")
    assert [r.name for r in rules] == ["required", "email", "max"]
    assert rules[2].max_value == 100


def test_parse_list_mixes_strings_objects_and_callables(registry):
    def check(attribute, value, fail):
        pass

    rules = registry.parse(["required", Max(20), Uppercase(), check])
    assert isinstance(rules[0], Required)
    assert isinstance(rules[1], Max)
    assert isinstance(rules[2], ObjectRule)
    assert isinstance(rules[3], ClosureRule)


def test_list_items_are_not_split_on_pipes(registry):
    rules = registry.parse(["regex:/^(a|b)$/"])
    assert len(rules) == 1
    assert rules[0].name == "regex"


def test_parse_ignores_empty_segments(registry):
    assert [r.name for r in registry.parse("required||email|")] == ["required", "email"]


def test_rule_names_are_case_insensitive(registry):
    assert registry.parse("Required")[0].name == "required"


def test_password_string_rule(registry):
    rule = registry.parse("password:10,letters,symbols")[0]
    assert isinstance(rule, Password)
    assert rule.min_length == 10
    assert rule.require_letters and rule.require_symbols
    assert not rule.require_numbers


@pytest.mark.parametrize("spec", [
    "unknown_rule",
    "min",
    "min:abc",
    "min:",
    "between:1",
    "required:1",
    "same",
    "in",
    "in:",
    "not_in: ,",
    "regex:",
    "regex://",
    "regex:/(/",
    "min:nan",
    "max:inf",
    "password:8,bogus",
])
def test_bad_rule_strings_fail_at_setup(registry, spec):
    with pytest.raises(ConfigurationError):
        registry.parse(spec)


def test_unsupported_spec_type(registry):
    with pytest.raises(ConfigurationError):
        registry.parse(42)


def test_unknown_rule_fails_when_validator_is_built():
    with pytest.raises(ConfigurationError) as exc_info:
        Validator({"name": "x"}, {"name": "required|frobnicate"})
    assert exc_info.value.rule == "frobnicate"


def test_invalid_field_path():
    with pytest.raises(ConfigurationError):
        Validator({}, {"": "required"})


def test_extend_registers_named_rule(registry):
    registry.extend("uppercase", lambda params: Uppercase())
    assert registry.has("uppercase")

    validator = Validator(
        {"code": "abc"},
        {"code": "required|uppercase"},
        registry=registry,
    )
    assert validator.errors().to_dict() == {"code": ["The code must be UPPERCASE"]}


def test_registries_are_independent(registry):
    registry.extend("uppercase", lambda params: Uppercase())
    assert not RuleRegistry().has("uppercase")
