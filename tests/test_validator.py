import pytest

from formcheck.validation import (
    ConfigurationError,
    HookError,
    In,
    RuleError,
    Password,
    ValidationError,
    Validator,
    ValidatorFactory,
    ValidatorState,
    make,
    validate,
    validate_or_fail,
)
from tests.conftest import RegistrationRule, Uppercase


def reject_same_credentials(validator):
    data = validator.get_data()
    if data["username"] == data["password"]:
        validator.errors().add("password", "password tidak boleh sama dengan username")


def test_validator_passes():
    validator = Validator(
        {"username": "admin", "password": "123456"},
        {"username": "required", "password": "required"},
    )
    assert validator.passes()
    assert not validator.fails()
    assert validator.errors().is_empty()


def test_validator_invalid():
    validator = Validator(
        {"username": "", "password": ""},
        {"username": "required", "password": "required"},
    )
    assert not validator.passes()
    assert validator.fails()
    assert validator.errors().to_dict() == {
        "username": ["The username field is required."],
        "password": ["The password field is required."],
    }


def test_validate_raises_with_report():
    validator = Validator(
        {"username": "", "password": ""},
        {"username": "required", "password": "required"},
    )

    with pytest.raises(ValidationError) as exc_info:
        validator.validate()

    error = exc_info.value
    assert error.validator is validator
    assert set(error.errors) == {"username", "password"}
    assert error.first("password") == "The password field is required."
    assert error.status_code == 422
    assert "username: The username field is required." in str(error)


def test_multiple_rules(login_rules):
    validator = Validator({"username": "admin", "password": "admin"}, login_rules)
    assert validator.fails()
    assert validator.errors().to_dict() == {
        "username": ["The username field must be a valid email address."],
        "password": ["The password field must be at least 6 characters."],
    }


def test_valid_data_is_allow_listed(login_rules):
    validator = Validator(
        {
            "username": "admin@mail.com",
            "password": "rahasia",
            "admin": True,
            "other": "xxx",
        },
        login_rules,
    )
    assert validator.validate() == {
        "username": "admin@mail.com",
        "password": "rahasia",
    }


def test_inline_messages(login_rules):
    messages = {
        "required": ":attribute tidak boleh kosong",
        "email": ":attribute tidak valid",
        "min": ":attribute minimal :min karakter",
        "max": ":attribute maksimal :max karakter",
    }
    validator = Validator({"username": "admin", "password": "admin"}, login_rules, messages)
    assert validator.errors().to_dict() == {
        "username": ["username tidak valid"],
        "password": ["password minimal 6 karakter"],
    }


def test_localized_messages(login_rules, indonesian_catalog):
    validator = Validator(
        {"username": "", "password": "admin"},
        login_rules,
        locale="id",
        catalog=indonesian_catalog,
    )
    assert validator.locale == "id"
    assert validator.errors().to_dict() == {
        "username": ["nama pengguna wajib diisi."],
        "password": ["password minimal berisi 6 karakter."],
    }


def test_custom_attribute_names():
    validator = Validator({}, {"first_name": "required"}, attributes={"first_name": "given name"})
    assert validator.errors().first("first_name") == "The given name field is required."


def test_default_attribute_name_replaces_underscores():
    validator = Validator({}, {"first_name": "required"})
    assert validator.errors().first() == "The first name field is required."


def test_after_hook_adds_cross_field_failure(login_rules):
    validator = Validator(
        {"username": "admin@mail.com", "password": "admin@mail.com"},
        login_rules,
    )
    validator.after(reject_same_credentials)

    assert validator.fails()
    assert validator.errors().to_dict() == {
        "password": ["password tidak boleh sama dengan username"],
    }


def test_hooks_run_after_all_field_rules(login_rules):
    seen = []

    def hook(validator):
        seen.append((validator.state, validator.errors().to_dict()))

    validator = Validator({"username": "", "password": "x"}, login_rules).after(hook)
    validator.passes()

    state, errors = seen[0]
    assert state is ValidatorState.POST_HOOKS
    assert set(errors) == {"username", "password"}


def test_hook_fault_is_not_a_validation_failure():
    def broken(validator):
        raise KeyError("username")

    validator = Validator({}, {"username": "nullable"}).after(broken)

    with pytest.raises(HookError) as exc_info:
        validator.passes()
    assert isinstance(exc_info.value.__cause__, KeyError)
    assert exc_info.value.original is exc_info.value.__cause__
    assert validator.state is ValidatorState.ERRORED

    # The fault is kept: no later call turns it into a verdict.
    for call in (validator.passes, validator.fails, validator.validate, validator.errors):
        with pytest.raises(HookError):
            call()


def test_crashing_closure_is_not_a_validation_failure():
    def broken(attribute, value, fail):
        raise RuntimeError("lookup service down")

    validator = Validator({"username": "admin"}, {"username": ["required", broken]})

    with pytest.raises(RuleError) as exc_info:
        validator.fails()
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert exc_info.value.attribute == "username"
    assert validator.state is ValidatorState.ERRORED

    with pytest.raises(RuleError):
        validator.validate()
    with pytest.raises(RuleError):
        validator.errors()


def test_cannot_register_hook_after_run():
    validator = Validator({"a": "x"}, {"a": "required"})
    validator.passes()
    with pytest.raises(ConfigurationError):
        validator.after(lambda v: None)


def test_report_is_frozen_after_run():
    validator = Validator({"a": ""}, {"a": "required"})
    validator.fails()
    with pytest.raises(RuntimeError):
        validator.errors().add("a", "late")


def test_custom_rule_objects():
    validator = Validator(
        {"username": "admin@mail.com", "password": "admin@mail.com"},
        {
            "username": ["required", "email", "max:100", Uppercase()],
            "password": ["required", "min:6", "max:20", RegistrationRule()],
        },
    )
    assert validator.errors().to_dict() == {
        "username": ["The username must be UPPERCASE"],
        "password": ["password must be different from username"],
    }


def test_custom_closure_rule():
    def uppercase(attribute, value, fail):
        if value.upper() != value:
            fail(":attribute must be UPPERCASE")

    validator = Validator(
        {"username": "admin@mail.com", "password": "admin@mail.com"},
        {
            "username": ["required", "email", "max:100", uppercase],
            "password": ["required", "min:6", "max:20", RegistrationRule()],
        },
    )
    assert validator.errors().get("username") == ["username must be UPPERCASE"]
    assert validator.errors().has("password")


def test_closure_failures_do_not_stop_later_rules_unless_bailing():
    def soft(attribute, value, fail):
        fail("soft failure")

    def hard(attribute, value, fail):
        fail("hard failure", bail=True)

    errors = Validator({"code": "ab"}, {"code": [soft, "min:5"]}).errors()
    assert errors.get("code") == ["soft failure", "The code field must be at least 5 characters."]

    errors = Validator({"code": "ab"}, {"code": [hard, "min:5"]}).errors()
    assert errors.get("code") == ["hard failure"]


def test_rule_classes():
    validator = Validator(
        {"username": "Ahzi", "password": "admin123@mail.com"},
        {
            "username": ["required", In("Ahzi", "Budi", "Joko")],
            "password": ["required", Password.min(6).letters().numbers().symbols()],
        },
    )
    assert validator.passes()


def test_nested_array():
    data = {
        "name": {"first": "Ahmad", "last": "Fauzi"},
        "address": {"street": "Jl. Mangga", "city": "Jakarta", "country": "Indonesia"},
    }
    rules = {
        "name.first": ["required", "max:100"],
        "name.last": ["max:100"],
        "address.street": ["max:100"],
        "address.city": ["required", "max:100"],
        "address.country": ["required", "max:100"],
    }
    validator = Validator(data, rules)
    assert validator.passes()
    assert validator.validated() == data


def test_nested_indexed_array():
    address = {"street": "Jl. Mangga", "city": "Jakarta", "country": "Indonesia"}
    data = {
        "name": {"first": "Ahmad", "last": "Fauzi"},
        "address": [dict(address), dict(address)],
    }
    rules = {
        "name.first": ["required", "max:100"],
        "name.last": ["max:100"],
        "address.*.street": ["max:100"],
        "address.*.city": ["required", "max:100"],
        "address.*.country": ["required", "max:100"],
    }
    validator = Validator(data, rules)
    assert validator.passes()
    assert validator.validated() == data


def test_wildcard_reports_each_failing_index():
    data = {"address": [{"city": "Jakarta"}, {"city": ""}, {}]}
    validator = Validator(data, {"address.*.city": "required"})
    assert validator.errors().to_dict() == {
        "address.1.city": ["The address.1.city field is required."],
        "address.2.city": ["The address.2.city field is required."],
    }


def test_wildcard_messages_and_attributes():
    validator = Validator(
        {"address": [{"city": ""}]},
        {"address.*.city": "required"},
        messages={"address.*.city.required": "Kota :attribute wajib diisi"},
        attributes={"address.*.city": "kota"},
    )
    assert validator.errors().first("address.0.city") == "Kota kota wajib diisi"


def test_allow_list_drops_undeclared_nested_keys():
    validator = Validator(
        {"name": {"first": "Ahmad", "secret": "x"}, "stray": 1},
        {"name.first": "required", "name.middle": "max:10"},
    )
    assert validator.validate() == {"name": {"first": "Ahmad"}}


def test_validated_raises_on_failure():
    with pytest.raises(ValidationError):
        Validator({}, {"a": "required"}).validated()


def test_validation_is_idempotent(login_rules):
    validator = Validator({"username": "admin", "password": "x"}, login_rules)

    reports = []
    for _ in range(2):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate()
        reports.append(exc_info.value.errors)

    assert reports[0] == reports[1]
    again = Validator({"username": "admin", "password": "x"}, login_rules)
    assert again.errors().to_dict() == reports[0]


def test_input_is_copied():
    data = {"tags": ["a"]}
    validator = Validator(data, {"tags": "array|max:1"})
    data["tags"].append("b")

    assert validator.passes()
    copy = validator.get_data()
    copy["tags"].append("c")
    assert validator.get_data() == {"tags": ["a"]}


def test_state_transitions():
    validator = Validator({"a": "x"}, {"a": "required"})
    assert validator.state is ValidatorState.UNVALIDATED
    validator.passes()
    assert validator.state is ValidatorState.PASSED

    validator = Validator({}, {"a": "required"})
    validator.fails()
    assert validator.state is ValidatorState.FAILED


def test_bail_from_config(config):
    config.set("validation.bail", True)
    validator = Validator({"username": "ab"}, {"username": "email|min:5"}, config=config)
    assert validator.errors().get("username") == [
        "The username field must be a valid email address."
    ]


def test_locale_from_config(config, indonesian_catalog):
    config.set("validation.locale", "id")
    validator = Validator({}, {"username": "required"}, catalog=indonesian_catalog, config=config)
    assert validator.errors().first() == "nama pengguna wajib diisi."


def test_factory_shares_registry_and_catalog(indonesian_catalog):
    factory = ValidatorFactory(catalog=indonesian_catalog, locale="id")
    factory.extend("uppercase", lambda params: Uppercase())

    validator = factory.make({"username": "abc"}, {"username": "required|uppercase"})
    assert validator.errors().first() == "The nama pengguna must be UPPERCASE"

    english = factory.make({"username": ""}, {"username": "required"}, locale="en")
    assert english.errors().first() == "The username field is required."


def test_convenience_functions():
    result = validate({"email": "nope"}, {"email": "required|email"})
    assert not result
    assert result.has_error("email")
    assert result.first_error() == "The email field must be a valid email address."
    assert result.all_errors() == ["The email field must be a valid email address."]

    result = validate({"email": "a@b.co", "x": 1}, {"email": "required|email"})
    assert result.valid
    assert result.data == {"email": "a@b.co"}

    assert validate_or_fail({"email": "a@b.co"}, {"email": "email"}) == {"email": "a@b.co"}
    with pytest.raises(ValidationError):
        validate_or_fail({}, {"email": "required"})

    assert make({"a": 1}, {"a": "required"}).passes()
