from formcheck.core.config import Config, get_config


def test_defaults(config):
    assert config.get("validation.locale") == "en"
    assert config.get("validation.fallback") == "en"
    assert config.get_bool("validation.bail") is False
    assert config.get("logging.level") == "INFO"
    assert config.get("missing.key", "fallback") == "fallback"


def test_runtime_set_overrides(config):
    config.set("validation.locale", "id")
    assert config.get("validation.locale") == "id"
    assert config["validation.locale"] == "id"
    assert "validation.locale" in config

    config["validation.locale"] = "fr"
    assert config.get("validation.locale") == "fr"
    assert config.get("validation.fallback") == "en"


def test_env_overrides(config):
    config.load_env({
        "FORMCHECK_VALIDATION_LOCALE": "id",
        "FORMCHECK_VALIDATION_BAIL": "true",
        "FORMCHECK_ENV": "testing",
        "OTHER_VALUE": "ignored",
    })
    assert config.get("validation.locale") == "id"
    assert config.get_bool("validation.bail") is True
    assert config.get("env") is None


def test_env_value_parsing(config):
    assert config._parse_env_value("42") == 42
    assert config._parse_env_value("2.5") == 2.5
    assert config._parse_env_value("no") is False
    assert config._parse_env_value('{"a": 1}') == {"a": 1}
    assert config._parse_env_value("plain") == "plain"


def test_load_from_path(tmp_path, monkeypatch):
    monkeypatch.delenv("FORMCHECK_VALIDATION_LOCALE", raising=False)
    monkeypatch.setenv("FORMCHECK_ENV", "testing")
    (tmp_path / "app.py").write_text(
        'config = {"validation": {"locale": "fr", "fallback": "id"}}\n'
    )
    (tmp_path / "testing.py").write_text(
        'validation = {"locale": "de"}\n'
    )

    config = Config().load_from_path(tmp_path)

    assert config.get("validation.locale") == "de"
    assert config.get("validation.fallback") == "id"
    assert config.get_bool("validation.bail") is False


def test_all_returns_copy(config):
    snapshot = config.all()
    snapshot["validation"]["locale"] = "xx"
    assert config.get("validation.locale") == "en"


def test_typed_getters(config):
    config.set("limits.max", "12")
    assert config.get_int("limits.max") == 12
    assert config.get_int("limits.missing", 3) == 3
    assert config.get_str("limits.max") == "12"


def test_global_config_is_shared():
    assert get_config() is get_config()
