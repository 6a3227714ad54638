"""Shared fixtures and example application rules."""

import pytest

from formcheck.core.config import Config
from formcheck.utils import logger as logger_module
from formcheck.utils.logger import Logger, MemoryHandler
from formcheck.validation import DataAwareRule, MessageCatalog, ValidationRule


class Uppercase(ValidationRule):
    """Value must be written in capitals."""

    def evaluate(self, attribute, value):
        if value != str(value).upper():
            return "The :attribute must be UPPERCASE"
        return None


class RegistrationRule(DataAwareRule):
    """Password must not repeat the username."""

    def evaluate(self, attribute, value):
        if value == self.data.get("username"):
            return ":attribute must be different from username"
        return None


@pytest.fixture
def config():
    """Configuration without environment overrides."""
    return Config()


@pytest.fixture
def indonesian_catalog():
    """Catalog with a handful of Indonesian templates."""
    catalog = MessageCatalog()
    catalog.add("id", {
        "validation": {
            "required": ":attribute wajib diisi.",
            "email": ":attribute harus berupa alamat email yang valid.",
            "min": {
                "string": ":attribute minimal berisi :min karakter.",
            },
            "attributes": {
                "username": "nama pengguna",
            },
        }
    })
    return catalog


@pytest.fixture
def memory_logger():
    """Logger that keeps records in memory."""
    handler = MemoryHandler()
    return Logger(name="test", handlers=[handler]), handler


@pytest.fixture
def fresh_loggers(monkeypatch):
    """Empty global logger registry for the duration of a test."""
    monkeypatch.setattr(logger_module, "_loggers", {})


@pytest.fixture
def login_rules():
    return {
        "username": "required|email|max:100",
        "password": ["required", "min:6", "max:20"],
    }
