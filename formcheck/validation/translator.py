"""
Formcheck Message Catalog
=========================

Locale-keyed message templates.

The validator only depends on the lookup contract:

    catalog.lookup(locale, key) -> template or None

Keys are dotted, e.g. ``validation.required`` or
``validation.min.string``. Only the English defaults ship with the
package; other locales are registered by the application.

Example:
    catalog = MessageCatalog()
    catalog.add("id", {
        "validation": {
            "required": ":attribute wajib diisi.",
            "attributes": {"username": "nama pengguna"},
        }
    })
    catalog.lookup("id", "validation.required")
"""

from __future__ import annotations

from typing import Any, Dict, Optional

DEFAULT_LOCALE = "en"

DEFAULT_MESSAGES: Dict[str, Any] = {
    "validation": {
        "invalid": "The :attribute field is invalid.",
        "required": "The :attribute field is required.",
        "email": "The :attribute field must be a valid email address.",
        "min": {
            "numeric": "The :attribute field must be at least :min.",
            "string": "The :attribute field must be at least :min characters.",
            "array": "The :attribute field must have at least :min items.",
        },
        "max": {
            "numeric": "The :attribute field must not be greater than :max.",
            "string": "The :attribute field must not be greater than :max characters.",
            "array": "The :attribute field must not have more than :max items.",
        },
        "between": {
            "numeric": "The :attribute field must be between :min and :max.",
            "string": "The :attribute field must be between :min and :max characters.",
            "array": "The :attribute field must have between :min and :max items.",
        },
        "size": {
            "numeric": "The :attribute field must be :size.",
            "string": "The :attribute field must be :size characters.",
            "array": "The :attribute field must contain :size items.",
        },
        "in": "The selected :attribute is invalid.",
        "not_in": "The selected :attribute is invalid.",
        "numeric": "The :attribute field must be a number.",
        "integer": "The :attribute field must be an integer.",
        "string": "The :attribute field must be a string.",
        "boolean": "The :attribute field must be true or false.",
        "array": "The :attribute field must be an array.",
        "alpha": "The :attribute field must only contain letters.",
        "alpha_num": "The :attribute field must only contain letters and numbers.",
        "regex": "The :attribute field format is invalid.",
        "same": "The :attribute field must match :other.",
        "different": "The :attribute field and :other must be different.",
        "confirmed": "The :attribute field confirmation does not match.",
        "password": {
            "letters": "The :attribute field must contain at least one letter.",
            "mixed": "The :attribute field must contain at least one uppercase and one lowercase letter.",
            "numbers": "The :attribute field must contain at least one number.",
            "symbols": "The :attribute field must contain at least one symbol.",
        },
    }
}


def flatten_messages(messages: Dict[str, Any], prefix: str = "") -> Dict[str, str]:
    """Convert nested message dicts to dotted keys."""
    flat: Dict[str, str] = {}

    for key, value in messages.items():
        full_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            flat.update(flatten_messages(value, full_key))
        else:
            flat[full_key] = str(value)

    return flat


class MessageCatalog:
    """
    In-memory catalog of message templates per locale.

    Lookups never fall back across locales on their own; the
    message formatter decides the fallback order.
    """

    def __init__(self, with_defaults: bool = True) -> None:
        self._locales: Dict[str, Dict[str, str]] = {}
        if with_defaults:
            self.add(DEFAULT_LOCALE, DEFAULT_MESSAGES)

    def add(self, locale: str, messages: Dict[str, Any]) -> "MessageCatalog":
        """
        Register templates for a locale.

        Nested dicts are flattened; later registrations override
        earlier keys.
        """
        self._locales.setdefault(locale, {}).update(flatten_messages(messages))
        return self

    def lookup(self, locale: str, key: str) -> Optional[str]:
        """Get template for key, or None."""
        return self._locales.get(locale, {}).get(key)

    def has(self, locale: str, key: str) -> bool:
        return self.lookup(locale, key) is not None

    def locales(self) -> list:
        return list(self._locales)
