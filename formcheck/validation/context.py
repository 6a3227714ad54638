"""
Formcheck Validation Context
============================

Read-only state shared by all rules of one validation run:
the input tree, the parsed rule map, and the message formatter
that turns rule failures into human readable text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from formcheck.validation.paths import MISSING, matches, resolve
from formcheck.validation.translator import DEFAULT_LOCALE, MessageCatalog

if TYPE_CHECKING:
    from formcheck.validation.rules import Rule


class MessageFormatter:
    """
    Resolve and interpolate error messages.

    Lookup order for a failed rule on ``path``:

    1. custom message ``"<path>.<rule>"`` (path may be a wildcard pattern)
    2. custom message ``"<rule>"`` (a dict value is indexed by variant)
    3. catalog ``validation.custom.<path>.<rule>``
    4. catalog ``validation.<rule>.<variant>`` / ``validation.<rule>``
       in the active locale, then the fallback locale
    5. catalog ``validation.invalid``
    """

    def __init__(
        self,
        messages: Optional[Dict[str, Any]] = None,
        attributes: Optional[Dict[str, str]] = None,
        catalog: Optional[MessageCatalog] = None,
        locale: str = DEFAULT_LOCALE,
        fallback_locale: str = DEFAULT_LOCALE,
    ) -> None:
        self.messages = messages or {}
        self.attributes = attributes or {}
        self.catalog = catalog or MessageCatalog()
        self.locale = locale
        self.fallback_locale = fallback_locale

    def _locales(self) -> List[str]:
        if self.fallback_locale == self.locale:
            return [self.locale]
        return [self.locale, self.fallback_locale]

    def _lookup(self, key: str) -> Optional[str]:
        for locale in self._locales():
            template = self.catalog.lookup(locale, key)
            if template is not None:
                return template
        return None

    def _custom(self, rule: str, attribute: str, variant: Optional[str]) -> Optional[str]:
        suffix = f".{rule}"
        for key, template in self.messages.items():
            if key.endswith(suffix) and matches(key[: -len(suffix)], attribute):
                return self._pick(template, variant)

        if variant and f"{rule}.{variant}" in self.messages:
            return self._pick(self.messages[f"{rule}.{variant}"], None)
        if rule in self.messages:
            return self._pick(self.messages[rule], variant)
        return None

    @staticmethod
    def _pick(template: Any, variant: Optional[str]) -> Optional[str]:
        if isinstance(template, dict):
            return template.get(variant) if variant else None
        return str(template)

    def template(self, rule: str, attribute: str, variant: Optional[str] = None) -> str:
        """Find the message template for a failed rule."""
        custom = self._custom(rule, attribute, variant)
        if custom is not None:
            return custom

        keys = [f"validation.custom.{attribute}.{rule}"]
        if variant:
            keys.append(f"validation.{rule}.{variant}")
        keys.append(f"validation.{rule}")

        for locale in self._locales():
            for key in keys:
                template = self.catalog.lookup(locale, key)
                if template is not None:
                    return template

        return self._lookup("validation.invalid") or "The :attribute field is invalid."

    def display_attribute(self, attribute: str) -> str:
        """Human readable name of a field path."""
        if attribute in self.attributes:
            return self.attributes[attribute]
        for pattern, name in self.attributes.items():
            if matches(pattern, attribute):
                return name

        translated = self._lookup(f"validation.attributes.{attribute}")
        if translated is not None:
            return translated

        return attribute.replace("_", " ")

    def interpolate(
        self,
        template: str,
        attribute: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Substitute ``:placeholders`` in a template."""
        message = template

        for key in sorted(params or {}, key=len, reverse=True):
            message = message.replace(f":{key}", str(params[key]))

        name = self.display_attribute(attribute)
        message = message.replace(":ATTRIBUTE", name.upper())
        message = message.replace(":Attribute", name[:1].upper() + name[1:])
        message = message.replace(":attribute", name)
        return message

    def make(
        self,
        rule: str,
        attribute: str,
        params: Optional[Dict[str, Any]] = None,
        variant: Optional[str] = None,
    ) -> str:
        """Build the final message for a failed rule."""
        return self.interpolate(self.template(rule, attribute, variant), attribute, params)

    def custom(self, message: str, attribute: str) -> str:
        """
        Format a message supplied by a rule object or closure.

        The message may be a catalog key, in which case the
        translated template is used.
        """
        template = self._lookup(message) or message
        return self.interpolate(template, attribute)


@dataclass
class ValidationContext:
    """
    State visible to rules during one run.

    Attributes:
        data: Full input tree (treat as read-only)
        rules: Parsed rule map, keyed by declared field path
        formatter: Message formatter for this run
    """

    data: Dict[str, Any]
    rules: Dict[str, List["Rule"]] = field(default_factory=dict)
    formatter: MessageFormatter = field(default_factory=MessageFormatter)

    def value(self, path: str, default: Any = MISSING) -> Any:
        """Get value at a literal path, e.g. a sibling field."""
        found = resolve(path, self.data)
        if not found or found[0].missing:
            return default
        return found[0].value

    def rules_for(self, attribute: str) -> List["Rule"]:
        """Rules of every declared path matching a concrete attribute."""
        collected: List["Rule"] = []
        for pattern, rules in self.rules.items():
            if matches(pattern, attribute):
                collected.extend(rules)
        return collected

    def has_rule(self, attribute: str, names: Iterable[str]) -> bool:
        wanted = set(names)
        return any(rule.name in wanted for rule in self.rules_for(attribute))

    def message(
        self,
        rule: str,
        attribute: str,
        params: Optional[Dict[str, Any]] = None,
        variant: Optional[str] = None,
    ) -> str:
        return self.formatter.make(rule, attribute, params, variant)
