"""
Formcheck Message Bag
=====================

Ordered, per-field collection of validation error messages.

The bag is the error report of one validation run: messages are
appended while the run is in progress and the bag is frozen once
the run settles.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional

import orjson

from formcheck.validation.paths import WILDCARD, matches


class MessageBag:
    """
    Error messages keyed by concrete field path.

    Example:
        bag = MessageBag()
        bag.add("password", "The password field is required.")

        bag.has("password")      # True
        bag.first("password")    # "The password field is required."
        bag.to_dict()            # {"password": ["The password field is required."]}
    """

    def __init__(self, messages: Optional[Dict[str, List[str]]] = None) -> None:
        self._messages: Dict[str, List[str]] = {}
        self._frozen = False

        for key, values in (messages or {}).items():
            for value in values:
                self.add(key, value)

    def add(self, key: str, message: str) -> "MessageBag":
        """
        Append a message for a field.

        Duplicate messages for the same field are kept once.

        Raises:
            RuntimeError: If the bag has been frozen
        """
        if self._frozen:
            raise RuntimeError("Cannot add messages to a settled error report")

        bucket = self._messages.setdefault(key, [])
        if message not in bucket:
            bucket.append(message)
        return self

    def merge(self, other: "MessageBag") -> "MessageBag":
        """Append every message from another bag."""
        for key, values in other.all().items():
            for value in values:
                self.add(key, value)
        return self

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def has(self, key: str) -> bool:
        """Check if a field (or wildcard pattern) has messages."""
        return bool(self.get(key))

    def any(self, *keys: str) -> bool:
        """Check if any of the given fields has messages."""
        return any(self.has(key) for key in keys)

    def get(self, key: str) -> List[str]:
        """
        Get messages for a field.

        A wildcard pattern such as ``address.*.city`` collects the
        messages of every matching concrete path.
        """
        if WILDCARD not in key:
            return list(self._messages.get(key, []))

        collected: List[str] = []
        for concrete, values in self._messages.items():
            if matches(key, concrete):
                collected.extend(values)
        return collected

    def first(self, key: Optional[str] = None) -> Optional[str]:
        """Get first message for a field, or the first overall."""
        if key is not None:
            values = self.get(key)
            return values[0] if values else None

        for values in self._messages.values():
            if values:
                return values[0]
        return None

    def keys(self) -> List[str]:
        return list(self._messages)

    def all(self) -> Dict[str, List[str]]:
        """Get every field's messages (copies)."""
        return {key: list(values) for key, values in self._messages.items()}

    def messages(self) -> List[str]:
        """All messages as a flat list."""
        flat: List[str] = []
        for values in self._messages.values():
            flat.extend(values)
        return flat

    def count(self) -> int:
        """Total number of messages."""
        return sum(len(values) for values in self._messages.values())

    def is_empty(self) -> bool:
        return self.count() == 0

    def to_dict(self) -> Dict[str, List[str]]:
        """Structured form: field path -> list of messages."""
        return self.all()

    def to_json(self, pretty: bool = False) -> str:
        """Serialize the structured form as JSON."""
        option = orjson.OPT_INDENT_2 if pretty else 0
        return orjson.dumps(self.to_dict(), option=option).decode("utf-8")

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return self.count()

    def __repr__(self) -> str:
        return f"MessageBag({self._messages!r})"
