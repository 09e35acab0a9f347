"""Nested field access for search-hit documents."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_BRACKET_PATH = re.compile(r"^(\[[^\[\]]+\])+$")
_BRACKET_PART = re.compile(r"\[([^\[\]]+)\]")


class MissingFieldError(Exception):
    """Raised when a document lacks the requested field or it has the wrong shape."""


class FieldPath:
    """A parsed path into a nested document.

    Accepts dotted (``latency.response_transmitted``) or field-reference
    (``[latency][response_transmitted]``) notation.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._parts = FieldPath.parse(path)

    @staticmethod
    def parse(path: str) -> tuple[str, ...]:
        """Split a path into its keys.

        Raises:
            ValueError: If the path is empty or malformed.
        """
        text = path.strip()
        if not text:
            raise ValueError("Field path must not be empty")
        if text.startswith("["):
            if not _BRACKET_PATH.match(text):
                raise ValueError(f"Malformed field reference: {path!r}")
            return tuple(_BRACKET_PART.findall(text))
        parts = tuple(text.split("."))
        if any(not part for part in parts):
            raise ValueError(f"Malformed field path: {path!r}")
        return parts

    @property
    def parts(self) -> tuple[str, ...]:
        return self._parts

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"FieldPath({self._path!r})"

    def get(self, document: Mapping[str, Any]) -> Any:
        """Return the value at this path.

        Raises:
            MissingFieldError: If any key along the path is absent or an
                intermediate value is not an object.
        """
        current: Any = document
        for depth, part in enumerate(self._parts):
            if not isinstance(current, Mapping):
                walked = ".".join(self._parts[:depth])
                raise MissingFieldError(
                    f"{self._path}: {walked or 'document'} is not an object"
                )
            if part not in current:
                raise MissingFieldError(f"{self._path}: missing key {part!r}")
            current = current[part]
        return current

    def get_number(self, document: Mapping[str, Any]) -> float:
        """Return the value at this path as a float.

        Raises:
            MissingFieldError: If the field is absent or not numeric.
        """
        value = self.get(document)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MissingFieldError(
                f"{self._path}: expected a number, got {type(value).__name__}"
            )
        return float(value)
