"""Pipeline event — a JSON object addressed by field references."""

from __future__ import annotations

import copy
import json
import re
from typing import Any

from resptime_filter.utils.field_path import FieldPath

_SPRINTF = re.compile(r"%\{([^}]+)\}")


class Event:
    """A single pipeline event.

    Fields are addressed by ``[outer][inner]`` references or a bare
    top-level name. A bare name is never split on dots.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(data) if data else {}

    @staticmethod
    def reference_parts(reference: str) -> tuple[str, ...]:
        """Split a field reference into keys.

        Raises:
            ValueError: If the reference is empty or malformed.
        """
        if reference.startswith("["):
            return FieldPath.parse(reference)
        if not reference:
            raise ValueError("Field reference must not be empty")
        return (reference,)

    def _lookup(self, reference: str) -> tuple[bool, Any]:
        current: Any = self._data
        for part in Event.reference_parts(reference):
            if not isinstance(current, dict) or part not in current:
                return False, None
            current = current[part]
        return True, current

    def get(self, reference: str, default: Any = None) -> Any:
        """Return the field value, or ``default`` when absent."""
        found, value = self._lookup(reference)
        return value if found else default

    def includes(self, reference: str) -> bool:
        """True if the field exists (even when its value is null)."""
        return self._lookup(reference)[0]

    def set(self, reference: str, value: Any) -> None:
        """Set a field, creating intermediate objects as needed."""
        parts = Event.reference_parts(reference)
        current = self._data
        for part in parts[:-1]:
            child = current.get(part)
            if not isinstance(child, dict):
                child = {}
                current[part] = child
            current = child
        current[parts[-1]] = value

    def remove(self, reference: str) -> Any:
        """Remove a field and return its value (None when absent)."""
        parts = Event.reference_parts(reference)
        current: Any = self._data
        for part in parts[:-1]:
            if not isinstance(current, dict) or part not in current:
                return None
            current = current[part]
        if not isinstance(current, dict):
            return None
        return current.pop(parts[-1], None)

    @property
    def tags(self) -> list[str]:
        tags = self._data.get("tags")
        if isinstance(tags, list):
            return [str(tag) for tag in tags]
        if isinstance(tags, str):
            return [tags]
        return []

    def add_tag(self, tag: str) -> None:
        """Append a tag unless already present."""
        tags = self.tags
        if tag not in tags:
            tags.append(tag)
        self._data["tags"] = tags

    def remove_tag(self, tag: str) -> None:
        """Drop a tag if present."""
        if "tags" in self._data:
            self._data["tags"] = [t for t in self.tags if t != tag]

    def copy(self) -> Event:
        """Return an independent deep copy of this event."""
        return Event(self._data)

    @staticmethod
    def _format(value: Any) -> str:
        if isinstance(value, str):
            return value
        if isinstance(value, list):
            return ",".join(Event._format(item) for item in value)
        if isinstance(value, (dict, bool)):
            return json.dumps(value)
        return str(value)

    def sprintf(self, template: str) -> str:
        """Render ``%{field}`` placeholders from this event.

        A placeholder whose field is absent, null or malformed is left as-is.
        """

        def _replace(match: re.Match[str]) -> str:
            try:
                found, value = self._lookup(match.group(1))
            except ValueError:
                return match.group(0)
            if not found or value is None:
                return match.group(0)
            return Event._format(value)

        return _SPRINTF.sub(_replace, template)

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the event data."""
        return copy.deepcopy(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"Event({self._data!r})"
