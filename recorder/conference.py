"""Common types for video conferencing platform integrations."""

from __future__ import annotations

import abc
import json
import re
from dataclasses import dataclass, field

_VALID_CSS_CLASS = re.compile(r"[a-zA-Z0-9_-]+")


@dataclass(frozen=True)
class ParticipantSnapshot:
    """A participant tile with its full CSS class set (discovery phase)."""

    name: str
    classes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Participant:
    """A participant and whether they are speaking (poll phase)."""

    name: str
    speaking: bool = False


class Provider(abc.ABC):
    """Platform-specific extraction of participant and speaking state."""

    @abc.abstractmethod
    def name(self) -> str:
        """Platform identifier for logging."""

    @abc.abstractmethod
    def matches_url(self, url: str) -> bool:
        """Whether a browser tab URL belongs to this platform."""

    @abc.abstractmethod
    def snapshot_expression(self) -> str:
        """JavaScript capturing all participant tiles with their CSS classes."""

    @abc.abstractmethod
    def parse_snapshot(self, json_value: str) -> list[ParticipantSnapshot]:
        """Parse the JSON result of the snapshot expression."""

    @abc.abstractmethod
    def poll_expression(self, speaking_class: str) -> str:
        """JavaScript checking speaking state using the discovered CSS class."""

    @abc.abstractmethod
    def parse_poll(self, json_value: str) -> list[Participant]:
        """Parse the JSON result of the poll expression."""


def _load_records(json_value: str) -> list[dict]:
    data = json.loads(json_value)
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError("expected a JSON array")
    records = []
    for item in data:
        if item is None:
            item = {}
        if not isinstance(item, dict):
            raise ValueError("expected a JSON object in array")
        records.append(item)
    return records


def _typed(record: dict, key: str, kind: type, default):
    value = record.get(key)
    if value is None:
        return default
    if not isinstance(value, kind):
        raise ValueError(f"field {key!r} has wrong type")
    return value


def parse_snapshot(json_value: str) -> list[ParticipantSnapshot]:
    """Parse a JSON array of ``{name, classes}`` objects."""
    result = []
    for record in _load_records(json_value):
        classes = _typed(record, "classes", list, [])
        if not all(isinstance(c, str) for c in classes):
            raise ValueError("field 'classes' must hold strings")
        result.append(ParticipantSnapshot(name=_typed(record, "name", str, ""), classes=list(classes)))
    return result


def parse_poll(json_value: str) -> list[Participant]:
    """Parse a JSON array of ``{name, speaking}`` objects."""
    return [
        Participant(name=_typed(r, "name", str, ""), speaking=_typed(r, "speaking", bool, False))
        for r in _load_records(json_value)
    ]


def validate_css_class(name: str) -> str:
    """Return ``name`` if it is a safe CSS class name, else raise ValueError."""
    if not _VALID_CSS_CLASS.fullmatch(name):
        raise ValueError(f"invalid CSS class: {name!r}")
    return name