"""Microsoft Teams participant and speaking-state extraction."""

from __future__ import annotations

import json

from recorder.conference import (
    Participant,
    ParticipantSnapshot,
    Provider,
    parse_poll,
    parse_snapshot,
    validate_css_class,
)

# Each voice-level outline element sits inside a parent whose data-tid
# attribute carries the participant's identifier.
_OUTLINES = "document.querySelectorAll('[data-tid=\"voice-level-stream-outline\"]')"

_SNAPSHOT_JS = (
    r"""(() => {
  const rows = [];
  for (const el of """
    + _OUTLINES
    + r""") {
    const parent = el.parentElement;
    const tid = parent ? parent.getAttribute('data-tid') : null;
    if (!tid || tid.length <= 2 || tid.length >= 80) continue;
    rows.push({name: tid, classes: el.className.split(/\s+/)});
  }
  return JSON.stringify(rows);
})()"""
)


def _poll_js(speaking_class: str) -> str:
    return (
        "(() => {\n  const cls = "
        + json.dumps(speaking_class)
        + r""";
  const rows = [];
  for (const el of """
        + _OUTLINES
        + r""") {
    const parent = el.parentElement;
    const tid = parent ? parent.getAttribute('data-tid') : null;
    if (!tid || tid.length <= 2) continue;
    rows.push({name: tid, speaking: el.classList.contains(cls)});
  }
  return JSON.stringify(rows);
})()"""
    )


class TeamsProvider(Provider):
    """Provider for Microsoft Teams tabs, using voice-level outline elements."""

    def name(self) -> str:
        return "teams"

    def matches_url(self, url: str) -> bool:
        return "teams.microsoft.com" in url

    def snapshot_expression(self) -> str:
        return _SNAPSHOT_JS

    def parse_snapshot(self, json_value: str) -> list[ParticipantSnapshot]:
        return parse_snapshot(json_value)

    def poll_expression(self, speaking_class: str) -> str:
        return _poll_js(validate_css_class(speaking_class))

    def parse_poll(self, json_value: str) -> list[Participant]:
        return parse_poll(json_value)