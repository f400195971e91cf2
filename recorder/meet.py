"""Google Meet participant and speaking-state extraction."""

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

# A tile's display name is the first ".notranslate" text that looks like a
# capitalised full name (contains a space, between 3 and 49 characters).
_NAME_OF_TILE = r"""
  const nameOf = (tile) => {
    const candidates = [...tile.querySelectorAll('.notranslate')]
      .map((el) => el.innerText.trim())
      .filter((text) => text.length > 2 && text.length < 50
        && text[0] === text[0].toUpperCase() && text.includes(' '));
    return candidates.length ? candidates[0] : null;
  };
"""

_TILES = "[...document.querySelectorAll('[data-participant-id]')]"

_SNAPSHOT_JS = (
    "(() => {"
    + _NAME_OF_TILE
    + r"""
  const rows = [];
  for (const tile of """
    + _TILES
    + r""") {
    const name = nameOf(tile);
    if (!name) continue;
    const seen = new Set();
    for (const el of tile.querySelectorAll('[class]')) {
      for (const c of el.classList) seen.add(c);
    }
    rows.push({name: name, classes: [...seen]});
  }
  return JSON.stringify(rows);
})()"""
)


def _poll_js(speaking_class: str) -> str:
    return (
        "(() => {"
        + _NAME_OF_TILE
        + "  const cls = "
        + json.dumps(speaking_class)
        + r""";
  const rows = [];
  for (const tile of """
        + _TILES
        + r""") {
    const name = nameOf(tile);
    if (!name) continue;
    const speaking = tile.querySelector('.' + cls) !== null
      || tile.closest('.' + cls) !== null;
    rows.push({name: name, speaking: speaking});
  }
  return JSON.stringify(rows);
})()"""
    )


class MeetProvider(Provider):
    """Provider for Google Meet tabs, using ``[data-participant-id]`` tiles."""

    def name(self) -> str:
        return "meet"

    def matches_url(self, url: str) -> bool:
        return "meet.google.com" in url

    def snapshot_expression(self) -> str:
        return _SNAPSHOT_JS

    def parse_snapshot(self, json_value: str) -> list[ParticipantSnapshot]:
        return parse_snapshot(json_value)

    def poll_expression(self, speaking_class: str) -> str:
        return _poll_js(validate_css_class(speaking_class))

    def parse_poll(self, json_value: str) -> list[Participant]:
        return parse_poll(json_value)