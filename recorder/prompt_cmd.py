"""Printing the resolved system prompts for inspection."""

from __future__ import annotations

from typing import TextIO

from recorder.config import Config

PROMPT_NAMES = ("cleanup", "summarize", "combine")


def selected_prompts(args: list[str] | None) -> list[str]:
    """Return the prompt names chosen by ``args``; all of them when empty."""
    if not args:
        return list(PROMPT_NAMES)
    for arg in args:
        if arg not in PROMPT_NAMES:
            raise ValueError(f'unknown prompt "{arg}" (want cleanup, summarize, or combine)')
    return list(args)


def run(cfg: Config, args: list[str] | None, out: TextIO) -> None:
    """Write the selected prompts to ``out``, each under a ``=== name ===`` heading."""
    for index, name in enumerate(selected_prompts(args)):
        if index:
            out.write("\n")
        out.write(f"=== {name} ===\n")
        text = getattr(cfg.prompts, name)
        out.write(text)
        if not text.endswith("\n"):
            out.write("\n")