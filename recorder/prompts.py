"""System prompts: built-in templates, file overrides and rendering."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from recorder.prompt_vars import PromptTemplateData, PromptVarsConfig, prompt_template_data

DEFAULT_CLEANUP_TEMPLATE = """\
You are a speech transcript cleanup assistant.

The input is raw speech-to-text output captured during a conversation. \
Speakers use {{ .LanguagesOr }}, and may switch between {{ .LanguagesJoin }} mid-sentence.

Rules:
- Fix obvious recognition errors, punctuation and capitalization.
- Remove filler words such as: {{ .FillerWordsJoin }}.
- Keep every line in the language it was spoken in. Never translate.
- Do not add, summarize or reorder content.
- Keep speaker labels and timestamps exactly as given.
- Drop lines that are only noise or cannot be understood.

Return only the cleaned transcript.
"""

DEFAULT_SUMMARIZE_TEMPLATE = """\
You write summaries of ambient meeting recordings for a {{ .Owner.Role }}. \
Each summary ends up in {{ .Owner.SummaryFor }}, so it must make sense to someone who was not there.

The transcript may be in {{ .LanguagesOr }}. Write the summary in the main language of the transcript.

Capture:
{{- range .IncludeInSummary }}
- {{ . }}
{{- end }}

If the recording holds nothing but greetings or small talk of at most {{ .SkipMaxGreetLines }} lines, \
answer with an empty response.

Write short bullet points. Start each with one of {{ .SummaryLabelsJoin }}. \
Do not invent anything that is not in the transcript.
"""

DEFAULT_COMBINE_TEMPLATE = """\
You merge several partial summaries of the same conversation into one.

Keep every distinct fact, drop duplicates, and keep the bullet labels {{ .SummaryLabelsJoin }}.

Begin with a title of ≤{{ .TitleMaxWords }} words on the first line. \
Leave words such as {{ .TitleStopWordsJoin }} out of the title.

Then write the merged bullet points, most important first.
"""

_WHITESPACE = " \t\r\n"
_PATH = re.compile(r"\.(?:[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*)?")


class TemplateError(ValueError):
    """A prompt template could not be parsed or executed."""


@dataclass
class PromptPathsConfig:
    """Optional files overriding the built-in prompts; empty uses the built-in one."""

    cleanup: str = ""
    summarize: str = ""
    combine: str = ""


@dataclass(frozen=True)
class Prompts:
    """Resolved system prompt text used at runtime."""

    cleanup: str = ""
    summarize: str = ""
    combine: str = ""


@dataclass
class _Text:
    text: str


@dataclass
class _Value:
    path: tuple[str, ...]


@dataclass
class _Block:
    kind: str
    path: tuple[str, ...]
    body: list = field(default_factory=list)
    alt: list = field(default_factory=list)


def _lex(name: str, template: str) -> list[tuple[str, str]]:
    tokens: list[tuple[str, str]] = []
    pos = 0
    while True:
        start = template.find("{{", pos)
        if start < 0:
            tokens.append(("text", template[pos:]))
            return tokens
        end = template.find("}}", start + 2)
        if end < 0:
            raise TemplateError(f"parse template: template: {name}: unclosed action")
        text = template[pos:start]
        inner = template[start + 2 : end]
        if len(inner) >= 2 and inner[0] == "-" and inner[1] in _WHITESPACE:
            text = text.rstrip(_WHITESPACE)
            inner = inner[1:]
        trim_right = len(inner) >= 2 and inner[-1] == "-" and inner[-2] in _WHITESPACE
        if trim_right:
            inner = inner[:-1]
        tokens.append(("text", text))
        tokens.append(("action", inner.strip()))
        pos = end + 2
        if trim_right:
            while pos < len(template) and template[pos] in _WHITESPACE:
                pos += 1


def _path(name: str, expr: str) -> tuple[str, ...]:
    if not _PATH.fullmatch(expr):
        raise TemplateError(f"parse template: template: {name}: unsupported action {{{{{expr}}}}}")
    return tuple(part for part in expr[1:].split(".") if part)


def _parse(name: str, template: str) -> list:
    root: list = []
    lists: list[list] = [root]
    blocks: list[_Block] = []
    for kind, value in _lex(name, template):
        if kind == "text":
            if value:
                lists[-1].append(_Text(value))
            continue
        if value.startswith("/*") and value.endswith("*/"):
            continue
        parts = value.split(None, 1)
        if not parts:
            raise TemplateError(f"parse template: template: {name}: missing value for command")
        keyword = parts[0]
        arg = parts[1].strip() if len(parts) > 1 else ""
        if keyword in ("range", "if"):
            block = _Block(keyword, _path(name, arg))
            lists[-1].append(block)
            blocks.append(block)
            lists.append(block.body)
        elif keyword == "else":
            if arg or not blocks or lists[-1] is not blocks[-1].body:
                raise TemplateError(f"parse template: template: {name}: unexpected {{{{else}}}}")
            lists[-1] = blocks[-1].alt
        elif keyword == "end":
            if arg or not blocks:
                raise TemplateError(f"parse template: template: {name}: unexpected {{{{end}}}}")
            blocks.pop()
            lists.pop()
        else:
            lists[-1].append(_Value(_path(name, value)))
    if blocks:
        raise TemplateError(f"parse template: template: {name}: unexpected EOF")
    return root


def _lookup(name: str, dot: Any, path: tuple[str, ...]) -> Any:
    value = dot
    for part in path:
        if not isinstance(value, dict) or part not in value:
            raise TemplateError(f"execute template: template: {name}: can't evaluate field {part}")
        value = value[part]
    return value


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "<no value>"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_format(v) for v in value) + "]"
    return str(value)


def _execute(name: str, nodes: list, dot: Any, out: list[str]) -> None:
    for node in nodes:
        if isinstance(node, _Text):
            out.append(node.text)
        elif isinstance(node, _Value):
            out.append(_format(_lookup(name, dot, node.path)))
        elif node.kind == "if":
            _execute(name, node.body if _lookup(name, dot, node.path) else node.alt, dot, out)
        else:
            items = _lookup(name, dot, node.path)
            if items is None:
                items = []
            if isinstance(items, dict):
                items = [items[key] for key in sorted(items)]
            elif not isinstance(items, (list, tuple)):
                raise TemplateError(f"execute template: template: {name}: range can't iterate over {items!r}")
            if not items:
                _execute(name, node.alt, dot, out)
            for item in items:
                _execute(name, node.body, item, out)


def render_template(name: str, template: str, data: PromptTemplateData | dict[str, Any]) -> str:
    """Render ``template`` with field references such as ``{{ .Owner.Role }}``."""
    nodes = _parse(name, template)
    context = data.as_template_context() if isinstance(data, PromptTemplateData) else data
    out: list[str] = []
    _execute(name, nodes, context, out)
    return "".join(out)


def load_prompt_template(path: str | os.PathLike[str], default_template: str) -> str:
    """Return the template at ``path``; seed the file with the default if it is missing."""
    if not path:
        return default_template
    file = Path(path)
    try:
        return file.read_text(encoding="utf-8")
    except FileNotFoundError:
        pass
    file.parent.mkdir(parents=True, exist_ok=True)
    file.write_text(default_template, encoding="utf-8")
    return default_template


def resolve_prompt(name: str, path: str, default_template: str, data: PromptTemplateData) -> str:
    """Load the template for one prompt and render it."""
    return render_template(name, load_prompt_template(path, default_template), data)


def resolve_prompts(paths: PromptPathsConfig, vars: PromptVarsConfig) -> Prompts:
    """Resolve all three system prompts from their paths and variables."""
    data = prompt_template_data(vars)
    resolved: dict[str, str] = {}
    for name, path, default in (
        ("cleanup", paths.cleanup, DEFAULT_CLEANUP_TEMPLATE),
        ("summarize", paths.summarize, DEFAULT_SUMMARIZE_TEMPLATE),
        ("combine", paths.combine, DEFAULT_COMBINE_TEMPLATE),
    ):
        try:
            resolved[name] = resolve_prompt(name, path, default, data)
        except TemplateError as exc:
            raise TemplateError(f"prompts.{name}: {exc}") from exc
    return Prompts(**resolved)