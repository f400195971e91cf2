"""Template variables for rendering the summarization prompts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class OwnerPromptVars:
    """User-specific framing for summarization prompts."""

    role: str = ""
    summary_for: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> OwnerPromptVars:
        """Build from the JSON form with ``role`` and ``summaryFor`` keys."""
        data = data or {}
        return cls(role=str(data.get("role") or ""), summary_for=str(data.get("summaryFor") or ""))


def _str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError("expected a list of strings")
    return list(value)


@dataclass
class PromptVarsConfig:
    """Template variables as configured; empty fields fall back to defaults on merge."""

    languages: list[str] = field(default_factory=list)
    filler_words: list[str] = field(default_factory=list)
    owner: OwnerPromptVars = field(default_factory=OwnerPromptVars)
    include_in_summary: list[str] = field(default_factory=list)
    title_max_words: int = 0
    skip_max_greet_lines: int = 0
    title_stop_words: list[str] = field(default_factory=list)
    summary_labels: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> PromptVarsConfig:
        """Build from the JSON form using camelCase keys."""
        data = data or {}
        return cls(
            languages=_str_list(data.get("languages")),
            filler_words=_str_list(data.get("fillerWords")),
            owner=OwnerPromptVars.from_dict(data.get("owner")),
            include_in_summary=_str_list(data.get("includeInSummary")),
            title_max_words=int(data.get("titleMaxWords") or 0),
            skip_max_greet_lines=int(data.get("skipMaxGreetLines") or 0),
            title_stop_words=_str_list(data.get("titleStopWords")),
            summary_labels=_str_list(data.get("summaryLabels")),
        )


@dataclass(frozen=True)
class PromptTemplateData:
    """Values made available to prompt templates."""

    owner: OwnerPromptVars
    include_in_summary: list[str]
    title_max_words: int
    skip_max_greet_lines: int
    languages_or: str
    languages_join: str
    filler_words_join: str
    title_stop_words_join: str
    summary_labels_join: str

    def as_template_context(self) -> dict[str, Any]:
        """Return the values under the names templates refer to them by."""
        return {
            "Owner": {"Role": self.owner.role, "SummaryFor": self.owner.summary_for},
            "IncludeInSummary": list(self.include_in_summary),
            "TitleMaxWords": self.title_max_words,
            "SkipMaxGreetLines": self.skip_max_greet_lines,
            "LanguagesOr": self.languages_or,
            "LanguagesJoin": self.languages_join,
            "FillerWordsJoin": self.filler_words_join,
            "TitleStopWordsJoin": self.title_stop_words_join,
            "SummaryLabelsJoin": self.summary_labels_join,
        }


def default_prompt_vars() -> PromptVarsConfig:
    """Return the built-in prompt variables."""
    return PromptVarsConfig(
        languages=["Swedish", "English"],
        filler_words=[
            "um", "uh", "er", "like", "you know", "basically",
            "liksom", "typ", "alltså", "asså", "ba", "ju", "väl",
        ],
        owner=OwnerPromptVars(role="software engineer", summary_for="a human inbox"),
        include_in_summary=[
            "Technical decisions, action items, information shared",
            "Personal context about colleagues (birthdays, travel plans, interests, family, life events)",
            "Tool discoveries, workflow insights, opinions expressed",
            "Even casual conversation has value if it reveals something about people",
        ],
        title_max_words=8,
        skip_max_greet_lines=3,
        title_stop_words=["the", "a", "of", "about"],
        summary_labels=["Decided:", "Insight:", "Problem:", "Context:", "Next:"],
    )


def merge_prompt_vars(overrides: PromptVarsConfig, defaults: PromptVarsConfig) -> PromptVarsConfig:
    """Return ``defaults`` with every non-empty field of ``overrides`` applied."""
    return PromptVarsConfig(
        languages=list(overrides.languages or defaults.languages),
        filler_words=list(overrides.filler_words or defaults.filler_words),
        owner=OwnerPromptVars(
            role=overrides.owner.role or defaults.owner.role,
            summary_for=overrides.owner.summary_for or defaults.owner.summary_for,
        ),
        include_in_summary=list(overrides.include_in_summary or defaults.include_in_summary),
        title_max_words=overrides.title_max_words if overrides.title_max_words > 0 else defaults.title_max_words,
        skip_max_greet_lines=(
            overrides.skip_max_greet_lines if overrides.skip_max_greet_lines > 0 else defaults.skip_max_greet_lines
        ),
        title_stop_words=list(overrides.title_stop_words or defaults.title_stop_words),
        summary_labels=list(overrides.summary_labels or defaults.summary_labels),
    )


def prompt_template_data(vars: PromptVarsConfig) -> PromptTemplateData:
    """Derive the template values from configured prompt variables."""
    return PromptTemplateData(
        owner=vars.owner,
        include_in_summary=list(vars.include_in_summary),
        title_max_words=vars.title_max_words,
        skip_max_greet_lines=vars.skip_max_greet_lines,
        languages_or=join_or(vars.languages),
        languages_join=" and ".join(vars.languages),
        filler_words_join=", ".join(vars.filler_words),
        title_stop_words_join=join_quoted(vars.title_stop_words),
        summary_labels_join=format_summary_labels(vars.summary_labels),
    )


def join_or(items: list[str] | None) -> str:
    """Join as ``"A, B or C"``."""
    items = list(items or [])
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    return ", ".join(items[:-1]) + " or " + items[-1]


def join_quoted(items: list[str] | None) -> str:
    """Join double-quoted items with commas."""
    return ", ".join(f'"{item}"' for item in items or [])


def format_summary_labels(labels: list[str] | None) -> str:
    """Render labels in bold with a single trailing colon."""
    return ", ".join(f"**{label.removesuffix(':')}:**" for label in labels or [])