import pytest

from recorder.prompt_vars import (
    OwnerPromptVars,
    PromptVarsConfig,
    default_prompt_vars,
    format_summary_labels,
    join_or,
    join_quoted,
    merge_prompt_vars,
    prompt_template_data,
)


def test_prompt_template_data_defaults():
    data = prompt_template_data(default_prompt_vars())
    assert data.languages_or == "Swedish or English"
    assert data.languages_join == "Swedish and English"
    assert data.title_max_words == 8
    assert data.summary_labels_join == "**Decided:**, **Insight:**, **Problem:**, **Context:**, **Next:**"
    assert data.title_stop_words_join == '"the", "a", "of", "about"'
    assert data.filler_words_join.startswith("um, uh, er")


def test_default_prompt_vars():
    v = default_prompt_vars()
    assert len(v.languages) > 0
    assert len(v.filler_words) > 0
    assert v.owner.role == "software engineer"
    assert v.owner.summary_for == "a human inbox"
    assert len(v.include_in_summary) > 0


def test_merge_partial_override():
    merged = merge_prompt_vars(PromptVarsConfig(languages=["English"]), default_prompt_vars())
    assert merged.languages == ["English"]
    assert merged.owner.role == "software engineer"
    assert merged.title_max_words == 8


def test_merge_owner_override():
    merged = merge_prompt_vars(
        PromptVarsConfig(owner=OwnerPromptVars(role="product manager", summary_for="weekly notes")),
        default_prompt_vars(),
    )
    assert merged.owner == OwnerPromptVars(role="product manager", summary_for="weekly notes")
    assert merged.languages == ["Swedish", "English"]


def test_merge_empty_overrides_keeps_defaults():
    assert merge_prompt_vars(PromptVarsConfig(), default_prompt_vars()) == default_prompt_vars()


@pytest.mark.parametrize(
    "items, want",
    [
        (None, ""),
        (["English"], "English"),
        (["Swedish", "English"], "Swedish or English"),
        (["A", "B", "C"], "A, B or C"),
    ],
)
def test_join_or(items, want):
    assert join_or(items) == want


def test_join_quoted():
    assert join_quoted(["x", "y"]) == '"x", "y"'
    assert join_quoted([]) == ""


def test_format_summary_labels_adds_missing_colon():
    assert format_summary_labels(["Decided", "Next:"]) == "**Decided:**, **Next:**"


def test_from_dict_camel_case():
    v = PromptVarsConfig.from_dict(
        {"owner": {"role": "product manager", "summaryFor": "weekly notes"}, "titleMaxWords": 5}
    )
    assert v.owner.role == "product manager"
    assert v.owner.summary_for == "weekly notes"
    assert v.title_max_words == 5
    assert v.languages == []


def test_template_context_names():
    ctx = prompt_template_data(default_prompt_vars()).as_template_context()
    assert ctx["Owner"]["Role"] == "software engineer"
    assert ctx["LanguagesOr"] == "Swedish or English"
    assert ctx["SkipMaxGreetLines"] == 3