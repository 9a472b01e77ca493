from __future__ import annotations

from pathlib import Path

from bedrock_query_api.common.templates import DEFAULT_TEMPLATE, load_template, render_prompt, template_for

REPO_TEMPLATE = Path(__file__).resolve().parent.parent / "configs" / "prompt_template.txt"


def test_render_prompt_substitution() -> None:
    tpl = "Hello {{input}}!"
    out = render_prompt(tpl, "world")
    assert out == "Hello world!"


def test_default_template_wraps_user_question() -> None:
    out = render_prompt(DEFAULT_TEMPLATE, "What is 2+2?")
    assert out == "You are an assistant. Answer the user's question clearly.\n\nUser: What is 2+2?"


def test_repo_template_matches_default() -> None:
    tpl = load_template(str(REPO_TEMPLATE))
    assert tpl == DEFAULT_TEMPLATE


def test_template_for_uses_default_without_path() -> None:
    assert template_for(None) == DEFAULT_TEMPLATE
    assert template_for("") == DEFAULT_TEMPLATE


def test_template_for_reads_configured_file(tmp_path: Path) -> None:
    tpl = tmp_path / "prompt.txt"
    tpl.write_text("Q: {{input}}", encoding="utf-8")
    assert render_prompt(template_for(str(tpl)), "hi") == "Q: hi"
