"""Prompt templating helpers."""
from __future__ import annotations
from pathlib import Path

DEFAULT_TEMPLATE = (
    "You are an assistant. Answer the user's question clearly.\n\nUser: {{input}}"
)

def load_template(path: str = "configs/prompt_template.txt") -> str:
    """
    Load a prompt template file.

    Args:
        path: Path to template.
    """
    return Path(path).read_text(encoding="utf-8")

def render_prompt(template: str, user_input: str) -> str:
    """
    Render user input into the template.

    Args:
        template: Template content containing {{input}}.
        user_input: Input string.

    Returns:
        Rendered prompt.
    """
    return template.replace("{{input}}", user_input)

def template_for(path: str | None) -> str:
    """Template text from `path`, or the built-in default when no path is configured."""
    return load_template(path) if path else DEFAULT_TEMPLATE
