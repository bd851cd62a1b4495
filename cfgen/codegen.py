"""Render templates and write generated output.

Takes the context from context_builder and produces the client module.
"""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Any

import jinja2

from .errors import GenerationFailure, WriteFailure

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "client.py.j2"


def _docstring(value: Any) -> str:
    """Make a value safe to embed in a triple-quoted docstring."""
    return str(value).replace("\\", "\\\\").replace('"', '\\"')


def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["pyrepr"] = repr
    env.filters["docstring"] = _docstring
    return env


def render(context: dict[str, Any]) -> str:
    """Render the client template and check the result parses."""
    try:
        output = _environment().get_template(TEMPLATE_NAME).render(**context)
    except jinja2.TemplateError as e:
        raise GenerationFailure(f"Failed to render {TEMPLATE_NAME}: {e}") from e

    try:
        ast.parse(output, filename=TEMPLATE_NAME)
    except SyntaxError as e:
        raise GenerationFailure(
            f"Generated client is not valid Python: {e.msg} (line {e.lineno})"
        ) from e
    return output


def write_output(path: Path, text: str) -> Path:
    """Write an artifact, creating parent directories."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise WriteFailure(f"Failed to write {path}: {e}") from e
    return path


def generate(context: dict[str, Any], output_path: Path) -> Path:
    """Render the client template and write it to output_path."""
    output_path = write_output(output_path, render(context))
    print(f"Generated {output_path} ({context['operation_count']} operations)")
    return output_path
