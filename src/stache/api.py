"""One-call helpers: parse and render in one go.

These never raise ``ParseError``; a template that fails to parse renders as
the error message instead. Use ``parse_string``/``parse_file`` and
``Template.render`` directly when the error itself matters.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from stache.exceptions import ParseError
from stache.parser import parse_file, parse_string


def render(data: str, *contexts: Any) -> str:
    """Parse ``data`` and render it."""
    try:
        template = parse_string(data)
    except ParseError as exc:
        return str(exc)
    return template.render(*contexts)


def render_in_layout(data: str, layout_data: str, *contexts: Any) -> str:
    """Parse ``data`` and ``layout_data``; render the first inside the second."""
    try:
        layout = parse_string(layout_data)
        template = parse_string(data)
    except ParseError as exc:
        return str(exc)
    return template.render_in_layout(layout, *contexts)


def render_file(filename: str | Path, *contexts: Any) -> str:
    """Parse the template file ``filename`` and render it."""
    try:
        template = parse_file(filename)
    except ParseError as exc:
        return str(exc)
    return template.render(*contexts)


def render_file_in_layout(
    filename: str | Path, layout_file: str | Path, *contexts: Any
) -> str:
    """Render the template file ``filename`` inside ``layout_file``."""
    try:
        layout = parse_file(layout_file)
        template = parse_file(filename)
    except ParseError as exc:
        return str(exc)
    return template.render_in_layout(layout, *contexts)
