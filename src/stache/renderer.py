"""Renderer - evaluates a compiled ``Template`` against context values."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

import msgspec

from stache.node import Element, Section, Template, Text, Variable
from stache.resolver import UNDEFINED, Kind, Sink, classify, is_empty, resolve

log = logging.getLogger(__name__)

_HTML_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        '"': "&quot;",
        "'": "&apos;",
        "<": "&lt;",
        ">": "&gt;",
    }
)


def html_escape(text: str) -> str:
    """Escape ``& " ' < >`` for HTML text and attribute values."""
    return text.translate(_HTML_ESCAPES)


def log_lookup_error(name: str, exc: BaseException) -> None:
    """Default diagnostics sink: log and carry on."""
    log.warning("Error while looking up %r: %s", name, exc)


class LayoutContext(msgspec.Struct, frozen=True):
    """Scope that exposes rendered content to a layout as ``content``."""

    content: str


class Renderer:
    """Renders templates to strings.

    A renderer keeps no per-render state, so one instance can be shared
    between threads.
    """

    def __init__(self, sink: Optional[Sink] = None, escape: bool = True):
        """Initialize renderer.

        Args:
            sink: Called with ``(name, exception)`` whenever a name lookup
                fails. Defaults to logging a warning.
            escape: HTML-escape ``{{name}}`` output. Raw tags are never
                escaped.
        """
        self.sink = sink or log_lookup_error
        self.escape = escape

    def render(self, template: Template, *contexts: Any) -> str:
        """Render ``template``; ``contexts[0]`` is the innermost scope."""
        buf: List[str] = []
        self._render_elements(template.elements, tuple(contexts), buf)
        return "".join(buf)

    def render_in_layout(
        self, template: Template, layout: Template, *contexts: Any
    ) -> str:
        """Render ``template`` and place the result in ``layout``.

        The layout sees ``content`` first, then the same contexts the
        template was rendered with.
        """
        content = self.render(template, *contexts)
        return self.render(layout, LayoutContext(content), *contexts)

    def _render_elements(
        self, elements: Tuple[Element, ...], chain: Tuple[Any, ...], buf: List[str]
    ) -> None:
        for element in elements:
            if isinstance(element, Text):
                buf.append(element.text)
            elif isinstance(element, Variable):
                self._render_variable(element, chain, buf)
            elif isinstance(element, Section):
                self._render_section(element, chain, buf)
            elif isinstance(element, Template):
                # partials share the including template's scope
                self._render_elements(element.elements, chain, buf)

    def _render_variable(
        self, variable: Variable, chain: Tuple[Any, ...], buf: List[str]
    ) -> None:
        value = resolve(chain, variable.name, self.sink)
        if value is UNDEFINED or value is None:
            return
        text = str(value)
        if variable.escape and self.escape:
            text = html_escape(text)
        buf.append(text)

    def _render_section(
        self, section: Section, chain: Tuple[Any, ...], buf: List[str]
    ) -> None:
        value = resolve(chain, section.name, self.sink)
        empty = is_empty(value)

        if section.inverted:
            if empty:
                self._render_elements(section.elements, chain, buf)
            return
        if empty:
            return

        kind = classify(value)
        if kind is Kind.SEQUENCE:
            for item in value:
                self._render_elements(section.elements, (item,) + chain, buf)
        elif kind in (Kind.MAPPING, Kind.RECORD):
            self._render_elements(section.elements, (value,) + chain, buf)
        else:
            self._render_elements(section.elements, chain, buf)
