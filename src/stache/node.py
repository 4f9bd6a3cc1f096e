"""Element tree produced by the parser.

Every node is a frozen ``msgspec.Struct``; nothing in the tree changes after
the parser returns the ``Template``.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple, Union

import msgspec


class Text(msgspec.Struct, frozen=True):
    """Literal text copied to the output as-is."""

    text: str


class Variable(msgspec.Struct, frozen=True):
    """A ``{{name}}`` (escaped) or ``{{{name}}}`` (raw) substitution."""

    name: str
    escape: bool = True


class Section(msgspec.Struct, frozen=True):
    """A ``{{#name}}`` or ``{{^name}}`` block and its children."""

    name: str
    inverted: bool = False
    line: int = 0  # line of the opening tag
    elements: Tuple["Element", ...] = ()


class Template(msgspec.Struct, frozen=True):
    """A compiled template.

    Templates are also elements: a ``{{>partial}}`` is stored as the
    partial's own ``Template`` and inlined at render time.
    """

    elements: Tuple["Element", ...] = ()
    otag: str = "{{"
    ctag: str = "}}"
    directory: Optional[str] = None
    name: Optional[str] = None

    def render(self, *contexts: Any) -> str:
        """Render against ``contexts``; the first one is the innermost scope."""
        from stache.renderer import Renderer

        return Renderer().render(self, *contexts)

    def render_in_layout(self, layout: "Template", *contexts: Any) -> str:
        """Render this template, then render ``layout`` with it as ``{{{content}}}``."""
        from stache.renderer import Renderer

        return Renderer().render_in_layout(self, layout, *contexts)


Element = Union[Text, Variable, Section, Template]
