"""Parser - turns template text into a ``Template`` element tree.

A single recursive routine handles both the top level and section bodies;
the only difference is how each one is allowed to end. Partials are located,
read and parsed here, so a returned ``Template`` never touches the disk
again.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from stache.config import StacheSettings
from stache.exceptions import ParseError
from stache.node import Element, Section, Template, Text, Variable
from stache.scanner import Scanner

log = logging.getLogger(__name__)

DEFAULT_OTAG = "{{"
DEFAULT_CTAG = "}}"


class Parser:
    """Compiles one template source. Create a new parser per source."""

    def __init__(
        self,
        data: str,
        directory: Optional[str] = None,
        settings: Optional[StacheSettings] = None,
        name: Optional[str] = None,
        loading: Tuple[Path, ...] = (),
    ):
        """Initialize parser state.

        Args:
            data: Template text.
            directory: Base directory for ``{{>partial}}`` lookup.
            settings: Parser settings (partial extensions).
            name: Source path, kept on the resulting template.
            loading: Partial files currently being parsed further up, used
                to reject partials that include themselves.
        """
        self.scanner = Scanner(data)
        self.directory = directory
        self.settings = settings or StacheSettings()
        self.name = name
        self.loading = loading
        self.otag = DEFAULT_OTAG
        self.ctag = DEFAULT_CTAG

    def parse(self) -> Template:
        """Parse the whole source.

        Raises:
            ParseError: On the first malformed construct.
        """
        elements = self._parse_block(None, 0)
        return Template(
            elements=tuple(elements),
            otag=self.otag,
            ctag=self.ctag,
            directory=self.directory,
            name=self.name,
        )

    def _parse_block(self, section: Optional[str], start_line: int) -> List[Element]:
        """Collect elements until end of input or the close tag of ``section``."""
        scanner = self.scanner
        elements: List[Element] = []

        while True:
            text, found = scanner.read_until(self.otag)
            if text:
                elements.append(Text(text))
            if not found:
                if section is not None:
                    raise ParseError(
                        start_line,
                        f"section {section} has no closing tag",
                        section=section,
                    )
                return elements

            tag_line = scanner.line
            raw_form = scanner.peek() == "{"
            if raw_form:
                body, found = scanner.read_until("}" + self.ctag)
                body += "}"
            else:
                body, found = scanner.read_until(self.ctag)
            if not found:
                raise ParseError(tag_line, "unmatched open tag")

            tag = body.strip()
            if not tag:
                raise ParseError(tag_line, "empty tag")

            lead = tag[0]
            if lead == "!":
                continue

            if lead in "#^":
                name = self._tag_name(tag, tag_line)
                scanner.skip_newline()
                children = self._parse_block(name, tag_line)
                elements.append(
                    Section(
                        name=name,
                        inverted=lead == "^",
                        line=tag_line,
                        elements=tuple(children),
                    )
                )
            elif lead == "/":
                name = self._tag_name(tag, tag_line)
                if section is None:
                    raise ParseError(tag_line, f"unmatched close tag: {name}")
                if name != section:
                    raise ParseError(tag_line, f"interleaved closing tag: {name}")
                return elements
            elif lead == ">":
                name = self._tag_name(tag, tag_line)
                elements.append(self._parse_partial(name, tag_line))
            elif lead == "=":
                self._set_delimiters(tag, tag_line)
            elif lead == "{":
                if len(tag) < 2 or tag[-1] != "}":
                    raise ParseError(tag_line, "unterminated raw tag")
                name = tag[1:-1].strip()
                if not name:
                    raise ParseError(tag_line, "empty tag")
                elements.append(Variable(name, escape=False))
            else:
                elements.append(Variable(tag))

    def _tag_name(self, tag: str, line: int) -> str:
        name = tag[1:].strip()
        if not name:
            raise ParseError(line, "empty tag")
        return name

    def _set_delimiters(self, tag: str, line: int) -> None:
        """Apply a ``{{=<open> <close>=}}`` tag."""
        if len(tag) < 2 or tag[-1] != "=":
            raise ParseError(line, "invalid delimiter tag")
        parts = tag[1:-1].split()
        if len(parts) != 2 or parts[0] == parts[1]:
            raise ParseError(line, "invalid delimiter tag")
        self.otag, self.ctag = parts

    def _partial_candidates(self, name: str) -> List[Path]:
        suffixes = [""] + list(self.settings.partial_extensions)
        candidates = []
        if self.directory:
            base = Path(self.directory)
            candidates.extend(base / f"{name}{suffix}" for suffix in suffixes)
        candidates.extend(Path(f"{name}{suffix}") for suffix in suffixes)
        return candidates

    def _parse_partial(self, name: str, line: int) -> Template:
        """Find, read and parse the partial ``name``."""
        for candidate in self._partial_candidates(name):
            if candidate.is_file():
                path = candidate
                break
        else:
            raise ParseError(line, f"could not find partial {name}")

        resolved = path.resolve()
        if resolved in self.loading:
            raise ParseError(line, f"recursive partial: {name}")

        log.debug("Resolved partial %r to %s", name, path)
        return _parse_path(path, self.settings, self.loading + (resolved,))


def _parse_path(
    path: Path, settings: Optional[StacheSettings], loading: Tuple[Path, ...]
) -> Template:
    try:
        data = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ParseError(0, f"could not read {path}: {exc}") from exc

    parser = Parser(
        data,
        directory=str(path.parent),
        settings=settings,
        name=str(path),
        loading=loading,
    )
    return parser.parse()


def parse_string(
    text: str,
    directory: Optional[str] = None,
    settings: Optional[StacheSettings] = None,
) -> Template:
    """Compile template text.

    Partials are looked up in ``directory``, falling back to the configured
    ``partial_dir`` and then the working directory.

    Raises:
        ParseError: If the template is malformed or a partial is missing.
    """
    settings = settings or StacheSettings()
    if directory is None:
        directory = settings.partial_dir
    return Parser(text, directory=directory, settings=settings).parse()


def parse_file(path: str | Path, settings: Optional[StacheSettings] = None) -> Template:
    """Read and compile a template file.

    The file's directory becomes the base for its partials.

    Raises:
        ParseError: If the file cannot be read or the template is malformed.
    """
    p = Path(path)
    return _parse_path(p, settings, (p.resolve(),))
