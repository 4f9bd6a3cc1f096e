"""Stache - logic-less mustache templates"""

from stache._version import __version__
from stache.api import render, render_file, render_file_in_layout, render_in_layout
from stache.config import StacheSettings, load_settings
from stache.exceptions import ParseError, StacheError
from stache.node import Section, Template, Text, Variable
from stache.parser import parse_file, parse_string
from stache.renderer import Renderer, html_escape
from stache.resolver import UNDEFINED, resolve

__all__ = [
    "__version__",
    # parse
    "parse_string",
    "parse_file",
    "ParseError",
    "StacheError",
    # tree
    "Template",
    "Text",
    "Variable",
    "Section",
    # render
    "Renderer",
    "html_escape",
    "resolve",
    "UNDEFINED",
    # one-call helpers
    "render",
    "render_file",
    "render_in_layout",
    "render_file_in_layout",
    # settings
    "StacheSettings",
    "load_settings",
]
