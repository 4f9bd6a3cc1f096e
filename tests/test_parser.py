"""Tests for the parser."""

import os

import pytest

from stache.config import StacheSettings
from stache.exceptions import ParseError
from stache.node import Section, Template, Text, Variable
from stache.parser import parse_file, parse_string


def test_plain_text():
    t = parse_string("just text")
    assert t.elements == (Text("just text"),)
    assert t.otag == "{{"
    assert t.ctag == "}}"


def test_variables_escaped_and_raw():
    t = parse_string("{{ a }}-{{{b}}}")
    assert t.elements == (
        Variable("a", escape=True),
        Text("-"),
        Variable("b", escape=False),
    )


def test_raw_variable_with_whitespace():
    t = parse_string("{{{ b }}}")
    assert t.elements == (Variable("b", escape=False),)


def test_comment_is_discarded():
    t = parse_string("a{{! ignore me }}b")
    assert t.elements == (Text("a"), Text("b"))


def test_section_tree():
    t = parse_string("{{#items}}<{{name}}>{{/items}}")
    (section,) = t.elements
    assert isinstance(section, Section)
    assert section.name == "items"
    assert not section.inverted
    assert section.line == 1
    assert section.elements == (Text("<"), Variable("name"), Text(">"))


def test_inverted_section():
    t = parse_string("{{^empty}}none{{/empty}}")
    (section,) = t.elements
    assert section.inverted
    assert section.elements == (Text("none"),)


def test_nested_sections():
    t = parse_string("{{#a}}{{#b}}x{{/b}}{{/a}}")
    (outer,) = t.elements
    (inner,) = outer.elements
    assert inner.name == "b"
    assert inner.elements == (Text("x"),)


def test_section_open_swallows_one_newline():
    t = parse_string("{{#a}}\nx\n{{/a}}\n")
    (section, tail) = t.elements
    assert section.elements == (Text("x\n"),)
    assert tail == Text("\n")


def test_section_open_swallows_crlf():
    t = parse_string("{{#a}}\r\nx{{/a}}")
    assert t.elements[0].elements == (Text("x"),)


def test_section_line_numbers():
    t = parse_string("line1\nline2\n{{#a}}x{{/a}}")
    assert t.elements[1].line == 3


def test_delimiter_change():
    t = parse_string("{{=<% %>=}}<%v%>{{v}}")
    assert t.elements == (Variable("v"), Text("{{v}}"))
    assert t.otag == "<%"
    assert t.ctag == "%>"


def test_delimiter_change_and_back():
    t = parse_string("{{=| |=}}|a||={{ }}=|{{b}}")
    assert t.elements == (Variable("a"), Variable("b"))
    assert t.otag == "{{"


def test_raw_tag_with_custom_delimiters():
    t = parse_string("{{=<% %>=}}<%{v}%>")
    assert t.elements == (Variable("v", escape=False),)


def test_template_is_immutable():
    t = parse_string("{{a}}")
    with pytest.raises(AttributeError):
        t.otag = "<%"


# =============================================================================
# Errors
# =============================================================================


def test_unclosed_section_names_section_and_line():
    with pytest.raises(ParseError) as info:
        parse_string("\n{{#a}}x")
    assert info.value.section == "a"
    assert info.value.line == 2
    assert "a" in info.value.message
    assert str(info.value).startswith("line 2:")


def test_interleaved_closing_tag():
    with pytest.raises(ParseError) as info:
        parse_string("{{#a}}{{/b}}")
    assert info.value.message == "interleaved closing tag: b"


def test_close_tag_without_name():
    with pytest.raises(ParseError) as info:
        parse_string("{{#a}}x{{/}}")
    assert info.value.message == "empty tag"


def test_unmatched_close_tag_at_top_level():
    with pytest.raises(ParseError) as info:
        parse_string("x{{/a}}")
    assert info.value.message == "unmatched close tag: a"


def test_empty_tag():
    with pytest.raises(ParseError) as info:
        parse_string("{{  }}")
    assert info.value.message == "empty tag"


def test_empty_section_name():
    with pytest.raises(ParseError) as info:
        parse_string("{{#}}{{/}}")
    assert info.value.message == "empty tag"


def test_unmatched_open_tag_reports_opening_line():
    with pytest.raises(ParseError) as info:
        parse_string("a\n{{name\n\n")
    assert info.value.message == "unmatched open tag"
    assert info.value.line == 2


def test_unterminated_triple_mustache():
    with pytest.raises(ParseError) as info:
        parse_string("{{{name}}")
    assert info.value.message == "unmatched open tag"


def test_raw_tag_without_closing_brace():
    with pytest.raises(ParseError) as info:
        parse_string("{{ {name }}")
    assert info.value.message == "unterminated raw tag"


@pytest.mark.parametrize(
    "source",
    ["{{=<% %>}}", "{{=<%=}}", "{{=<% %> x=}}", "{{=%% %%=}}"],
)
def test_invalid_delimiter_tags(source):
    with pytest.raises(ParseError) as info:
        parse_string(source)
    assert info.value.message == "invalid delimiter tag"


# =============================================================================
# Partials
# =============================================================================


def test_partial_with_mustache_extension(tmp_path):
    (tmp_path / "header.mustache").write_text("<h1>{{title}}</h1>")
    t = parse_string("{{>header}}body", directory=str(tmp_path))
    partial = t.elements[0]
    assert isinstance(partial, Template)
    assert partial.elements == (Text("<h1>"), Variable("title"), Text("</h1>"))
    assert partial.directory == str(tmp_path)


def test_partial_exact_name_wins(tmp_path):
    (tmp_path / "header").write_text("exact")
    (tmp_path / "header.mustache").write_text("ext")
    t = parse_string("{{> header }}", directory=str(tmp_path))
    assert t.elements[0].elements == (Text("exact"),)


def test_partial_stache_extension(tmp_path):
    (tmp_path / "footer.stache").write_text("foot")
    t = parse_string("{{>footer}}", directory=str(tmp_path))
    assert t.elements[0].elements == (Text("foot"),)


def test_partial_falls_back_to_working_directory(tmp_path, monkeypatch):
    (tmp_path / "side.mustache").write_text("side")
    monkeypatch.chdir(tmp_path)
    t = parse_string("{{>side}}", directory=str(tmp_path / "elsewhere"))
    assert t.elements[0].elements == (Text("side"),)


def test_partial_uses_configured_partial_dir(tmp_path):
    (tmp_path / "nav.mustache").write_text("nav")
    settings = StacheSettings(partial_dir=str(tmp_path))
    t = parse_string("{{>nav}}", settings=settings)
    assert t.elements[0].elements == (Text("nav"),)


def test_partial_custom_extensions(tmp_path):
    (tmp_path / "row.html").write_text("<tr/>")
    settings = StacheSettings(partial_extensions=["html"])
    t = parse_string("{{>row}}", directory=str(tmp_path), settings=settings)
    assert t.elements[0].elements == (Text("<tr/>"),)


def test_missing_partial(tmp_path):
    with pytest.raises(ParseError) as info:
        parse_string("\n{{>nope}}", directory=str(tmp_path))
    assert info.value.message == "could not find partial nope"
    assert info.value.line == 2


def test_nested_partial_uses_own_directory(tmp_path):
    sub = tmp_path / "sub"
    sub.mkdir()
    (tmp_path / "page.mustache").write_text("[{{>sub/inner}}]")
    (sub / "inner.mustache").write_text("<{{>leaf}}>")
    (sub / "leaf.mustache").write_text("leaf")

    t = parse_file(tmp_path / "page.mustache")
    inner = t.elements[1]
    assert inner.directory == str(sub)
    leaf = inner.elements[1]
    assert leaf.elements == (Text("leaf"),)


def test_recursive_partial_is_rejected(tmp_path):
    (tmp_path / "a.mustache").write_text("{{>b}}")
    (tmp_path / "b.mustache").write_text("{{>a}}")
    with pytest.raises(ParseError) as info:
        parse_file(tmp_path / "a.mustache")
    assert info.value.message.startswith("recursive partial")


def test_error_in_partial_propagates(tmp_path):
    (tmp_path / "bad.mustache").write_text("{{#x}}")
    with pytest.raises(ParseError) as info:
        parse_string("{{>bad}}", directory=str(tmp_path))
    assert info.value.section == "x"


def test_parse_file_sets_directory_and_name(tmp_path):
    path = tmp_path / "t.mustache"
    path.write_text("hi {{who}}")
    t = parse_file(path)
    assert t.directory == str(tmp_path)
    assert t.name == str(path)


def test_parse_file_missing(tmp_path):
    with pytest.raises(ParseError) as info:
        parse_file(tmp_path / "missing.mustache")
    assert info.value.line == 0
    assert "could not read" in info.value.message


def test_parse_string_reads_cwd_env(tmp_path, monkeypatch):
    monkeypatch.delenv("STACHE_PARTIAL_DIR", raising=False)
    monkeypatch.setenv("CWD", str(tmp_path))
    (tmp_path / "p.mustache").write_text("p")
    t = parse_string("{{>p}}")
    assert t.directory == str(tmp_path)
    assert os.fspath(tmp_path) in t.elements[0].directory
