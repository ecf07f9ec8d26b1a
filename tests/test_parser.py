"""Tests for the template parser."""
import pytest

from stache.errors import (
    ErrorKind,
    InvalidDelimiters,
    UnclosedSection,
    UnmatchedSectionEnd,
    UnterminatedTag,
)
from stache.nodes import NodeKind
from stache.parser import TemplateParser, parse_template
from stache.tags import TagType
from stache.walker import iter_nodes


def parse(source):
    return TemplateParser(source).parse()


class TestTemplateParser:
    """Tree construction."""

    def test_parse_empty_template(self):
        """Empty source gives an empty document."""
        doc = parse("")

        assert len(doc) == 0
        assert doc.nodes == []

    @pytest.mark.parametrize("source", [
        "Hello, world!",
        "single { brace and } others",
        "line 1\nline 2\n",
        "}} stray end",
    ])
    def test_parse_text_without_delimiters(self, source):
        """Source without begin delimiters is one text node."""
        doc = parse(source)

        assert len(doc) == 1
        assert doc.nodes[0].kind is NodeKind.TEXT
        assert doc.nodes[0].text == source
        assert doc.nodes[0].position == 0

    def test_parse_text_with_variable(self):
        """Text around a variable tag."""
        doc = parse("Hi {{name}}.")

        assert [n.kind for n in doc] == [NodeKind.TEXT, NodeKind.TAG, NodeKind.TEXT]
        assert doc.nodes[0].text == "Hi "
        assert doc.nodes[1].tag.type is TagType.VARIABLE
        assert doc.nodes[1].tag.name == "name"
        assert doc.nodes[1].position == 3
        assert doc.nodes[2].text == "."
        assert doc.nodes[2].position == 11

    def test_whitespace_inside_tag_trimmed(self):
        doc = parse("{{  # list \n}}{{/ list }}")

        assert doc.nodes[0].tag.type is TagType.SECTION_BEGIN
        assert doc.nodes[0].tag.name == "list"

    def test_adjacent_tags(self):
        """No empty text nodes between adjacent tags."""
        doc = parse("{{a}}{{b}}")

        assert [n.tag.name for n in doc] == ["a", "b"]

    def test_empty_tag(self):
        doc = parse("{{}}")

        assert doc.nodes[0].tag.type is TagType.VARIABLE
        assert doc.nodes[0].tag.name == ""

    def test_triple_brace(self):
        """{{{name}}} is an unescaped variable closed by }}}."""
        doc = parse("a{{{ raw }}}b")

        assert doc.nodes[1].tag.type is TagType.UNESCAPED_VARIABLE
        assert doc.nodes[1].tag.name == "raw"
        assert doc.nodes[2].text == "b"

    def test_ampersand_form(self):
        doc = parse("{{& raw}}")

        assert doc.nodes[0].tag.type is TagType.UNESCAPED_VARIABLE
        assert doc.nodes[0].tag.name == "raw"

    def test_comment_and_partial(self):
        doc = parse("{{! note }}{{> header}}")

        assert doc.nodes[0].tag.type is TagType.COMMENT
        assert doc.nodes[0].tag.name == "note"
        assert doc.nodes[1].tag.type is TagType.PARTIAL
        assert doc.nodes[1].tag.name == "header"

    def test_section_children(self):
        """Section body becomes the section's children; end tag is removed."""
        doc = parse("{{#on}}shown{{/on}}after")

        assert len(doc) == 2
        section = doc.nodes[0]
        assert section.tag.type is TagType.SECTION_BEGIN
        assert [n.text for n in section.children] == ["shown"]
        assert doc.nodes[1].text == "after"

    def test_inverted_section_children(self):
        doc = parse("{{^off}}x{{/off}}")

        section = doc.nodes[0]
        assert section.tag.type is TagType.SECTION_BEGIN_INVERTED
        assert [n.text for n in section.children] == ["x"]

    def test_empty_section(self):
        doc = parse("{{#a}}{{/a}}")

        assert doc.nodes[0].children == []

    def test_nesting_depth_matches_source(self):
        """Nesting depth in the tree equals nesting depth in the source."""
        doc = parse("{{#a}}1{{#b}}2{{#c}}3{{/c}}{{/b}}{{/a}}")

        depths = {node.text: depth for node, depth in iter_nodes(doc.root) if node.is_text}
        assert depths == {"1": 1, "2": 2, "3": 3}

    def test_no_section_end_left_in_tree(self):
        doc = parse("{{#a}}{{#b}}{{/b}}{{^c}}{{/c}}{{/a}}")

        types = [node.tag.type for node, _ in iter_nodes(doc.root)]
        assert TagType.SECTION_END not in types
        assert types == [TagType.SECTION_BEGIN, TagType.SECTION_BEGIN, TagType.SECTION_BEGIN_INVERTED]

    def test_tag_on_last_two_characters(self):
        """A begin delimiter at the end of input is never read as triple brace."""
        with pytest.raises(UnterminatedTag) as exc_info:
            parse("abc{{")

        assert exc_info.value.position == 3

    def test_unclosed_triple_brace(self):
        """Triple brace needs }}}."""
        with pytest.raises(UnterminatedTag):
            parse("{{{raw}}")

    def test_deep_nesting(self):
        """Nesting is not limited by the recursion limit."""
        depth = 3000
        source = "{{#s}}" * depth + "x" + "{{/s}}" * depth

        doc = parse(source)

        node = doc.nodes[0]
        for _ in range(depth - 1):
            node = node.children[0]
        assert node.children[0].text == "x"


class TestSetDelimiter:

    def test_switch_delimiters(self):
        doc = parse("{{=<% %>=}}<% name %> {{literal}}")

        assert doc.nodes[0].tag.type is TagType.SET_DELIMITER
        assert doc.nodes[1].tag.type is TagType.VARIABLE
        assert doc.nodes[1].tag.name == "name"
        assert doc.nodes[2].text == " {{literal}}"

    def test_no_triple_brace_with_custom_delimiters(self):
        doc = parse("{{=| |=}}|{x}|")

        assert doc.nodes[1].tag.type is TagType.VARIABLE
        assert doc.nodes[1].tag.name == "{x}"

    def test_switch_back_to_braces(self):
        doc = parse("{{=[ ]=}}[x][={{ }}=]{{{y}}}")

        assert doc.nodes[1].tag.name == "x"
        assert doc.nodes[3].tag.type is TagType.UNESCAPED_VARIABLE
        assert doc.nodes[3].tag.name == "y"

    def test_sections_with_custom_delimiters(self):
        doc = parse("{{=<% %>=}}<%#a%>in<%/a%>")

        assert doc.nodes[1].tag.type is TagType.SECTION_BEGIN
        assert [n.text for n in doc.nodes[1].children] == ["in"]

    def test_invalid_delimiters(self):
        with pytest.raises(InvalidDelimiters) as exc_info:
            parse("ab{{=<%=}}")

        assert exc_info.value.position == 2


class TestParserErrors:

    def test_unterminated_tag(self):
        with pytest.raises(UnterminatedTag) as exc_info:
            parse("Hello {{name")

        err = exc_info.value
        assert err.kind is ErrorKind.UNTERMINATED_TAG
        assert err.position == 6
        assert "position 6" in str(err)

    def test_unmatched_section_end(self):
        with pytest.raises(UnmatchedSectionEnd) as exc_info:
            parse("text{{/a}}")

        err = exc_info.value
        assert err.kind is ErrorKind.UNMATCHED_SECTION_END
        assert err.name == "a"
        assert err.position == 4

    def test_mismatched_end_name(self):
        """The end name is checked in validation, not when popping."""
        with pytest.raises(UnclosedSection) as exc_info:
            parse("{{#a}}{{/b}}")

        assert exc_info.value.name == "a"
        assert exc_info.value.position == 0

    def test_section_never_closed(self):
        with pytest.raises(UnclosedSection) as exc_info:
            parse("{{#x}}no end")

        err = exc_info.value
        assert err.kind is ErrorKind.UNCLOSED_SECTION
        assert err.name == "x"
        assert "x" in str(err)

    def test_inner_section_never_closed(self):
        """The end tag closes the inner section, leaving the outer one open."""
        with pytest.raises(UnclosedSection) as exc_info:
            parse("{{#outer}}{{#inner}}{{/outer}}")

        assert exc_info.value.name == "outer"

    def test_second_section_unclosed(self):
        with pytest.raises(UnclosedSection) as exc_info:
            parse("{{#a}}{{/a}} {{#b}}")

        assert exc_info.value.name == "b"
        assert exc_info.value.position == 13


class TestParseTemplate:

    def test_ok_result(self):
        result = parse_template("{{a}}")

        assert result.ok
        assert result.error is None
        assert result.document.nodes[0].tag.name == "a"

    def test_error_result(self):
        result = parse_template("{{#a}}")

        assert not result.ok
        assert result.document is None
        assert isinstance(result.error, UnclosedSection)
