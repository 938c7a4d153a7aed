"""
Basic parser tests - block structure

Tests empty source, headings, paragraphs, fences, math, lists, quotes and
raw HTML blocks.
"""

import pytest

from blogmark.lib.parser import Parser


def parse(source: str):
    return Parser(source, strict=False).parse()


class TestEmptyAndSimple:
    """Test empty source and the simplest blocks"""

    def test_empty_source(self):
        """Empty string should parse to a root with no children"""
        root = parse("")
        assert root.type == "root"
        assert root.children == []

    def test_whitespace_only(self):
        """Only whitespace should parse to an empty root"""
        assert parse("   \n\n  \t  ").children == []

    def test_single_paragraph(self):
        root = parse("Hello World")
        assert len(root.children) == 1
        paragraph = root.children[0]
        assert paragraph.type == "paragraph"
        assert paragraph.children[0].type == "text"
        assert paragraph.children[0].value == "Hello World"

    def test_paragraph_lines_joined(self):
        """Consecutive lines form one paragraph"""
        root = parse("Line 1\nLine 2")
        assert len(root.children) == 1
        assert root.children[0].text_get() == "Line 1\nLine 2"

    def test_blank_line_separates_paragraphs(self):
        root = parse("First\n\nSecond")
        assert [node.text_get() for node in root.children] == ["First", "Second"]

    def test_line_numbers(self):
        root = parse("First\n\nSecond")
        assert root.children[0].line_number == 1
        assert root.children[1].line_number == 3


class TestHeadings:
    """Test ATX headings"""

    @pytest.mark.parametrize("level", [1, 2, 3, 4, 5, 6])
    def test_levels(self, level):
        root = parse("#" * level + " Title")
        heading = root.children[0]
        assert heading.type == "heading"
        assert heading.depth == level
        assert heading.text_get() == "Title"

    def test_heading_interrupts_paragraph(self):
        root = parse("text\n## Section")
        assert [node.type for node in root.children] == ["paragraph", "heading"]

    def test_seven_hashes_is_paragraph(self):
        assert parse("####### nope").children[0].type == "paragraph"


class TestCodeFences:
    """Test fenced code blocks"""

    def test_backtick_fence(self):
        root = parse("```python\nprint(1)\n```")
        code = root.children[0]
        assert code.type == "code"
        assert code.lang == "python"
        assert code.value == "print(1)"

    def test_tilde_fence(self):
        root = parse("~~~\nplain\n~~~")
        assert root.children[0].lang is None
        assert root.children[0].value == "plain"

    def test_info_string_kept_whole(self):
        """The parser does not split lang:filename; the annotator does"""
        code = parse("```js:app.js {1,3}\nx\n```").children[0]
        assert code.lang == "js:app.js"
        assert code.meta == "{1,3}"

    def test_contents_not_parsed(self):
        code = parse("```\n# not a heading\n:::info\n```").children[0]
        assert code.value == "# not a heading\n:::info"

    def test_unclosed_fence_runs_to_end(self):
        root = parse("```\nline 1\nline 2")
        assert len(root.children) == 1
        assert root.children[0].value == "line 1\nline 2"

    def test_unclosed_fence_strict(self):
        with pytest.raises(SyntaxError) as excinfo:
            Parser("text\n```\ncode", strict=True).parse()
        assert "Unclosed code fence" in str(excinfo.value)
        assert "Line 2" in str(excinfo.value)

    def test_closed_fence_strict(self):
        root = Parser("text\n~~~~\ncode\n~~~~~\nafter", strict=True).parse()
        assert [node.type for node in root.children] == ["paragraph", "code", "paragraph"]
        assert root.children[1].value == "code"


class TestMathBlocks:
    """Test $$ display math"""

    def test_fenced_math(self):
        math = parse("$$\nE = mc^2\n$$").children[0]
        assert math.type == "math"
        assert math.value == "E = mc^2"

    def test_single_line_math(self):
        math = parse("$$ a + b $$").children[0]
        assert math.type == "math"
        assert math.value == "a + b"


class TestLists:
    """Test bullet and ordered lists"""

    def test_bullet_list(self):
        node = parse("- one\n- two\n- three").children[0]
        assert node.type == "list"
        assert node.ordered is False
        assert [item.text_get() for item in node.children] == ["one", "two", "three"]
        assert all(item.type == "listItem" for item in node.children)

    def test_ordered_list_start(self):
        node = parse("3. three\n4. four").children[0]
        assert node.ordered is True
        assert node.data["start"] == 3
        assert len(node.children) == 2

    def test_continuation_line(self):
        node = parse("- first\n  continued\n- second").children[0]
        assert node.children[0].text_get() == "first\ncontinued"

    def test_list_then_paragraph(self):
        root = parse("- item\n\nparagraph")
        assert [node.type for node in root.children] == ["list", "paragraph"]


class TestOtherBlocks:
    """Test quotes, breaks and raw HTML"""

    def test_blockquote(self):
        quote = parse("> quoted\n> text").children[0]
        assert quote.type == "blockquote"
        assert quote.children[0].type == "paragraph"
        assert quote.text_get() == "quoted\ntext"

    def test_thematic_break(self):
        root = parse("above\n\n---\n\nbelow")
        assert [node.type for node in root.children] == ["paragraph", "thematicBreak", "paragraph"]

    def test_html_block(self):
        node = parse("<div class=\"x\">\nraw\n</div>").children[0]
        assert node.type == "html"
        assert node.value == "<div class=\"x\">\nraw\n</div>"
