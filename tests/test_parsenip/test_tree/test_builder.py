"""Tests for stack-free tree assembly."""

import sys

import pytest

from parsenip.shared import (
    InvariantViolationError,
    MalformedAttributeError,
    MalformedMarkupError,
    ParseError,
    TreeConfig,
    UnmatchedTagError,
)
from parsenip.tokenization import Token, tokenize
from parsenip.tree import ChildrenKind, Node, TreeBuilder, build_tree


def build(text: str, config: TreeConfig = None) -> Node:
    return build_tree(tokenize(text), config)


class TestBuildTree:
    """Tests for well-formed documents."""

    def test_minimal_round_trip(self):
        """Test a single child with text."""
        root = build("<div><h1>Hi</h1></div>")

        assert root.element == "div"
        assert root.inner is None
        assert root.attributes is None
        assert root.children.kind == ChildrenKind.SINGLE

        heading = root.children.single
        assert heading.element == "h1"
        assert heading.inner == "Hi"
        assert heading.children.kind == ChildrenKind.NONE

    def test_sibling_ordering(self):
        """Test several children keep document order."""
        root = build("<ul><li>A</li><li>B</li></ul>")

        assert root.element == "ul"
        assert root.children.kind == ChildrenKind.MANY
        assert [(li.element, li.inner) for li in root.children] == [("li", "A"), ("li", "B")]

    def test_self_close_purity(self):
        """Test a self-closing element has no children and no text."""
        root = build('<img src="x"/>')

        assert root.element == "img"
        assert root.inner is None
        assert root.children.kind == ChildrenKind.NONE
        assert root.attributes == {"src": ["x"]}

    def test_self_closing_child_takes_no_text(self):
        """Test text after a self-closing child belongs to nobody."""
        root = build("<p><br/>after</p>")
        assert root.inner is None
        assert root.children.single.inner is None

    def test_same_name_nesting(self):
        """Test nested elements of the same name build the right shape."""
        root = build("<div><div><div>x</div></div><div>y</div></div>")

        assert root.children.kind == ChildrenKind.MANY
        first, second = root.children
        assert first.children.single.inner == "x"
        assert second.inner == "y"

    def test_only_leading_text_is_attached(self):
        """Test text after a nested child is dropped."""
        root = build("<p>before<b>x</b>after</p>")
        assert root.inner == "before"
        assert root.children.single.inner == "x"
        assert [node.inner for node in root.iter()] == ["before", "x"]

    def test_attributes_are_parsed(self):
        """Test raw attribute text is split into value words."""
        root = build('<div class="card wide" id=main hidden><p/></div>')
        assert root.attributes == {
            "class": ["card", "wide"],
            "hidden": [],
            "id": ["main"],
        }

    def test_mixed_document(self):
        """Test a document mixing every token kind."""
        root = build(
            "<html><head><title>T</title></head>"
            "<body><h1>Head</h1><ul><li>1</li><li>2</li><li>3</li></ul><hr/></body></html>"
        )
        assert [node.element for node in root.iter()] == [
            "html", "head", "title", "body", "h1", "ul", "li", "li", "li", "hr",
        ]
        body = root.find("body")
        assert len(body.children) == 3
        assert [li.inner for li in root.find_all("li")] == ["1", "2", "3"]

    @pytest.mark.parametrize("text", ["", "   "])
    def test_empty_input_has_no_root(self, text):
        """Test empty input builds nothing and does not fail."""
        assert build(text) is None

    def test_deep_document_does_not_recurse(self):
        """Test nesting deeper than the recursion limit still builds."""
        depth = max(2000, sys.getrecursionlimit() + 500)
        text = "<d>" * depth + "leaf" + "</d>" * depth

        root = build(text)

        assert root.depth() == depth
        assert root.count() == depth
        deepest = list(root.iter())[-1]
        assert deepest.inner == "leaf"


class TestBuildTreeErrors:
    """Tests for rejected token streams."""

    def test_mismatched_close(self):
        """Test a mismatched close never produces a tree."""
        with pytest.raises((UnmatchedTagError, MalformedMarkupError)):
            build("<div><span></div>")

    def test_missing_root_close(self):
        """Test an unclosed root is reported by name."""
        with pytest.raises(UnmatchedTagError, match="<div>"):
            build("<div><p></p>")

    def test_overlapping_tags(self):
        """Test interleaved tags are malformed."""
        with pytest.raises(MalformedMarkupError):
            build("<a><b></a></b>")

    def test_stray_close_inside_element(self):
        """Test a closing tag with no opener is malformed."""
        with pytest.raises(MalformedMarkupError):
            build("<div>x</p></div>")

    @pytest.mark.parametrize("text", ["text<p></p>", "</p><p></p>"])
    def test_document_must_start_with_element(self, text):
        """Test leading text or a leading close is malformed."""
        with pytest.raises(MalformedMarkupError, match="must start with an element"):
            build(text)

    def test_bad_attributes(self):
        """Test attribute failures are tree-building errors."""
        with pytest.raises(MalformedAttributeError):
            build('<div class="open></div>')

    def test_errors_are_parse_errors(self):
        """Test every builder failure shares the ParseError base."""
        for text in ["<div><span></div>", "<a><b></a></b>", "x<p></p>"]:
            with pytest.raises(ParseError):
                build(text)


class TestTreeBuilder:
    """Tests for TreeBuilder configuration and statistics."""

    def test_elements_built(self):
        """Test the builder counts constructed nodes."""
        builder = TreeBuilder()
        builder.build(tokenize("<ul><li>A</li><li>B</li></ul>"))
        assert builder.elements_built == 3
        assert builder.trailing_tokens == 0

    def test_trailing_content_ignored_by_default(self):
        """Test tokens after the root are counted and skipped."""
        builder = TreeBuilder()
        root = builder.build(tokenize("<a></a><b></b>tail"))
        assert root.element == "a"
        assert root.children.kind == ChildrenKind.NONE
        assert builder.trailing_tokens == 3

    def test_trailing_content_rejected_in_strict_mode(self):
        """Test strict mode refuses content after the root."""
        builder = TreeBuilder(TreeConfig(strict_trailing_content=True))
        with pytest.raises(MalformedMarkupError, match="follow the root element"):
            builder.build(tokenize("<a></a><b></b>"))

    def test_max_depth_allows_shallow_documents(self):
        """Test documents within the limit build normally."""
        root = build("<a><b><c/></b></a>", TreeConfig(max_depth=3))
        assert root.depth() == 3

    def test_max_depth_rejects_deep_documents(self):
        """Test documents beyond the limit are rejected."""
        with pytest.raises(MalformedMarkupError, match="maximum depth of 2"):
            build("<a><b><c/></b></a>", TreeConfig(max_depth=2))

    def test_builder_is_reusable(self):
        """Test one builder can build several documents."""
        builder = TreeBuilder()
        assert builder.build(tokenize("<a><b/></a>")).element == "a"
        assert builder.build(tokenize("<c/>")).element == "c"
        assert builder.elements_built == 1

    def test_hand_built_tokens(self):
        """Test the builder accepts tokens not produced by the tokenizer."""
        tokens = [
            Token.open("div", 'id="x"'),
            Token.inner("hello"),
            Token.self_close("br"),
            Token.close("div"),
        ]
        root = TreeBuilder().build(tokens)
        assert root.inner == "hello"
        assert root.get_attribute("id") == "x"
        assert root.children.single.element == "br"

    def test_invariant_violation_is_distinct(self):
        """Test internal errors are a separate ParseError subclass."""
        assert issubclass(InvariantViolationError, ParseError)
        assert not issubclass(InvariantViolationError, MalformedMarkupError)
