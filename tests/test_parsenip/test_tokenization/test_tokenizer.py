"""Tests for markup tokenization."""

import pytest

from parsenip.shared import (
    EmptyTagError,
    LexError,
    ParseError,
    TokenizationConfig,
    UnterminatedTagError,
)
from parsenip.tokenization import (
    MarkupTokenizer,
    ScannerState,
    Token,
    TokenType,
    tokenize,
)


class TestToken:
    """Tests for the Token value type."""

    def test_constructors_set_type_and_value(self):
        """Test each constructor produces the matching token type."""
        assert Token.open("div", 'id="a"') == Token(TokenType.OPEN, "div", 'id="a"')
        assert Token.close("div") == Token(TokenType.CLOSE, "div")
        assert Token.self_close("br") == Token(TokenType.SELF_CLOSE, "br", "")
        assert Token.inner("hi") == Token(TokenType.INNER, "hi")

    def test_element_start(self):
        """Test only open and self-closing tokens start elements."""
        assert Token.open("p").is_element_start
        assert Token.self_close("img").is_element_start
        assert not Token.close("p").is_element_start
        assert not Token.inner("text").is_element_start

    def test_str_rendering(self):
        """Test tokens render in a readable variant form."""
        assert str(Token.open("div", "")) == "Open('div', '')"
        assert str(Token.close("div")) == "Close('div')"
        assert str(Token.self_close("img", 'src="x"')) == "SelfClose('img', 'src=\"x\"')"
        assert str(Token.inner("Hi")) == "Inner('Hi')"

    def test_tokens_are_immutable(self):
        """Test tokens cannot be modified after creation."""
        token = Token.open("div")
        with pytest.raises(AttributeError):
            token.value = "span"  # type: ignore[misc]


class TestTokenize:
    """Tests for the scanner."""

    def test_minimal_document(self):
        """Test nested elements with text."""
        assert tokenize("<div><h1>Hi</h1></div>") == [
            Token.open("div", ""),
            Token.open("h1", ""),
            Token.inner("Hi"),
            Token.close("h1"),
            Token.close("div"),
        ]

    def test_self_closing_tag_with_attributes(self):
        """Test the trailing slash is stripped before splitting."""
        assert tokenize('<img src="x"/>') == [Token.self_close("img", 'src="x"')]

    def test_self_closing_tag_with_space_before_slash(self):
        """Test whitespace before the slash is not part of the attributes."""
        assert tokenize("<br />") == [Token.self_close("br", "")]

    def test_open_tag_attributes_are_raw(self):
        """Test attribute text is kept unparsed after the element name."""
        tokens = tokenize('<a href="/x" class="big  red">go</a>')
        assert tokens[0] == Token.open("a", 'href="/x" class="big  red"')

    def test_closing_tag_name_is_trimmed(self):
        """Test whitespace inside a closing tag is ignored."""
        assert tokenize("<p></ p >")[1] == Token.close("p")

    def test_siblings(self):
        """Test sibling elements keep document order."""
        assert tokenize("<ul><li>A</li><li>B</li></ul>") == [
            Token.open("ul"),
            Token.open("li"),
            Token.inner("A"),
            Token.close("li"),
            Token.open("li"),
            Token.inner("B"),
            Token.close("li"),
            Token.close("ul"),
        ]

    def test_text_after_nested_child_is_tokenized(self):
        """Test every text run becomes its own token."""
        assert tokenize("<p>before<b>x</b>after</p>") == [
            Token.open("p"),
            Token.inner("before"),
            Token.open("b"),
            Token.inner("x"),
            Token.close("b"),
            Token.inner("after"),
            Token.close("p"),
        ]

    def test_input_is_trimmed(self):
        """Test surrounding whitespace never becomes text."""
        assert tokenize("  \n<p>x</p>\n  ") == [
            Token.open("p"),
            Token.inner("x"),
            Token.close("p"),
        ]

    def test_trailing_text_is_flushed(self):
        """Test text after the last tag is kept as a final token."""
        assert tokenize("<br/>tail") == [Token.self_close("br"), Token.inner("tail")]

    def test_greater_than_outside_tag_is_text(self):
        """Test a stray > in text does not close anything."""
        assert tokenize("<p>a > b</p>")[1] == Token.inner("a > b")
        assert tokenize("<p>></p>") == [Token.open("p"), Token.inner(">"), Token.close("p")]

    def test_less_than_inside_tag_is_dropped(self):
        """Test a second < inside an open tag is ignored."""
        assert tokenize("<p<>x</p>")[0] == Token.open("p")

    @pytest.mark.parametrize("text", ["", "   ", "\n\t  \n"])
    def test_empty_input(self, text):
        """Test empty or whitespace-only input yields no tokens."""
        assert tokenize(text) == []

    def test_deterministic(self):
        """Test identical input always yields identical tokens."""
        text = '<div class="a"><p>one</p><img src="x"/>two</div>'
        assert tokenize(text) == tokenize(text)


class TestTokenizeErrors:
    """Tests for tokenizer failures."""

    def test_unterminated_tag(self):
        """Test input ending inside a tag is rejected."""
        with pytest.raises(UnterminatedTagError, match="never terminated") as exc_info:
            tokenize("<div><p")
        assert exc_info.value.offset == 5

    def test_unterminated_tag_is_a_lex_error(self):
        """Test tokenizer failures are not tree-building failures."""
        with pytest.raises(LexError) as exc_info:
            tokenize("<div")
        assert not isinstance(exc_info.value, ParseError)

    @pytest.mark.parametrize("text", ["<>", "</>", "<p><  /></p>", "< >"])
    def test_empty_tag_name(self, text):
        """Test tags without a name are rejected."""
        with pytest.raises(EmptyTagError, match="has no name"):
            tokenize(text)


class TestMarkupTokenizer:
    """Tests for tokenizer configuration."""

    def test_default_config(self):
        """Test the tokenizer defaults to trimming and keeping whitespace text."""
        tokenizer = MarkupTokenizer()
        assert tokenizer.config.trim_input is True
        assert tokenizer.config.drop_whitespace_text is False

    def test_whitespace_text_kept_by_default(self):
        """Test indentation between tags is a text token by default."""
        tokens = MarkupTokenizer().tokenize("<ul>\n  <li>A</li>\n</ul>")
        assert tokens[1] == Token.inner("\n  ")

    def test_drop_whitespace_text(self):
        """Test whitespace-only runs can be dropped."""
        config = TokenizationConfig(drop_whitespace_text=True)
        tokens = MarkupTokenizer(config).tokenize("<ul>\n  <li> A </li>\n</ul>")
        assert tokens == [
            Token.open("ul"),
            Token.open("li"),
            Token.inner(" A "),
            Token.close("li"),
            Token.close("ul"),
        ]

    def test_trim_disabled(self):
        """Test surrounding whitespace is text when trimming is off."""
        config = TokenizationConfig(trim_input=False)
        tokens = MarkupTokenizer(config).tokenize(" <br/> ")
        assert tokens == [Token.inner(" "), Token.self_close("br"), Token.inner(" ")]

    def test_scanner_states(self):
        """Test the scanner exposes exactly two states."""
        assert {state.name for state in ScannerState} == {"OUTSIDE", "INSIDE_TAG"}
