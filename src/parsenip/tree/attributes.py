"""Attribute parsing for raw tag text.

Turns the text after an element name, such as ``class="image square" id=dog``,
into a mapping from attribute name to the whitespace-separated words of its
value: ``{"class": ["image", "square"], "id": ["dog"]}``.

Values may be single- or double-quoted. There are no escape sequences; a quoted
value may contain the other quote character. A name without ``=`` is a boolean
attribute and maps to an empty list. A repeated name extends its list.
"""

from typing import Dict, List, Optional

from parsenip.shared import MalformedAttributeError

QUOTES = ("'", '"')
EQUALS = "="


def _skip_whitespace(raw: str, index: int) -> int:
    while index < len(raw) and raw[index].isspace():
        index += 1
    return index


def _read_word(raw: str, index: int) -> int:
    """Return the index just past an unquoted run of characters."""
    while index < len(raw) and not raw[index].isspace() and raw[index] != EQUALS:
        index += 1
    return index


def parse_attributes(raw: str) -> Optional[Dict[str, List[str]]]:
    """Parse raw attribute text.

    Args:
        raw: Text following the element name inside a tag

    Returns:
        Attribute names (sorted) mapped to value words, or ``None`` when
        ``raw`` is empty or whitespace

    Raises:
        MalformedAttributeError: Unterminated quote, ``=`` without a name, or
            ``=`` without a value
    """
    if not raw or not raw.strip():
        return None

    attributes: Dict[str, List[str]] = {}
    index = _skip_whitespace(raw, 0)

    while index < len(raw):
        if raw[index] == EQUALS:
            raise MalformedAttributeError(raw, f"'=' without a name at {index}")
        if raw[index] in QUOTES:
            raise MalformedAttributeError(raw, f"quoted text without a name at {index}")

        key_end = _read_word(raw, index)
        key = raw[index:key_end]
        values = attributes.setdefault(key, [])
        index = _skip_whitespace(raw, key_end)

        if index >= len(raw) or raw[index] != EQUALS:
            continue

        index = _skip_whitespace(raw, index + 1)
        if index >= len(raw):
            raise MalformedAttributeError(raw, f"attribute {key!r} has no value")

        if raw[index] in QUOTES:
            quote = raw[index]
            closing = raw.find(quote, index + 1)
            if closing == -1:
                raise MalformedAttributeError(
                    raw, f"unterminated {quote} quote in attribute {key!r}"
                )
            values.extend(raw[index + 1:closing].split())
            index = closing + 1
        else:
            if raw[index] == EQUALS:
                raise MalformedAttributeError(raw, f"attribute {key!r} has no value")
            value_end = _read_word(raw, index)
            values.append(raw[index:value_end])
            index = value_end

        index = _skip_whitespace(raw, index)

    return dict(sorted(attributes.items()))
