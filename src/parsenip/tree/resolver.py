"""Closing-tag resolution.

Matches an element-starting token to the token that ends it, counting nested
elements of the same name so that ``<div><div></div></div>`` pairs the outer
``div`` with the second ``</div>``.
"""

from typing import Sequence

from parsenip.shared import InvariantViolationError, UnmatchedTagError
from parsenip.tokenization import Token, TokenType


def find_closing(tokens: Sequence[Token], open_index: int) -> int:
    """Find the index of the token closing the element started at ``open_index``.

    Args:
        tokens: Token sequence in document order
        open_index: Index of an ``OPEN`` or ``SELF_CLOSE`` token

    Returns:
        Index of the matching ``CLOSE`` token, or ``open_index`` itself for a
        self-closing tag

    Raises:
        UnmatchedTagError: No matching close exists in the rest of the stream
        InvariantViolationError: ``open_index`` does not start an element
    """
    if not 0 <= open_index < len(tokens):
        raise InvariantViolationError(
            f"token index {open_index} is outside a stream of {len(tokens)} tokens"
        )

    opening = tokens[open_index]
    if opening.type == TokenType.SELF_CLOSE:
        return open_index
    if opening.type != TokenType.OPEN:
        raise InvariantViolationError(
            f"expected an opening token at {open_index}, found {opening}"
        )

    name = opening.value
    depth = 0
    for index in range(open_index + 1, len(tokens)):
        token = tokens[index]
        if token.value != name:
            continue
        if token.type == TokenType.OPEN:
            depth += 1
        elif token.type == TokenType.CLOSE:
            if depth == 0:
                return index
            depth -= 1

    raise UnmatchedTagError(name, open_index)
