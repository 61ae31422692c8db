"""Breadth-first span planning.

The planner lists every element span under a root in breadth-first discovery
order: the root, then its children in document order, then its grandchildren,
and so on. A parent is always discovered before its children, so walking the
plan backwards visits children before parents. The tree builder relies on this
to assemble nodes without recursion.
"""

from collections import deque
from typing import Deque, Dict, List, NamedTuple, Optional, Sequence

from parsenip.shared import MalformedMarkupError
from parsenip.tokenization import Token, TokenType

from .resolver import find_closing


class Span(NamedTuple):
    """Token extent of one element, closing tag included."""

    start: int
    end: int

    @property
    def is_self_closing(self) -> bool:
        return self.start == self.end


def resolve_span(
    tokens: Sequence[Token],
    start: int,
    closings: Optional[Dict[int, int]] = None
) -> Span:
    """Build the span for the element starting at ``start``.

    ``closings`` memoizes resolver results across calls made for the same
    token sequence.
    """
    if closings is None:
        return Span(start, find_closing(tokens, start))
    end = closings.get(start)
    if end is None:
        end = closings[start] = find_closing(tokens, start)
    return Span(start, end)


def direct_children(
    tokens: Sequence[Token],
    span: Span,
    closings: Optional[Dict[int, int]] = None
) -> List[Span]:
    """List the spans of the elements directly inside ``span``.

    Nested elements are skipped whole, so grandchildren never appear.

    Raises:
        MalformedMarkupError: A closing tag inside the span belongs to no open
            element, or a child element ends after its parent
    """
    children: List[Span] = []
    index = span.start + 1
    while index < span.end:
        token = tokens[index]
        if token.type == TokenType.INNER:
            index += 1
            continue
        if token.type == TokenType.CLOSE:
            raise MalformedMarkupError(
                f"Closing tag </{token.value}> at token {index} does not close "
                f"any element open inside <{tokens[span.start].value}>"
            )

        child = resolve_span(tokens, index, closings)
        if child.end >= span.end:
            raise MalformedMarkupError(
                f"Element <{token.value}> at token {index} overlaps the end of "
                f"<{tokens[span.start].value}> at token {span.end}"
            )
        children.append(child)
        index = child.end + 1

    return children


def plan_spans(
    tokens: Sequence[Token],
    root_start: int,
    max_depth: Optional[int] = None,
    closings: Optional[Dict[int, int]] = None
) -> Deque[Span]:
    """Plan the spans under ``root_start`` in breadth-first discovery order.

    Args:
        tokens: Token sequence in document order
        root_start: Index of the root element's opening token
        max_depth: Levels to descend below the root; ``None`` for unbounded,
            ``0`` for the root alone, ``1`` for the root and its direct children
        closings: Optional resolver memo shared between calls

    Returns:
        The root span followed by its descendants, level by level

    Raises:
        ValueError: ``max_depth`` is negative
        UnmatchedTagError: An element has no closing tag
        InvariantViolationError: ``root_start`` does not start an element
        MalformedMarkupError: Element nesting is impossible
    """
    if max_depth is not None and max_depth < 0:
        raise ValueError("max_depth must be >= 0 or None")

    root = resolve_span(tokens, root_start, closings)
    plan: Deque[Span] = deque([root])
    work: Deque = deque([(root, 0)])

    while work:
        span, level = work.popleft()
        if max_depth is not None and level >= max_depth:
            continue
        for child in direct_children(tokens, span, closings):
            plan.append(child)
            work.append((child, level + 1))

    return plan
