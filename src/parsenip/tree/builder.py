"""Stack-free tree assembly.

The builder never recurses. It asks the planner for every element span in
breadth-first discovery order and consumes that plan from the back, so the
deepest, most recently discovered elements are built first. Each finished node
is parked in a table keyed by its span start until its parent claims it::

    div  (a)                  plan:    a b g c d h e f
        div  (b)              build:   f e h d c g b a
            h1  (c)
            ul  (d)
                li  (e)
                li  (f)
        p  (g)
            a  (h)

By the time a span is built, the spans of all of its direct children have
already been built and are waiting in the table.
"""

from typing import Dict, List, Optional, Sequence

from parsenip.shared import (
    InvariantViolationError,
    MalformedMarkupError,
    TreeConfig,
    get_logger,
)
from parsenip.tokenization import Token, TokenType

from .attributes import parse_attributes
from .node import Children, Node, Tag
from .planner import Span, direct_children, plan_spans


class TreeBuilder:
    """Assembles a token sequence into a single rooted ``Node`` tree."""

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Tree building configuration
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or TreeConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")

        self.elements_built = 0
        self.trailing_tokens = 0

    def build(self, tokens: Sequence[Token]) -> Optional[Node]:
        """Build the element tree for ``tokens``.

        Args:
            tokens: Token sequence from the tokenizer

        Returns:
            The root node, or ``None`` for an empty token sequence

        Raises:
            MalformedMarkupError: The document does not start with an element,
                nesting is impossible, trailing content is present in strict
                mode, or the depth limit is exceeded
            UnmatchedTagError: An element has no closing tag
            InvariantViolationError: Internal planner/builder mismatch
        """
        self.elements_built = 0
        self.trailing_tokens = 0

        if not tokens:
            self.logger.debug("No tokens provided - no root element")
            return None

        first = tokens[0]
        if not first.is_element_start:
            raise MalformedMarkupError(
                f"Document must start with an element, found {first}"
            )

        closings: Dict[int, int] = {}
        plan = plan_spans(tokens, 0, closings=closings)
        self._check_trailing(tokens, plan[0])

        nodes: Dict[int, Node] = {}
        heights: Dict[int, int] = {}

        while plan:
            span = plan.pop()
            child_spans = direct_children(tokens, span, closings)
            children: List[Node] = []
            height = 0
            for child in child_spans:
                if child.start not in nodes:
                    raise InvariantViolationError(
                        f"child at token {child.start} of span {tuple(span)} "
                        "was not built before its parent"
                    )
                children.append(nodes.pop(child.start))
                height = max(height, heights.pop(child.start))

            height += 1
            if self.config.max_depth is not None and height > self.config.max_depth:
                raise MalformedMarkupError(
                    f"Document nesting exceeds the maximum depth of "
                    f"{self.config.max_depth} at token {span.start}"
                )

            nodes[span.start] = Node(
                self._make_tag(tokens, span), Children.of(children)
            )
            heights[span.start] = height
            self.elements_built += 1

        root = nodes.pop(0, None)
        if root is None or nodes:
            raise InvariantViolationError(
                f"expected only the root to remain, found {sorted(nodes)}"
            )

        self.logger.debug(
            "Tree building completed",
            extra={
                "token_count": len(tokens),
                "element_count": self.elements_built,
                "depth": heights[0],
            }
        )
        return root

    def _check_trailing(self, tokens: Sequence[Token], root: Span) -> None:
        self.trailing_tokens = len(tokens) - root.end - 1
        if not self.trailing_tokens:
            return
        if self.config.strict_trailing_content:
            raise MalformedMarkupError(
                f"{self.trailing_tokens} tokens follow the root element "
                f"closed at token {root.end}"
            )
        self.logger.warning(
            "Ignoring content after the root element",
            extra={"trailing_tokens": self.trailing_tokens, "root_end": root.end}
        )

    def _make_tag(self, tokens: Sequence[Token], span: Span) -> Tag:
        opening = tokens[span.start]
        if not opening.is_element_start:
            raise InvariantViolationError(
                f"span {tuple(span)} does not start with an element token"
            )

        # Only the text directly after the opening tag belongs to the element.
        inner = None
        if span.end > span.start:
            following = tokens[span.start + 1]
            if following.type == TokenType.INNER:
                inner = following.value

        return Tag(
            element=opening.value,
            inner=inner,
            attributes=parse_attributes(opening.raw_attributes),
        )


def build_tree(
    tokens: Sequence[Token], config: Optional[TreeConfig] = None
) -> Optional[Node]:
    """Build the element tree for ``tokens`` with a throwaway ``TreeBuilder``."""
    return TreeBuilder(config).build(tokens)
