"""Tree building engine for parsenip.

Key Components:
    TreeBuilder: Stack-free assembly of tokens into a rooted Node tree
    Node, Tag, Children, ChildrenKind: The element tree data model
    find_closing: Nesting-aware closing-tag resolver
    plan_spans, direct_children, Span: Breadth-first span planning
    parse_attributes: Raw attribute text to name/value-words mapping
"""

from .attributes import parse_attributes
from .builder import TreeBuilder, build_tree
from .node import Children, ChildrenKind, Node, Tag
from .planner import Span, direct_children, plan_spans, resolve_span
from .resolver import find_closing

__all__ = [
    "Children",
    "ChildrenKind",
    "Node",
    "Span",
    "Tag",
    "TreeBuilder",
    "build_tree",
    "direct_children",
    "find_closing",
    "parse_attributes",
    "plan_spans",
    "resolve_span",
]
