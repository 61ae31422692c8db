"""Element tree data model.

A ``Node`` owns its children outright and keeps no reference to its parent.
Traversal helpers use explicit stacks and queues so that arbitrarily deep
trees can be walked without exhausting the interpreter's call stack.
"""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Tag:
    """The information relating to a single element.

    ``<h1 id="header">Hello world</h1>`` yields
    ``Tag(element="h1", inner="Hello world", attributes={"id": ["header"]})``.
    """

    element: str
    inner: Optional[str] = None
    attributes: Optional[Dict[str, List[str]]] = None

    def __post_init__(self) -> None:
        if not self.element:
            raise ValueError("Tag element cannot be empty")

    def __hash__(self) -> int:
        attributes = None
        if self.attributes is not None:
            attributes = tuple((key, tuple(values)) for key, values in self.attributes.items())
        return hash((self.element, self.inner, attributes))


class ChildrenKind(Enum):
    """How many direct children a node has."""

    NONE = auto()
    SINGLE = auto()
    MANY = auto()


@dataclass(frozen=True)
class Children:
    """Direct children of a node, tagged by count."""

    kind: ChildrenKind = ChildrenKind.NONE
    nodes: Tuple["Node", ...] = ()

    def __post_init__(self) -> None:
        expected = Children._kind_for(len(self.nodes))
        if self.kind != expected:
            raise ValueError(
                f"{self.kind.name} children cannot hold {len(self.nodes)} nodes"
            )

    @staticmethod
    def _kind_for(count: int) -> ChildrenKind:
        if count == 0:
            return ChildrenKind.NONE
        if count == 1:
            return ChildrenKind.SINGLE
        return ChildrenKind.MANY

    @classmethod
    def of(cls, nodes: Sequence["Node"]) -> "Children":
        """Wrap ``nodes`` in the variant matching their count."""
        return cls(cls._kind_for(len(nodes)), tuple(nodes))

    @property
    def single(self) -> Optional["Node"]:
        """The only child for ``SINGLE``, otherwise ``None``."""
        if self.kind == ChildrenKind.SINGLE:
            return self.nodes[0]
        return None

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator["Node"]:
        return iter(self.nodes)

    def __bool__(self) -> bool:
        return self.kind != ChildrenKind.NONE

    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True, eq=False, repr=False)
class Node:
    """A built element: its tag plus zero, one, or many owned children.

    Equality compares whole subtrees with an explicit stack. Nodes are not
    hashable, and ``repr`` describes only this node, not its descendants.
    """

    tag: Tag
    children: Children = field(default_factory=Children)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        stack = [(self, other)]
        while stack:
            left, right = stack.pop()
            if left is right:
                continue
            if left.tag != right.tag or len(left.children) != len(right.children):
                return False
            stack.extend(zip(left.children.nodes, right.children.nodes))
        return True

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Node(element={self.element!r}, inner={self.inner!r}, "
            f"attributes={self.attributes!r}, "
            f"children={self.children.kind.name}[{len(self.children)}])"
        )

    @property
    def element(self) -> str:
        return self.tag.element

    @property
    def inner(self) -> Optional[str]:
        return self.tag.inner

    @property
    def attributes(self) -> Optional[Dict[str, List[str]]]:
        return self.tag.attributes

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get an attribute's values joined with single spaces."""
        if not self.tag.attributes or name not in self.tag.attributes:
            return default
        return " ".join(self.tag.attributes[name])

    def iter(self) -> Iterator["Node"]:
        """Yield this node and every descendant in document order."""
        stack: List[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children.nodes))

    def find(self, element: str) -> Optional["Node"]:
        """Find the first node (this one included) with a matching element name."""
        return next((node for node in self.iter() if node.element == element), None)

    def find_all(self, element: str) -> List["Node"]:
        """Find all nodes (this one included) with a matching element name."""
        return [node for node in self.iter() if node.element == element]

    def count(self) -> int:
        """Number of nodes in this subtree."""
        return sum(1 for _ in self.iter())

    def depth(self) -> int:
        """Number of levels in this subtree; a leaf has depth 1."""
        levels = 0
        frontier: deque = deque([self])
        while frontier:
            levels += 1
            for _ in range(len(frontier)):
                frontier.extend(frontier.popleft().children.nodes)
        return levels

    def to_dict(self) -> Dict[str, Any]:
        """Convert the subtree to a nested dictionary.

        The result nests as deeply as the tree; use ``to_records`` when it
        will be serialized.
        """
        root = _node_dict(self)
        stack = [(self, root)]
        while stack:
            node, data = stack.pop()
            if node.children:
                child_dicts = [_node_dict(child) for child in node.children]
                data["children"] = child_dicts
                stack.extend(zip(node.children.nodes, child_dicts))
        return root

    def to_records(self) -> List[Dict[str, Any]]:
        """Flatten the subtree into document-ordered records.

        Each record holds the node's fields plus ``parent``, the list index of
        its parent record (``None`` for this node). The result has constant
        nesting however deep the tree is, so it is safe to hand to ``json``.
        """
        records: List[Dict[str, Any]] = []
        stack: List[Tuple[Node, Optional[int]]] = [(self, None)]
        while stack:
            node, parent = stack.pop()
            record = _node_dict(node)
            record["parent"] = parent
            index = len(records)
            records.append(record)
            stack.extend((child, index) for child in reversed(node.children.nodes))
        return records

    def outline(self, indent: str = "  ") -> str:
        """Render the subtree as an indented outline, one element per line."""
        lines = []
        stack = [(self, 0)]
        while stack:
            node, level = stack.pop()
            line = f"{indent * level}{node.element}"
            if node.attributes:
                attrs = " ".join(
                    f'{key}="{" ".join(values)}"' if values else key
                    for key, values in node.attributes.items()
                )
                line += f" [{attrs}]"
            if node.inner is not None:
                line += f": {node.inner!r}"
            lines.append(line)
            stack.extend((child, level + 1) for child in reversed(node.children.nodes))
        return "\n".join(lines)


def _node_dict(node: Node) -> Dict[str, Any]:
    data: Dict[str, Any] = {"element": node.element}
    if node.inner is not None:
        data["inner"] = node.inner
    if node.attributes is not None:
        data["attributes"] = {key: list(values) for key, values in node.attributes.items()}
    return data
