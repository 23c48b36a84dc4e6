# src/transformer/tree/core.py
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field


class NodeType(str, Enum):
    """The fixed set of node tags used in the document tree."""
    # Block level
    ROOT = "root"
    FRONT_MATTER = "front_matter"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BLOCKQUOTE = "blockquote"
    LIST = "list"
    LIST_ITEM = "list_item"
    CODE = "code"
    HTML = "html"
    THEMATIC_BREAK = "thematic_break"
    TABLE = "table"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    DEFINITION = "definition"

    # Inline level
    TEXT = "text"
    ESCAPE = "escape"
    SOFTBREAK = "softbreak"
    HARDBREAK = "hardbreak"
    INLINE_CODE = "inline_code"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    DELETE = "delete"
    LINK = "link"
    IMAGE = "image"

    # Anything the builder does not know; emitted verbatim.
    RAW = "raw"


class Node(BaseModel):
    """
    A single element of the document tree.

    The 'type' tag decides which of the optional fields carry meaning:
      - value: string payload (text, html, code, inline_code, escape, front_matter, raw)
      - url / title: link, image and definition targets
      - markup / info: source markers (fence string, emphasis marker, list bullet, code info string)
      - attrs: variant specific extras (heading level, list tightness, table alignment, ...)
    """
    type: NodeType
    value: Optional[str] = None
    url: Optional[str] = None
    title: Optional[str] = None
    markup: str = ""
    info: str = ""
    attrs: Dict[str, Any] = Field(default_factory=dict)
    children: List['Node'] = Field(default_factory=list)


NodePredicate = Union[NodeType, Iterable[NodeType], Callable[[Node], bool]]
VisitCallback = Callable[[Node, Optional[Node]], None]


def _as_matcher(predicate: NodePredicate) -> Callable[[Node], bool]:
    if isinstance(predicate, NodeType):
        return lambda node: node.type == predicate
    if callable(predicate):
        return predicate
    wanted = set(predicate)
    return lambda node: node.type in wanted


def visit(tree: Node, predicate: NodePredicate, callback: VisitCallback) -> None:
    """
    Depth-first, pre-order traversal of 'tree'.

    Calls callback(node, parent) for every node matching 'predicate', which is a
    NodeType, a collection of NodeTypes or a callable taking a Node.
    Children are read after the callback ran, so callbacks must not reshape the tree.
    """
    matches = _as_matcher(predicate)
    stack: List[tuple] = [(tree, None)]
    while stack:
        node, parent = stack.pop()
        if matches(node):
            callback(node, parent)
        # Reversed so the left-most child is handled first.
        for child in reversed(node.children):
            stack.append((child, node))


def collect(tree: Node, predicate: NodePredicate) -> List[Node]:
    """Returns all matching nodes in document order."""
    found: List[Node] = []
    visit(tree, predicate, lambda node, _parent: found.append(node))
    return found
