"""
Syntax tree node model

Every document is parsed into a tree of Node objects (mdast-shaped) which the
transformation passes rewrite and the renderer serializes.

Nodes are tagged by their `type` string. Container types carry an ordered
`children` list; leaf types leave `children` as None. A node's children are
owned exclusively by it.

Example:
    For source "Hello *world*":
    Node(type="root", children=[
        Node(type="paragraph", children=[
            Node(type="text", value="Hello "),
            Node(type="emphasis", children=[Node(type="text", value="world")]),
        ])
    ])
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# Parser-produced types
ROOT = "root"
PARAGRAPH = "paragraph"
HEADING = "heading"
TEXT = "text"
EMPHASIS = "emphasis"
STRONG = "strong"
DELETE = "delete"
MARK = "mark"
INLINE_CODE = "inlineCode"
INLINE_MATH = "inlineMath"
MATH = "math"
LINK = "link"
IMAGE = "image"
CODE = "code"
BLOCKQUOTE = "blockquote"
LIST = "list"
LIST_ITEM = "listItem"
THEMATIC_BREAK = "thematicBreak"
BREAK = "break"
HTML = "html"
CONTAINER_DIRECTIVE = "containerDirective"

# Produced by the transformation passes: a generic element whose tag and
# properties come from data["hName"] / data["hProperties"]
CONTAINER = "container"

LEAF_TYPES = frozenset({
    TEXT, INLINE_CODE, INLINE_MATH, MATH, IMAGE, CODE, THEMATIC_BREAK, BREAK, HTML,
})


@dataclass
class Node:
    """
    A node in the document syntax tree

    Attributes:
        type: Node type discriminant (see module constants)
        children: Ordered child nodes for container types, None for leaves
        value: Literal content (text, code, math, raw html)
        url: Target of link/image nodes
        title: Optional title of link/image nodes
        alt: Alternative text of image nodes
        lang: Info-string language of code nodes
        meta: Remainder of the code info string after the language
        name: Directive keyword of containerDirective nodes
        attributes: Directive attributes (string values, unique keys)
        depth: Heading level (1-6)
        ordered: Whether a list is ordered
        data: Renderer hints (hName, hProperties)
        line_number: Source line the node started on (0 if synthetic)
    """
    type: str
    children: Optional[List['Node']] = None
    value: Optional[str] = None
    url: Optional[str] = None
    title: Optional[str] = None
    alt: Optional[str] = None
    lang: Optional[str] = None
    meta: Optional[str] = None
    name: Optional[str] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    depth: Optional[int] = None
    ordered: Optional[bool] = None
    data: Dict[str, Any] = field(default_factory=dict)
    line_number: int = 0

    def __post_init__(self) -> None:
        if self.children is None and self.type not in LEAF_TYPES:
            self.children = []

    def copy(self) -> 'Node':
        """Deep copy of this node and its subtree"""
        return copy.deepcopy(self)

    def text_get(self) -> str:
        """Concatenated literal text of this node's subtree"""
        if self.children is None:
            return self.value or ""
        return "".join(child.text_get() for child in self.children)


def html_make(value: str) -> Node:
    """Build a raw-HTML passthrough node"""
    return Node(type=HTML, value=value)


def text_make(value: str) -> Node:
    """Build a plain text node"""
    return Node(type=TEXT, value=value)


def paragraph_make(*children: Node) -> Node:
    """Build a paragraph wrapping the given inline children"""
    return Node(type=PARAGRAPH, children=list(children))
