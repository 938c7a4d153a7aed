"""
Directive specification and metadata models

Defines the closed set of recognised container directives, their categories,
and the transient descriptor extracted from a containerDirective node.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .tree import Node


class DirectiveName(Enum):
    """
    Recognised directive keywords

    Adding a member here without registering a handler in DirectiveRegistry
    is caught when the registry is constructed.
    """
    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"
    SUCCESS = "success"
    SLIDER = "slider"
    DOWNLOAD = "download"
    AUDIO = "audio"

    @classmethod
    def lookup(cls, name: Optional[str]) -> Optional['DirectiveName']:
        """Map a directive keyword to its member, None for unknown names"""
        try:
            return cls(name)
        except ValueError:
            return None


class DirectiveCategory(Enum):
    """
    Categories of directives

    Determines how a handler treats the directive body.
    """
    CALLOUT = "callout"     # :::info, :::warning ... additive, body preserved
    LAYOUT = "layout"       # :::slider additive, body preserved
    WIDGET = "widget"       # :::download, :::audio destructive, body discarded


# Icon glyph shown at the top of each callout box
CALLOUT_ICONS: Dict[DirectiveName, str] = {
    DirectiveName.INFO: 'ℹ️',
    DirectiveName.WARNING: '⚠️',
    DirectiveName.DANGER: '❌',
    DirectiveName.SUCCESS: '✅',
}


@dataclass
class DirectiveDescriptor:
    """
    Transient view of a containerDirective node

    Attributes:
        name: The directive keyword (e.g., "info", "download")
        attributes: Attribute mapping, string values, unique keys
        children: The directive body (the node's own child list)

    Example:
        For source ':::download{file="a.pdf"}\\n:::'
        DirectiveDescriptor(name="download", attributes={"file": "a.pdf"}, children=[])
    """
    name: str
    attributes: Dict[str, str]
    children: List['Node']

    @classmethod
    def fromNode(cls, node: 'Node') -> 'DirectiveDescriptor':
        return cls(
            name=node.name or "",
            attributes=dict(node.attributes),
            children=node.children if node.children is not None else [],
        )

    @property
    def kind(self) -> Optional[DirectiveName]:
        return DirectiveName.lookup(self.name)


@dataclass
class DirectiveSpec:
    """
    Specification for a recognised directive

    Attributes:
        name: Directive keyword
        category: Category for organization
        description: Human-readable description
        handler: Rewrite function (descriptor, resolver) -> replacement Node
        examples: Example usage strings
    """
    name: DirectiveName
    category: DirectiveCategory
    description: str
    handler: Callable
    examples: List[str] = field(default_factory=list)
