"""
Tree rewriting

All transformation passes are expressed as a visitor handed to
tree_rewrite(). The visitor is called top-down for every node whose type it
targets and returns either None (leave the node as is) or a replacement
node. Replacements are written back into the parent's child list by index
assignment, so sibling order is preserved exactly.

A replacement is never fed back to the same visitor; the walk continues
into the replacement's children instead. Since replacements always carry a
different type than the one the visitor targets, running a pass twice over
the same tree is a no-op.

Example:
    >>> def shout(node):
    ...     return Node(type="text", value=node.value.upper())
    >>> tree_rewrite(tree, shout, {"text"})
"""

from typing import Callable, Collection, List, Optional

from ..models.tree import Node

Visitor = Callable[[Node], Optional[Node]]


def tree_rewrite(node: Node, visitor: Visitor, types: Collection[str]) -> Node:
    """
    Rewrite a subtree with a visitor.

    Args:
        node: Subtree root
        visitor: Called for nodes whose type is in `types`
        types: Node types the visitor targets

    Returns:
        The node to put in place of `node` (itself, or the visitor's
        replacement)
    """
    current = node
    if node.type in types:
        replacement = visitor(node)
        if replacement is not None:
            current = replacement

    if current.children:
        children_rewrite(current.children, visitor, types)
    return current


def children_rewrite(children: List[Node], visitor: Visitor, types: Collection[str]) -> None:
    """Rewrite each child in place, assigning replacements by index"""
    for index in range(len(children)):
        rewritten = tree_rewrite(children[index], visitor, types)
        if rewritten is not children[index]:
            children[index] = rewritten


def nodes_find(node: Node, node_type: str) -> List[Node]:
    """All nodes of a type in document order (pre-order)"""
    found: List[Node] = []
    if node.type == node_type:
        found.append(node)
    for child in node.children or []:
        found.extend(nodes_find(child, node_type))
    return found
