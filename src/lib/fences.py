"""
Code fence filename annotation

    ```javascript:example.js

becomes a code node with lang "javascript" and a data-filename property the
renderer shows above the block. Fences without a ':' are left alone, which
also makes a second run over an annotated tree a no-op.
"""

from ..models.tree import CODE, Node
from .log import LOG
from .tree import tree_rewrite

SEPARATOR = ':'


class CodeFenceAnnotator:
    """Tree pass splitting `lang:filename` info strings"""

    def run(self, tree: Node) -> Node:
        return tree_rewrite(tree, self.fence_annotate, {CODE})

    def fence_annotate(self, node: Node) -> None:
        if not node.lang or SEPARATOR not in node.lang:
            return None

        language, filename = node.lang.split(SEPARATOR, 1)
        node.lang = language or None
        if filename:
            properties = dict(node.data.get("hProperties") or {})
            properties["data-filename"] = filename
            node.data["hProperties"] = properties
            LOG(f"Code fence {language!r} labelled {filename!r}", level=3)
        return None
