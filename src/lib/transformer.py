"""
Document transformation pipeline

Chains the tree passes in their fixed order over one freshly parsed tree:

    1. EmbedResolver         bare-URL paragraphs -> embed cards
    2. DirectiveResolver     :::directives (+ literal audio fallback)
    3. CodeFenceAnnotator    ```lang:filename
    4. AssetPathResolver     relative image URLs -> /images/<collection>/

The passes target disjoint node kinds, so the order only matters for nodes
a pass synthesizes (e.g. callout icons are never embed candidates).

Example:
    >>> tree = Parser(source).parse()
    >>> transform(tree, "content/news/launch/main.md", storagesettings)
    >>> html = Renderer().render(tree)
"""

from pathlib import PurePath
from typing import Any, Dict, Optional, Union

from ..config.settings import StorageSettings
from ..models.content import Collection
from ..models.tree import Node
from .assets import AssetPathResolver, collection_infer
from .directives import DirectiveResolver
from .embeds import EmbedResolver
from .fences import CodeFenceAnnotator
from .log import LOG


class Transformer:
    """
    Ordered chain of transformation passes for one document

    Args:
        config: Storage settings threaded into URL construction
        collection: Collection used for image path resolution
    """

    def __init__(self, config: StorageSettings, collection: Collection = Collection.BLOG) -> None:
        self.config = config
        self.collection = collection
        self.embeds = EmbedResolver()
        self.directives = DirectiveResolver(config)
        self.fences = CodeFenceAnnotator()
        self.assets = AssetPathResolver(collection)
        self.passes = [self.embeds, self.directives, self.fences, self.assets]

    def run(self, tree: Node) -> Node:
        """Apply every pass in order; the tree is mutated and returned"""
        for stage in self.passes:
            LOG(f"Running {type(stage).__name__}", level=3)
            tree = stage.run(tree)
        return tree

    def stats_get(self) -> Dict[str, Any]:
        return {
            'collection': self.collection.value,
            'embeds': self.embeds.embed_count,
            'directives': self.directives.resolved_count,
        }


def transform(
    tree: Node,
    source_path: Union[str, PurePath, None],
    config: StorageSettings,
    collection: Optional[Collection] = None,
) -> Node:
    """
    Transform a parsed document tree in place

    Args:
        tree: Root node from the parser
        source_path: Document storage path, used to infer the collection
        config: Storage settings for download/audio URLs
        collection: Explicit collection, overrides inference

    Returns:
        The transformed root (same object as `tree`)
    """
    return Transformer(config, collection or collection_infer(source_path)).run(tree)
