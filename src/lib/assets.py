"""
Image path resolution

Relative image references in a document are rewritten to the site-wide
image directory of the document's collection:

    ./cat.png   (in news/...)  ->  /images/news/cat.png
    cat.png     (in blog/...)  ->  /images/blog/cat.png
    /img/a.png, https://x/a.png, data:...  ->  unchanged
"""

from pathlib import PurePath
from typing import Optional, Union

from ..models.content import Collection
from ..models.tree import IMAGE, Node
from .log import LOG
from .tree import tree_rewrite
from .urls import url_hasScheme


def collection_infer(source_path: Union[str, PurePath, None]) -> Collection:
    """
    Collection a document belongs to, from its storage path

    Args:
        source_path: Document path; a `/news/` or `/events/` segment
                     selects that collection, anything else is blog

    Example:
        >>> collection_infer("/site/content/news/launch/main.md")
        <Collection.NEWS: 'news'>
    """
    if source_path is None:
        return Collection.BLOG
    path = PurePath(source_path).as_posix() if isinstance(source_path, PurePath) else str(source_path)
    path = path.replace('\\', '/')
    if '/news/' in path:
        return Collection.NEWS
    if '/events/' in path:
        return Collection.EVENTS
    return Collection.BLOG


def imageUrl_resolve(url: Optional[str], collection: Collection) -> Optional[str]:
    """Resolved URL for one image reference (unchanged when absolute)"""
    if not url or url.startswith('/') or url_hasScheme(url):
        return url
    if url.startswith('./'):
        url = url[2:]
    return f"/images/{collection.value}/{url}"


class AssetPathResolver:
    """Tree pass rewriting relative image URLs"""

    def __init__(self, collection: Collection) -> None:
        self.collection = collection

    def run(self, tree: Node) -> Node:
        return tree_rewrite(tree, self.image_resolve, {IMAGE})

    def image_resolve(self, node: Node) -> None:
        resolved = imageUrl_resolve(node.url, self.collection)
        if resolved != node.url:
            LOG(f"Image {node.url} -> {resolved}", level=3)
            node.url = resolved
        return None
