"""
Image path resolution tests
"""

import pytest

from blogmark.lib.assets import AssetPathResolver, collection_infer, imageUrl_resolve
from blogmark.lib.parser import Parser
from blogmark.lib.tree import nodes_find
from blogmark.models.content import Collection


class TestCollectionInference:
    """Test collection_infer()"""

    @pytest.mark.parametrize("path,collection", [
        ("/site/content/news/launch/main.md", Collection.NEWS),
        ("/site/content/events/meetup/main.md", Collection.EVENTS),
        ("/site/content/blog/hello/main.md", Collection.BLOG),
        ("/elsewhere/post.md", Collection.BLOG),
        ("C:\\site\\news\\launch\\main.md", Collection.NEWS),
        (None, Collection.BLOG),
    ])
    def test_infer(self, path, collection):
        assert collection_infer(path) == collection


class TestImageUrlResolve:
    """Test imageUrl_resolve()"""

    @pytest.mark.parametrize("url,expected", [
        ("./cat.png", "/images/news/cat.png"),
        ("cat.png", "/images/news/cat.png"),
        ("sub/cat.png", "/images/news/sub/cat.png"),
        ("/img/cat.png", "/img/cat.png"),
        ("https://x.org/cat.png", "https://x.org/cat.png"),
        ("http://x.org/cat.png", "http://x.org/cat.png"),
        ("data:image/png;base64,iVBORw0KGgo=", "data:image/png;base64,iVBORw0KGgo="),
        ("blob:abc", "blob:abc"),
        ("httpd-diagram.png", "/images/news/httpd-diagram.png"),
        ("", ""),
    ])
    def test_resolve(self, url, expected):
        assert imageUrl_resolve(url, Collection.NEWS) == expected


class TestAssetPathResolver:
    """Test the tree pass"""

    def test_rewrites_images_in_tree(self):
        tree = Parser("![a](./a.png)\n\n:::slider\n![b](b.png)\n:::", strict=False).parse()
        AssetPathResolver(Collection.EVENTS).run(tree)
        urls = [node.url for node in nodes_find(tree, "image")]
        assert urls == ["/images/events/a.png", "/images/events/b.png"]

    def test_links_untouched(self):
        tree = Parser("[doc](./doc.pdf)", strict=False).parse()
        AssetPathResolver(Collection.BLOG).run(tree)
        assert tree.children[0].children[0].url == "./doc.pdf"

    def test_second_run_is_noop(self):
        tree = Parser("![a](./a.png)", strict=False).parse()
        resolver = AssetPathResolver(Collection.BLOG)
        resolver.run(tree)
        resolver.run(tree)
        assert nodes_find(tree, "image")[0].url == "/images/blog/a.png"

    def test_data_image_in_tree_untouched(self):
        tree = Parser("![dot](data:image/png;base64,iVBORw0KGgo=)", strict=False).parse()
        AssetPathResolver(Collection.BLOG).run(tree)
        assert nodes_find(tree, "image")[0].url == "data:image/png;base64,iVBORw0KGgo="
