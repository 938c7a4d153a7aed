"""
Tree model and rewrite tests
"""

from blogmark.lib.tree import nodes_find, tree_rewrite
from blogmark.models.tree import Node, html_make, paragraph_make, text_make


class TestNode:
    """Test Node defaults and helpers"""

    def test_leaf_has_no_children(self):
        assert text_make("x").children is None
        assert html_make("<br>").children is None

    def test_container_gets_empty_children(self):
        assert Node(type="paragraph").children == []
        assert Node(type="containerDirective").children == []

    def test_text_get(self):
        node = paragraph_make(text_make("a"), Node(type="strong", children=[text_make("b")]))
        assert node.text_get() == "ab"

    def test_copy_is_deep(self):
        node = paragraph_make(text_make("a"))
        clone = node.copy()
        clone.children[0].value = "changed"
        assert node.children[0].value == "a"


class TestTreeRewrite:
    """Test tree_rewrite()"""

    def test_replacement_by_index(self):
        root = Node(type="root", children=[
            paragraph_make(text_make("a")),
            html_make("<hr>"),
            paragraph_make(text_make("b")),
        ])

        def to_html(node):
            return html_make(f"<p>{node.text_get()}</p>")

        tree_rewrite(root, to_html, {"paragraph"})
        assert [node.value for node in root.children] == ["<p>a</p>", "<hr>", "<p>b</p>"]

    def test_none_leaves_node(self):
        node = paragraph_make(text_make("a"))
        root = Node(type="root", children=[node])
        tree_rewrite(root, lambda n: None, {"paragraph"})
        assert root.children[0] is node

    def test_replacement_not_revisited(self):
        calls = []

        def wrap(node):
            calls.append(node)
            return Node(type="container", children=[Node(type="containerDirective", name="inner")]) \
                if node.name == "outer" else Node(type="container")

        root = Node(type="root", children=[Node(type="containerDirective", name="outer")])
        tree_rewrite(root, wrap, {"containerDirective"})
        # outer, then the inner directive inside its replacement; never the replacement itself
        assert [node.name for node in calls] == ["outer", "inner"]
        assert root.children[0].children[0].type == "container"

    def test_root_replacement_returned(self):
        root = paragraph_make(text_make("a"))
        result = tree_rewrite(root, lambda n: html_make("x"), {"paragraph"})
        assert result.type == "html"


class TestNodesFind:
    """Test nodes_find()"""

    def test_preorder(self):
        root = Node(type="root", children=[
            paragraph_make(text_make("1")),
            Node(type="blockquote", children=[paragraph_make(text_make("2"))]),
        ])
        assert [node.text_get() for node in nodes_find(root, "paragraph")] == ["1", "2"]
