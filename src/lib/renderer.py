"""
HTML serialization of a transformed tree

Turns every node type the parser and the transformation passes produce into
HTML. Raw `html` nodes are passed through untouched; `container` nodes are
rendered from their data["hName"] / data["hProperties"] hints.

Code blocks are syntax highlighted with Pygments. A `data-filename`
property (set by the code fence annotator) adds a filename header above
the block.
"""

from html import escape
from typing import Any, Callable, Dict, List, Optional

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, TextLexer
from pygments.util import ClassNotFound

from ..models.tree import Node
from .lexer import get_lexer
from .log import LOG


def properties_render(properties: Dict[str, Any]) -> str:
    """
    Serialize an hProperties mapping to an attribute string

    `className` lists become `class`; boolean True becomes a bare
    attribute; None/False are dropped.

    Example:
        >>> properties_render({"className": ["a", "b"], "data-slider": "true"})
        ' class="a b" data-slider="true"'
    """
    parts: List[str] = []
    for key, value in properties.items():
        if value is None or value is False:
            continue
        name = 'class' if key == 'className' else key
        if isinstance(value, (list, tuple)):
            value = " ".join(str(item) for item in value)
        if value is True:
            parts.append(f' {name}')
        else:
            parts.append(f' {name}="{escape(str(value))}"')
    return ''.join(parts)


class Renderer:
    """
    Serializes a Node tree to an HTML string

    Args:
        pygments_style: Pygments style name (defaults to appsettings)
        noclasses: Inline styles instead of CSS classes (defaults to appsettings)
    """

    def __init__(self, pygments_style: Optional[str] = None, noclasses: Optional[bool] = None) -> None:
        from ..config import appsettings

        self.pygments_style = pygments_style or appsettings.pygments_style
        self.noclasses = appsettings.highlight_noclasses if noclasses is None else noclasses
        self.handlers: Dict[str, Callable[[Node], str]] = {
            'root': self.children_render,
            'paragraph': lambda node: f'<p>{self.children_render(node)}</p>',
            'heading': lambda node: f'<h{node.depth}>{self.children_render(node)}</h{node.depth}>',
            'text': lambda node: escape(node.value or '', quote=False),
            'emphasis': lambda node: f'<em>{self.children_render(node)}</em>',
            'strong': lambda node: f'<strong>{self.children_render(node)}</strong>',
            'delete': lambda node: f'<del>{self.children_render(node)}</del>',
            'mark': lambda node: f'<mark>{self.children_render(node)}</mark>',
            'inlineCode': lambda node: f'<code>{escape(node.value or "", quote=False)}</code>',
            'inlineMath': lambda node: f'<span class="math math-inline">{escape(node.value or "", quote=False)}</span>',
            'math': lambda node: f'<div class="math math-display">{escape(node.value or "", quote=False)}</div>',
            'break': lambda node: '<br>',
            'thematicBreak': lambda node: '<hr>',
            'html': lambda node: node.value or '',
            'blockquote': lambda node: f'<blockquote>{self.children_render(node)}</blockquote>',
            'link': self.link_render,
            'image': self.image_render,
            'list': self.list_render,
            'listItem': self.listItem_render,
            'code': self.code_render,
            'container': self.container_render,
            'containerDirective': self.container_render,
        }

    def render(self, tree: Node) -> str:
        """Render a tree (usually the root) to HTML"""
        return self.node_render(tree)

    def node_render(self, node: Node) -> str:
        handler = self.handlers.get(node.type)
        if handler is None:
            LOG(f"Warning: no renderer for node type '{node.type}'", level=2)
            return self.children_render(node) if node.children else escape(node.value or '')
        return handler(node)

    def children_render(self, node: Node) -> str:
        block = node.type in ('root', 'blockquote', 'container', 'containerDirective', 'listItem')
        separator = '\n' if block else ''
        return separator.join(self.node_render(child) for child in node.children or [])

    def link_render(self, node: Node) -> str:
        title = f' title="{escape(node.title)}"' if node.title else ''
        return f'<a href="{escape(node.url or "")}"{title}>{self.children_render(node)}</a>'

    def image_render(self, node: Node) -> str:
        title = f' title="{escape(node.title)}"' if node.title else ''
        return f'<img src="{escape(node.url or "")}" alt="{escape(node.alt or "")}"{title}>'

    def list_render(self, node: Node) -> str:
        items = '\n'.join(self.node_render(child) for child in node.children or [])
        if node.ordered:
            start = node.data.get('start', 1)
            start_attr = f' start="{start}"' if start != 1 else ''
            return f'<ol{start_attr}>\n{items}\n</ol>'
        return f'<ul>\n{items}\n</ul>'

    def listItem_render(self, node: Node) -> str:
        children = node.children or []
        # tight item: a lone paragraph renders without <p>
        if len(children) == 1 and children[0].type == 'paragraph':
            return f'<li>{self.children_render(children[0])}</li>'
        return f'<li>{self.children_render(node)}</li>'

    def container_render(self, node: Node) -> str:
        """Element from hName/hProperties; unresolved directives become plain divs"""
        tag = node.data.get('hName', 'div')
        properties = dict(node.data.get('hProperties') or {})
        if node.type == 'containerDirective' and not properties:
            properties = {'className': [f'directive-{node.name}']}
        return f'<{tag}{properties_render(properties)}>\n{self.children_render(node)}\n</{tag}>'

    def lexer_get(self, language: Optional[str]) -> Lexer:
        """Pygments lexer for a fence language, TextLexer when unknown"""
        if not language:
            return TextLexer()
        try:
            if language.lower() in ['blogmark', 'bm']:
                return get_lexer()
            return get_lexer_by_name(language)
        except ClassNotFound:
            return TextLexer()

    def code_render(self, node: Node) -> str:
        """Highlighted code block, with a filename header when annotated"""
        lexer = self.lexer_get(node.lang)
        formatter = HtmlFormatter(style=self.pygments_style, noclasses=self.noclasses)
        highlighted = highlight(node.value or '', lexer, formatter)

        properties = dict(node.data.get('hProperties') or {})
        filename = properties.get('data-filename')
        if node.lang:
            properties['data-language'] = node.lang
        properties['className'] = ['code-block']
        header = f'<div class="code-filename">{escape(filename)}</div>' if filename else ''
        return f'<div{properties_render(properties)}>{header}{highlighted}</div>'
