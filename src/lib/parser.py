"""
Parser for the blog Markdown dialect

Transforms Markdown source (front-matter already removed) into a Node tree.

Tokenizing is done by markdown-it-py with the CommonMark preset; this
module configures it for the blog dialect and folds the token stream into
Node objects:
- Container directives: `:::name{key="value"}` ... `:::`, also the
  `:::name key=value` attribute form on the opener line. Nested directives
  use a longer colon run on the outer fence (mdit_py_plugins.container)
- Math: `$inline$` and `$$` display blocks (mdit_py_plugins.dollarmath)
- Highlight: `==marked==` (mdit_py_plugins.mark)
- Bare-URL autolinks (linkify) and ~~strikethrough~~

A line that opens *and* ends with `:::` (e.g. `:::audio file="a.mp3":::`)
is not a directive opener; it stays paragraph text.

Example:
    >>> root = Parser(":::info\\nHello\\n:::").parse()
    >>> root.children[0].type, root.children[0].name
    ('containerDirective', 'info')
"""

import re
from typing import Callable, Dict, List, Optional, Tuple

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.container import container_plugin
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.mark import mark_plugin

from ..models.tree import (
    BLOCKQUOTE, BREAK, CODE, CONTAINER_DIRECTIVE, DELETE, EMPHASIS, HEADING, HTML,
    IMAGE, INLINE_CODE, INLINE_MATH, LINK, LIST, LIST_ITEM, MARK, MATH, PARAGRAPH,
    ROOT, STRONG, TEXT, THEMATIC_BREAK, Node,
)
from .log import LOG, WARN

DIRECTIVE_PARAMS = re.compile(r'^\s*([A-Za-z][\w-]*)(.*)$', re.DOTALL)
DIRECTIVE_OPEN = re.compile(r'^ {0,3}(:{3,})(.*)$')
CLOSER_PREFIX = re.compile(r'^[\s>]*')

# Transient marker for an inline run spliced into its parent's children
INLINE_WRAPPER = "_inline"

ATTRIBUTE_TOKEN = re.compile(
    r'#([\w-]+)'                                        # #id
    r'|\.([\w-]+)'                                      # .class
    r'|([A-Za-z_][\w:.-]*)\s*=\s*(?:"([^"]*)"|\'([^\']*)\'|([^\s"\'}]+))'
    r'|([A-Za-z_][\w:.-]*)'                             # bare flag
)

# markdown-it node type -> Node type for nodes that only wrap children
WRAPPERS: Dict[str, str] = {
    'paragraph': PARAGRAPH,
    'blockquote': BLOCKQUOTE,
    'list_item': LIST_ITEM,
    'em': EMPHASIS,
    'strong': STRONG,
    's': DELETE,
    'mark': MARK,
}


def attributes_parse(source: str) -> Dict[str, str]:
    """
    Parse directive attributes from the text after the directive name

    Accepts a `{...}` block or bare space-separated pairs. Values are
    always strings; later duplicates win.

    Example:
        >>> attributes_parse('{file="a.pdf" name=\\'A\\' #top .wide}')
        {'file': 'a.pdf', 'name': 'A', 'id': 'top', 'class': 'wide'}
    """
    text = source.strip()
    if text.startswith('{'):
        end = text.rfind('}')
        text = text[1:end] if end != -1 else text[1:]

    attributes: Dict[str, str] = {}
    classes: List[str] = []
    for match in ATTRIBUTE_TOKEN.finditer(text):
        ident, cls, key, dq, sq, bare, flag = match.groups()
        if ident:
            attributes['id'] = ident
        elif cls:
            classes.append(cls)
        elif key:
            attributes[key] = next(v for v in (dq, sq, bare) if v is not None)
        elif flag:
            attributes[flag] = ""
    if classes:
        attributes['class'] = " ".join(classes)
    return attributes


def directive_params(params: str) -> Optional[Tuple[str, str]]:
    """(name, attribute text) from the text following an opener's colons"""
    match = DIRECTIVE_PARAMS.match(params)
    if not match:
        return None
    rest = match.group(2)
    if rest.rstrip().endswith(':::'):
        return None
    return match.group(1), rest


def directive_opener(line: str) -> Optional[Tuple[str, str]]:
    """(name, attribute text) when a line opens a container directive"""
    match = DIRECTIVE_OPEN.match(line)
    if not match:
        return None
    return directive_params(match.group(2))


def markdown_make() -> MarkdownIt:
    """
    The markdown-it instance for the blog dialect

    CommonMark with raw HTML, linkify for scheme-qualified bare URLs,
    strikethrough, highlight, dollar math and a single container rule
    that accepts any directive name.
    """
    md = MarkdownIt("commonmark", {"linkify": True}).enable(["linkify", "strikethrough"])
    md.linkify.set({"fuzzy_link": False, "fuzzy_email": False})
    md.use(mark_plugin)
    md.use(dollarmath_plugin, allow_space=False, allow_digits=False, double_inline=False)
    md.use(
        container_plugin,
        name="directive",
        validate=lambda params, *args: directive_params(params) is not None,
    )
    return md


class Parser:
    """
    Parser for the blog Markdown dialect

    Handles:
    - Nested container directives with attributes
    - Fenced code and math blocks (contents are never re-parsed)
    - Lists, quotes, headings, raw HTML
    - Inline markup and bare-URL autolinks
    """

    md: MarkdownIt = markdown_make()

    def __init__(self, source: str, debug: bool = False, strict: Optional[bool] = None) -> None:
        """
        Initialize parser with source text

        Args:
            source: Markdown body (front-matter removed)
            debug: Enable debug output for parser operations
            strict: Raise SyntaxError on unclosed fences/directives;
                    defaults to appsettings.strict_mode
        """
        from ..config import appsettings

        self.source = source.replace('\r\n', '\n').replace('\r', '\n')
        self.debug = debug
        self.strict = appsettings.strict_mode if strict is None else strict
        self.lines = self.source.split('\n')
        self.line_number = 1

        self.builders: Dict[str, Callable[[SyntaxTreeNode, int], Optional[Node]]] = {
            'heading': self.heading_build,
            'bullet_list': self.list_build,
            'ordered_list': self.list_build,
            'fence': self.code_build,
            'code_block': self.code_build,
            'math_block': self.math_build,
            'math_block_label': self.math_build,
            'container_directive': self.directive_build,
            'inline': self.inline_build,
            'link': self.link_build,
            'image': self.image_build,
        }

    def parse(self) -> Node:
        """
        Parse the whole source into a root node

        Returns:
            Node of type "root"; empty source gives a root with no children

        Raises:
            SyntaxError: In strict mode, for unclosed fences or directives
        """
        tree = SyntaxTreeNode(self.md.parse(self.source))
        root = Node(type=ROOT, children=self.children_build(tree, 1), line_number=1)
        LOG(f"Parsed {len(root.children)} top-level blocks", level=3)
        return root

    def inline_parse(self, text: str) -> List[Node]:
        """Inline nodes for a run of paragraph text"""
        tree = SyntaxTreeNode(self.md.parseInline(text))
        return self.children_build(tree, self.line_number)

    def children_build(self, parent: SyntaxTreeNode, line_number: int) -> List[Node]:
        """
        Convert the children of a markdown-it node, merging adjacent text

        Soft line breaks become "\\n" inside the surrounding text node, so a
        paragraph's text keeps its source line structure.
        """
        nodes: List[Node] = []
        for child in parent.children:
            node = self.node_build(child, line_number)
            if node is None:
                continue
            if node.type == INLINE_WRAPPER:
                nodes.extend(node.children)
            elif node.type == TEXT and nodes and nodes[-1].type == TEXT:
                nodes[-1].value += node.value
            else:
                nodes.append(node)
        return nodes

    def node_build(self, token: SyntaxTreeNode, line_number: int) -> Optional[Node]:
        """Node for one markdown-it node (None for nothing)"""
        if token.map:
            line_number = token.map[0] + 1
            self.line_number = line_number

        builder = self.builders.get(token.type)
        if builder:
            return builder(token, line_number)

        kind = token.type
        if kind in WRAPPERS:
            block = token.block
            return Node(
                type=WRAPPERS[kind],
                children=self.children_build(token, line_number),
                line_number=line_number if block else 0,
            )
        if kind in ('text', 'text_special'):
            return Node(type=TEXT, value=token.content)
        if kind == 'softbreak':
            return Node(type=TEXT, value='\n')
        if kind == 'hardbreak':
            return Node(type=BREAK)
        if kind == 'code_inline':
            return Node(type=INLINE_CODE, value=token.content)
        if kind == 'math_inline':
            return Node(type=INLINE_MATH, value=token.content.strip())
        if kind == 'html_inline':
            return Node(type=HTML, value=token.content)
        if kind == 'html_block':
            return Node(type=HTML, value=token.content.rstrip('\n'), line_number=line_number)
        if kind == 'hr':
            return Node(type=THEMATIC_BREAK, line_number=line_number)

        LOG(f"Unhandled markdown token '{kind}' at line {line_number}", level=3)
        return None

    def inline_build(self, token: SyntaxTreeNode, line_number: int) -> Node:
        return Node(type=INLINE_WRAPPER, children=self.children_build(token, 0))

    def heading_build(self, token: SyntaxTreeNode, line_number: int) -> Node:
        return Node(
            type=HEADING,
            depth=int(token.tag[1]),
            children=self.children_build(token, line_number),
            line_number=line_number,
        )

    def list_build(self, token: SyntaxTreeNode, line_number: int) -> Node:
        node = Node(
            type=LIST,
            ordered=token.type == 'ordered_list',
            children=self.children_build(token, line_number),
            line_number=line_number,
        )
        if node.ordered:
            node.data['start'] = int(token.attrs.get('start', 1))
        return node

    def code_build(self, token: SyntaxTreeNode, line_number: int) -> Node:
        """
        Code node from a fenced or indented block

        The first word of the info string is the language, the rest is
        kept as meta.
        """
        value = token.content
        if value.endswith('\n'):
            value = value[:-1]
        info = (token.info or '').strip()
        lang, _, meta = info.partition(' ')

        if token.type == 'fence' and not self.fence_closed(token):
            self.unclosed_report("Unclosed code fence", token.map[0])

        return Node(
            type=CODE,
            value=value,
            lang=lang or None,
            meta=meta.strip() or None,
            line_number=line_number,
        )

    def math_build(self, token: SyntaxTreeNode, line_number: int) -> Node:
        return Node(type=MATH, value=token.content.strip(), line_number=line_number)

    def directive_build(self, token: SyntaxTreeNode, line_number: int) -> Node:
        """containerDirective node from a `:::name` container"""
        name, rest = directive_params(token.info)
        opening = token.nester_tokens.opening
        if not self.directive_closed(opening):
            self.unclosed_report(f"Unclosed directive '{opening.markup}{name}'", opening.map[0])

        node = Node(
            type=CONTAINER_DIRECTIVE,
            name=name,
            attributes=attributes_parse(rest),
            children=self.children_build(token, line_number),
            line_number=line_number,
        )
        if self.debug:
            LOG(f"Directive ':::{name}' at line {line_number} with {node.attributes}", level=3)
        return node

    def link_build(self, token: SyntaxTreeNode, line_number: int) -> Node:
        return Node(
            type=LINK,
            url=token.attrs.get('href', ''),
            title=token.attrs.get('title'),
            children=self.children_build(token, line_number),
        )

    def image_build(self, token: SyntaxTreeNode, line_number: int) -> Node:
        alt = Node(type=PARAGRAPH, children=self.children_build(token, line_number))
        return Node(
            type=IMAGE,
            url=token.attrs.get('src', ''),
            title=token.attrs.get('title'),
            alt=alt.text_get(),
        )

    def fence_closed(self, token: SyntaxTreeNode) -> bool:
        """True when a fence token ended on a closing marker line"""
        start, end = token.map
        if end - 1 <= start or end > len(self.lines):
            return False
        closer = CLOSER_PREFIX.sub('', self.lines[end - 1]).rstrip()
        marker = token.markup
        return len(closer) >= len(marker) and set(closer) == {marker[0]}

    def directive_closed(self, opening) -> bool:
        """True when a container stopped on a colon line at least as long as its opener"""
        end = opening.map[1]
        if end >= len(self.lines):
            return False
        closer = CLOSER_PREFIX.sub('', self.lines[end]).rstrip()
        return len(closer) >= len(opening.markup) and set(closer) == {':'}

    def unclosed_report(self, message: str, line_index: int) -> None:
        """Warn about an unclosed block, or raise in strict mode"""
        self.line_number = line_index + 1
        if self.strict:
            self.error(message)
        WARN(f"{message} at line {self.line_number}; running to end of document")

    def error(self, message: str) -> None:
        """
        Report parser error with source context

        Raises SyntaxError with the message, the line number, and the
        offending source line with a caret under its first character.

        Raises:
            SyntaxError: Always (this is an error reporting function)

        Example output:
            SyntaxError:
            Unclosed directive ':::info'
            Line 3
            Context: :::info
                     ^
        """
        index = min(max(self.line_number - 1, 0), len(self.lines) - 1)
        context = self.lines[index] if self.lines else ''

        raise SyntaxError(
            f"\n{message}\n"
            f"Line {self.line_number}\n"
            f"Context: {context}\n"
            f"         ^"
        )

