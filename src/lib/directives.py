"""
Directive resolution

Rewrites containerDirective nodes (`:::name{attrs} ... :::`) into container
elements or self-contained HTML widgets.

Dispatch is over the closed DirectiveName enum. Each member has exactly one
registered DirectiveSpec; any other keyword falls through to the generic
styled box, so unknown directives degrade instead of failing the document.

Two body policies exist:
    - callout/layout directives wrap the author's content (additive)
    - widget directives (download, audio) replace the body with a
      synthesized fragment (destructive)

A second stage converts paragraphs that are nothing but a literal
`:::audio file="..." name="...":::` line into the audio widget. Those lines
never reach the directive parser as directives, so without this stage they
would render as plain text.
"""

import re
from html import escape
from typing import Callable, Dict, List, Optional

from ..config.settings import StorageSettings
from ..models.directives import (
    CALLOUT_ICONS,
    DirectiveCategory,
    DirectiveDescriptor,
    DirectiveName,
    DirectiveSpec,
)
from ..models.tree import (
    BREAK, CONTAINER, CONTAINER_DIRECTIVE, LINK, PARAGRAPH, TEXT,
    Node, html_make, paragraph_make,
)
from .log import LOG, WARN
from .tree import tree_rewrite
from .urls import storageUrl_construct, url_isAbsolute

Handler = Callable[[DirectiveDescriptor, 'DirectiveResolver'], Node]

# Literal audio directive lines left as paragraph text by the parser
AUDIO_TEXT_PATTERNS = (
    re.compile(r':::audio\s+file="([^"]+)"(?:\s+name="([^"]+)")?\s*:::'),
    re.compile(r':::audio\{file="([^"]+)"(?:\s+name="([^"]+)")?\}\s*:::'),
)

# key=value lines written in a widget body instead of on the opener
BODY_ATTRIBUTE = re.compile(r'^\s*([A-Za-z][\w-]*)\s*=\s*(?:"([^"]*)"|\'([^\']*)\'|(.*?))\s*$')

DOWNLOAD_SYNTAX = ':::download file="filename.pdf" name="表示名"'
AUDIO_SYNTAX = ':::audio file="filename.mp3" name="表示名"'

SLIDER_CONTROLS = (
    '<div class="slider-controls">'
    '<button class="slider-prev" onclick="prevSlide(this)">❮</button>'
    '<button class="slider-next" onclick="nextSlide(this)">❯</button>'
    '</div>'
    '<div class="slider-dots"></div>'
)


def downloadFragment_make(name: str, file: str, url: str) -> str:
    """Download card: icon, display name, filename and download anchor"""
    return (
        '<div class="download-container">'
        '<div class="download-icon">📁</div>'
        '<div class="download-info">'
        f'<div class="download-name">{escape(name)}</div>'
        f'<div class="download-file">{escape(file)}</div>'
        '</div>'
        f'<a href="{escape(url)}" class="download-button" download>'
        '<span>ダウンロード</span>'
        '<span class="download-arrow">⬇️</span>'
        '</a>'
        '</div>'
    )


def downloadError_make() -> str:
    return (
        '<div class="download-container error">'
        '<div class="download-icon">⚠️</div>'
        '<div class="download-info">'
        '<div class="download-name">エラー: ファイルが指定されていません</div>'
        '<div class="download-file">'
        f'{escape(DOWNLOAD_SYNTAX)} の形式で指定してください'
        '</div>'
        '</div>'
        '</div>'
    )


def audioFragment_make(name: str, url: str) -> str:
    """
    Audio player with three <source> alternatives.

    The real MIME type is not known at this point, so all three sources
    point at the same URL and the browser picks the one it can play.
    """
    src = escape(url)
    return (
        '<div class="audio-player">'
        '<div class="audio-info">'
        '<div class="audio-icon">🎵</div>'
        f'<div class="audio-name">{escape(name)}</div>'
        '</div>'
        '<audio controls preload="metadata">'
        f'<source src="{src}" type="audio/mpeg">'
        f'<source src="{src}" type="audio/wav">'
        f'<source src="{src}" type="audio/ogg">'
        'お使いのブラウザはオーディオ要素をサポートしていません。'
        '</audio>'
        '</div>'
    )


def audioError_make() -> str:
    return (
        '<div class="audio-player error">'
        '<div class="audio-info">'
        '<div class="audio-icon">⚠️</div>'
        '<div class="audio-name">エラー: オーディオファイルが指定されていません</div>'
        '</div>'
        '<div class="audio-error">'
        f'{escape(AUDIO_SYNTAX)} の形式で指定してください'
        '</div>'
        '</div>'
    )


def bodyAttributes_extract(children: List[Node]) -> Dict[str, str]:
    """
    Read `key=value` lines from a widget body.

    Only applies when the body is a single paragraph made of text, links
    and line breaks in which every non-blank line is an assignment.

    Example:
        Body "file=sample.pdf\\nname=サンプル" -> {"file": "sample.pdf", "name": "サンプル"}
    """
    if len(children) != 1 or children[0].type != PARAGRAPH:
        return {}
    paragraph = children[0]
    if any(child.type not in (TEXT, LINK, BREAK) for child in paragraph.children or []):
        return {}

    text = "".join(
        "\n" if child.type == BREAK else child.text_get()
        for child in paragraph.children or []
    )
    attributes: Dict[str, str] = {}
    for line in text.splitlines():
        if not line.strip():
            continue
        match = BODY_ATTRIBUTE.match(line)
        if not match:
            return {}
        value = next(group for group in match.groups()[1:] if group is not None)
        attributes[match.group(1)] = value
    return attributes


class DirectiveRegistry:
    """
    Registry of directive specifications and handlers

    Maps every DirectiveName member to its DirectiveSpec. Construction fails
    if a member was added to the enum without a handler.
    """

    def __init__(self) -> None:
        """Initialize the registry and register all built-in directives"""
        self.specs: Dict[DirectiveName, DirectiveSpec] = {}
        self.calloutDirectives_register()
        self.layoutDirectives_register()
        self.widgetDirectives_register()
        self.registry_verify()

    def register(self, spec: DirectiveSpec) -> None:
        """Register a directive specification"""
        self.specs[spec.name] = spec

    def registry_verify(self) -> None:
        """Raise if any DirectiveName member has no registered handler"""
        missing = [member.value for member in DirectiveName if member not in self.specs]
        if missing:
            raise RuntimeError(f"No handler registered for directives: {', '.join(missing)}")

    def get(self, name: Optional[str]) -> Handler:
        """
        Get directive handler by keyword

        Args:
            name: Directive keyword

        Returns:
            The registered handler, or the generic fallback for unknown names
        """
        kind = DirectiveName.lookup(name)
        if kind is None:
            return self.generic_handler
        return self.specs[kind].handler

    def spec_get(self, name: Optional[str]) -> Optional[DirectiveSpec]:
        """Full specification by keyword, None for unknown names"""
        kind = DirectiveName.lookup(name)
        return self.specs.get(kind) if kind else None

    def directives_listByCategory(self, category: DirectiveCategory) -> List[DirectiveSpec]:
        """Get all directives in a category"""
        return [spec for spec in self.specs.values() if spec.category == category]

    @staticmethod
    def generic_handler(descriptor: DirectiveDescriptor, resolver: 'DirectiveResolver') -> Node:
        """Unknown keyword - styled box, body untouched"""
        return Node(
            type=CONTAINER,
            children=descriptor.children,
            data={
                "hName": "div",
                "hProperties": {"className": ["custom-block", f"custom-block-{descriptor.name}"]},
            },
        )

    def calloutDirectives_register(self) -> None:
        """Register :::info, :::warning, :::danger, :::success"""

        def callout_handler(descriptor: DirectiveDescriptor, resolver: 'DirectiveResolver') -> Node:
            """Prepend the icon glyph, keep the body in order"""
            kind = descriptor.kind
            icon = paragraph_make(html_make(f'<div class="custom-block-icon">{CALLOUT_ICONS[kind]}</div>'))
            return Node(
                type=CONTAINER,
                children=[icon] + list(descriptor.children),
                data={
                    "hName": "div",
                    "hProperties": {"className": ["custom-block", f"custom-block-{kind.value}"]},
                },
            )

        descriptions = {
            DirectiveName.INFO: 'Informational callout box',
            DirectiveName.WARNING: 'Warning callout box',
            DirectiveName.DANGER: 'Error/danger callout box',
            DirectiveName.SUCCESS: 'Success callout box',
        }
        for kind, description in descriptions.items():
            self.register(DirectiveSpec(
                name=kind,
                category=DirectiveCategory.CALLOUT,
                description=description,
                handler=callout_handler,
                examples=[f':::{kind.value}\nこれは{kind.value}ブロックです。\n:::'],
            ))

    def layoutDirectives_register(self) -> None:
        """Register :::slider"""

        def slider_handler(descriptor: DirectiveDescriptor, resolver: 'DirectiveResolver') -> Node:
            """Keep the images, append navigation controls"""
            controls = paragraph_make(html_make(SLIDER_CONTROLS))
            return Node(
                type=CONTAINER,
                children=list(descriptor.children) + [controls],
                data={
                    "hName": "div",
                    "hProperties": {"className": ["image-slider"], "data-slider": "true"},
                },
            )

        self.register(DirectiveSpec(
            name=DirectiveName.SLIDER,
            category=DirectiveCategory.LAYOUT,
            description='Image slider with previous/next controls',
            handler=slider_handler,
            examples=[':::slider\n![画像1](./image1.jpg)\n![画像2](./image2.jpg)\n:::'],
        ))

    def widgetDirectives_register(self) -> None:
        """Register :::download and :::audio"""

        def download_handler(descriptor: DirectiveDescriptor, resolver: 'DirectiveResolver') -> Node:
            """Replace the body with a download card (or the error card)"""
            attributes = resolver.attributes_complete(descriptor)
            file = attributes.get('file')
            url = resolver.fileUrl_resolve(attributes, 'downloads')
            if file and url:
                fragment = downloadFragment_make(attributes.get('name') or file, file, url)
            else:
                WARN("download directive without file attribute")
                fragment = downloadError_make()
            return Node(
                type=CONTAINER,
                children=[html_make(fragment)],
                data={"hName": "div", "hProperties": {"className": ["download-block"]}},
            )

        def audio_handler(descriptor: DirectiveDescriptor, resolver: 'DirectiveResolver') -> Node:
            """Replace the body with an audio player (or the error card)"""
            attributes = resolver.attributes_complete(descriptor)
            file = attributes.get('file')
            url = resolver.fileUrl_resolve(attributes, 'audio')
            if file and url:
                fragment = audioFragment_make(attributes.get('name') or file, url)
            else:
                WARN("audio directive without file attribute")
                fragment = audioError_make()
            return Node(
                type=CONTAINER,
                children=[html_make(fragment)],
                data={"hName": "div", "hProperties": {"className": ["audio-block"]}},
            )

        self.register(DirectiveSpec(
            name=DirectiveName.DOWNLOAD,
            category=DirectiveCategory.WIDGET,
            description='Download card for a stored file',
            handler=download_handler,
            examples=[':::download{file="sample.pdf" name="サンプルファイル"}\n:::'],
        ))

        self.register(DirectiveSpec(
            name=DirectiveName.AUDIO,
            category=DirectiveCategory.WIDGET,
            description='Audio player for a stored file',
            handler=audio_handler,
            examples=[':::audio{file="sample.mp3" name="サンプル音声"}\n:::'],
        ))


class DirectiveResolver:
    """
    Tree pass resolving container directives

    Args:
        config: Storage settings used to build download/audio URLs
        registry: Directive registry (a fresh one by default)
    """

    def __init__(self, config: StorageSettings, registry: Optional[DirectiveRegistry] = None) -> None:
        self.config = config
        self.registry = registry or DirectiveRegistry()
        self.resolved_count = 0

    def run(self, tree: Node) -> Node:
        """Resolve all directives, then the literal audio fallback"""
        tree = tree_rewrite(tree, self.directive_resolve, {CONTAINER_DIRECTIVE})
        tree = tree_rewrite(tree, self.audioFallback_resolve, {PARAGRAPH})
        return tree

    def directive_resolve(self, node: Node) -> Node:
        """Rewrite one containerDirective node into its element"""
        descriptor = DirectiveDescriptor.fromNode(node)
        LOG(f"Resolving directive '{descriptor.name}' attributes={descriptor.attributes}", level=2)
        handler = self.registry.get(descriptor.name)
        if descriptor.kind is None:
            LOG(f"Unknown directive '{descriptor.name}', using generic block", level=2)
        replacement = handler(descriptor, self)
        replacement.line_number = node.line_number
        self.resolved_count += 1
        return replacement

    def attributes_complete(self, descriptor: DirectiveDescriptor) -> Dict[str, str]:
        """Opener attributes, topped up from `key=value` body lines"""
        attributes = dict(descriptor.attributes)
        if 'file' not in attributes:
            for key, value in bodyAttributes_extract(descriptor.children).items():
                attributes.setdefault(key, value)
        return attributes

    def fileUrl_resolve(self, attributes: Dict[str, str], category: str) -> Optional[str]:
        """
        Resolve the URL a widget points at.

        Priority: explicit `url` > `file` that is already absolute >
        storage URL built from `file`. None when `file` is absent.
        """
        file = attributes.get('file')
        if not file:
            return None
        if attributes.get('url'):
            return attributes['url']
        if url_isAbsolute(file):
            return file
        return storageUrl_construct(file, category, self.config)

    def audioFallback_resolve(self, node: Node) -> Optional[Node]:
        """Convert a paragraph holding only a literal audio directive line"""
        children = node.children or []
        # an absolute file URL inside the line is autolinked by the parser
        if not children or any(child.type not in (TEXT, LINK) for child in children):
            return None

        text = "".join(child.text_get() for child in children).strip()
        for pattern in AUDIO_TEXT_PATTERNS:
            match = pattern.fullmatch(text)
            if match:
                break
        else:
            return None

        file, name = match.group(1), match.group(2)
        LOG(f"Audio fallback matched literal directive for '{file}'", level=2)
        url = self.fileUrl_resolve({'file': file}, 'audio')
        fragment = f'<div class="audio-block">{audioFragment_make(name or file, url)}</div>'
        replacement = html_make(fragment)
        replacement.line_number = node.line_number
        self.resolved_count += 1
        return replacement
