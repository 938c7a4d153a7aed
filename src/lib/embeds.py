"""
Embed cards for bare URLs

A paragraph that consists of nothing but a URL (either a link whose text is
its own URL, or a single text node starting with http:// or https://) is
matched against the known providers. On a match the whole paragraph is
replaced, at the same index of its parent, by a raw HTML embed card.

Paragraphs with any other shape, or URLs no provider recognises, are left
exactly as they were so ordinary links keep working.

Provider priority (first match wins):
    youtube -> twitter/x -> codepen -> github -> codesandbox
"""

import re
from html import escape
from typing import Callable, Dict, List, Optional, Pattern, Tuple

from ..models.embeds import EmbedMatch, Provider
from ..models.tree import LINK, PARAGRAPH, TEXT, Node, html_make
from .log import LOG
from .tree import tree_rewrite

URL_PATTERNS: List[Tuple[Provider, Pattern[str], Tuple[str, ...]]] = [
    (Provider.YOUTUBE,
     re.compile(r'https?://(?:www\.)?(?:youtube\.com/watch\?v=|youtu\.be/)([a-zA-Z0-9_-]+)'),
     ('video_id',)),
    (Provider.TWITTER,
     re.compile(r'https?://(?:www\.)?(?:twitter\.com|x\.com)/\w+/status/(\d+)'),
     ('post_id',)),
    (Provider.CODEPEN,
     re.compile(r'https?://codepen\.io/[\w-]+/pen/([a-zA-Z0-9]+)'),
     ('pen_id',)),
    (Provider.GITHUB,
     re.compile(r'https?://github\.com/([\w.-]+)/([\w.-]+)(?:/.*)?'),
     ('owner', 'repo')),
    (Provider.CODESANDBOX,
     re.compile(r'https?://codesandbox\.io/s/([a-zA-Z0-9-]+)'),
     ('sandbox_id',)),
]

BARE_URL = re.compile(r'^https?://')


def embed_match(url: str) -> Optional[EmbedMatch]:
    """
    Match a URL against the provider patterns

    Args:
        url: Candidate URL

    Returns:
        EmbedMatch for the first provider whose pattern matches at the
        start of the URL, None otherwise

    Example:
        >>> embed_match("https://github.com/foo/bar").ids
        {'owner': 'foo', 'repo': 'bar'}
    """
    for provider, pattern, names in URL_PATTERNS:
        match = pattern.match(url)
        if match:
            return EmbedMatch(provider=provider, url=url, ids=dict(zip(names, match.groups())))
    return None


def footer_make(icon: str, title: str, url: str) -> str:
    """Footer shared by every card: icon, provider label, clickable URL"""
    href = escape(url)
    return (
        '<div class="embed-footer">'
        f'<div class="embed-icon">{icon}</div>'
        '<div class="embed-info">'
        f'<div class="embed-title">{title}</div>'
        '<div class="embed-url">'
        f'<a href="{href}" target="_blank" rel="noopener noreferrer">{href}</a>'
        '</div>'
        '</div>'
        '</div>'
    )


def youtube_render(match: EmbedMatch) -> str:
    return (
        '<div class="embed-card youtube-embed">'
        '<div class="embed-container">'
        f'<iframe src="https://www.youtube.com/embed/{match.ids["video_id"]}" '
        'title="YouTube video player" frameborder="0" '
        'allow="accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture; web-share" '
        'allowfullscreen></iframe>'
        '</div>'
        f'{footer_make("▶️", "YouTube動画", match.url)}'
        '</div>'
    )


def twitter_render(match: EmbedMatch) -> str:
    """Blockquote hook; widgets.js upgrades it in the browser"""
    return (
        '<div class="embed-card twitter-embed">'
        '<div class="embed-content">'
        f'<blockquote class="twitter-tweet" data-dnt="true" data-tweet-id="{match.ids["post_id"]}">'
        f'<a href="{escape(match.url)}"></a>'
        '</blockquote>'
        '</div>'
        f'{footer_make("🐦", "Twitter/X 投稿", match.url)}'
        '<script async src="https://platform.twitter.com/widgets.js" charset="utf-8"></script>'
        '</div>'
    )


def codepen_render(match: EmbedMatch) -> str:
    return (
        '<div class="embed-card codepen-embed">'
        '<div class="embed-container">'
        f'<iframe src="https://codepen.io/embed/{match.ids["pen_id"]}?default-tab=result" '
        'title="CodePen Embed" frameborder="0" loading="lazy" '
        'allowtransparency="true" allowfullscreen="true"></iframe>'
        '</div>'
        f'{footer_make("🖊️", "CodePen", match.url)}'
        '</div>'
    )


def github_render(match: EmbedMatch) -> str:
    """Static repository card; GitHub refuses to be framed"""
    repo_label = escape(f'{match.ids["owner"]}/{match.ids["repo"]}')
    return (
        '<div class="embed-card github-embed">'
        '<div class="embed-content">'
        '<div class="github-card">'
        '<div class="github-header">'
        '<div class="github-icon">📁</div>'
        '<div class="github-info">'
        f'<div class="github-repo">{repo_label}</div>'
        '<div class="github-description">GitHubリポジトリ</div>'
        '</div>'
        '</div>'
        '<div class="github-actions">'
        f'<a href="{escape(match.url)}" target="_blank" rel="noopener noreferrer" class="github-button">'
        'リポジトリを見る'
        '</a>'
        '</div>'
        '</div>'
        '</div>'
        f'{footer_make("🐙", "GitHub", match.url)}'
        '</div>'
    )


def codesandbox_render(match: EmbedMatch) -> str:
    return (
        '<div class="embed-card codesandbox-embed">'
        '<div class="embed-container">'
        f'<iframe src="https://codesandbox.io/embed/{match.ids["sandbox_id"]}" '
        'title="CodeSandbox" frameborder="0" loading="lazy" '
        'allowtransparency="true" allowfullscreen="true"></iframe>'
        '</div>'
        f'{footer_make("📦", "CodeSandbox", match.url)}'
        '</div>'
    )


RENDERERS: Dict[Provider, Callable[[EmbedMatch], str]] = {
    Provider.YOUTUBE: youtube_render,
    Provider.TWITTER: twitter_render,
    Provider.CODEPEN: codepen_render,
    Provider.GITHUB: github_render,
    Provider.CODESANDBOX: codesandbox_render,
}

unrendered = [provider.value for provider in Provider if provider not in RENDERERS]
if unrendered:
    raise RuntimeError(f"No embed renderer for providers: {', '.join(unrendered)}")


def embed_render(match: EmbedMatch) -> str:
    """HTML card for a matched URL"""
    return RENDERERS[match.provider](match)


def bareUrl_extract(paragraph: Node) -> Optional[str]:
    """
    URL of a paragraph that is nothing but a URL, else None

    Accepts exactly one child that is either a link whose only child is a
    text node equal to the link's own URL, or a text node whose stripped
    value starts with http:// or https://.
    """
    children = paragraph.children or []
    if len(children) != 1:
        return None
    child = children[0]

    if child.type == LINK:
        label = child.children or []
        if len(label) == 1 and label[0].type == TEXT and label[0].value == child.url:
            return child.url
        return None

    if child.type == TEXT:
        text = (child.value or "").strip()
        if BARE_URL.match(text):
            return text
    return None


class EmbedResolver:
    """Tree pass replacing bare-URL paragraphs with embed cards"""

    def __init__(self) -> None:
        self.embed_count = 0

    def run(self, tree: Node) -> Node:
        return tree_rewrite(tree, self.paragraph_resolve, {PARAGRAPH})

    def paragraph_resolve(self, node: Node) -> Optional[Node]:
        url = bareUrl_extract(node)
        if url is None:
            return None

        match = embed_match(url)
        if match is None:
            LOG(f"No embed provider for {url}", level=3)
            return None

        LOG(f"Embedding {match.provider.value} card for {url}", level=2)
        replacement = html_make(embed_render(match))
        replacement.line_number = node.line_number
        self.embed_count += 1
        return replacement
