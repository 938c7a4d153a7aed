"""
Content scaffolding

Creates new content skeletons under a content root:

    blog         -> blog/<slug>/main.md + README.md
    event        -> events/<slug>/main.md + README.md
    news         -> news/<slug>/main.md + README.md
    series       -> blog/<series-id>/series.json + README.md
    series-post  -> blog/<series-id>/<post-id>/main.md

New articles carry a front-matter template and a showcase of the dialect
(callouts, slider, math, highlight, code filename, download, audio).
"""

import json
import re
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError

from ..models.content import JST, SeriesInfo
from .log import LOG

CONTENT_TYPES = ['blog', 'event', 'news', 'series', 'series-post']

DIRECTORIES: Dict[str, str] = {
    'blog': 'blog',
    'event': 'events',
    'news': 'news',
}

TEMPLATES: Dict[str, Dict[str, str]] = {
    'blog': {'title': 'New Blog Post', 'description': 'Blog post description', 'label': 'ブログ記事'},
    'event': {'title': 'New Event', 'description': 'Event description', 'label': 'イベント'},
    'news': {'title': 'News Update', 'description': 'News description', 'label': 'ニュース'},
}

SHOWCASE = r"""
## 見出し2

記事の内容...

### オリジナル記法の例

#### 情報ブロック
:::info
これは情報ブロックです。
:::

#### 警告ブロック
:::warning
これは警告ブロックです。
:::

#### エラーブロック
:::danger
これはエラーブロックです。
:::

#### 成功ブロック
:::success
これは成功ブロックです。
:::

#### 画像スライダー
:::slider
![画像1](./image1.jpg)
![画像2](./image2.jpg)
![画像3](./image3.jpg)
:::

#### 数式
インライン数式: $E = mc^2$

ブロック数式:
$$
\int_{-\infty}^{\infty} e^{-x^2} dx = \sqrt{\pi}
$$

#### ハイライト
これは==重要な内容==です。

#### コードブロック（ファイル名付き）
```javascript:example.js
function hello() {
  console.log("Hello, World!");
}
```

#### ダウンロード
:::download
file=sample.pdf
name=サンプルファイル
:::

#### オーディオ
:::audio
file=sample.mp3
name=サンプル音声
:::

## まとめ

記事のまとめ...
"""

ARTICLE_README = """# {title}

この記事用のファイル管理ディレクトリです。

## ファイル構成

- `main.md` - 記事のメインコンテンツ
- `*.jpg, *.png, *.gif` - 記事で使用する画像
- `*.pdf, *.docx` - ダウンロード用ファイル
- `*.mp3, *.wav` - オーディオファイル

## ファイルダウンロード

```markdown
:::download
file=document.pdf
name=ドキュメント名
:::
```

## オーディオファイル

```markdown
:::audio
file=audio.mp3
name=音声タイトル
:::
```
"""

SERIES_README = """# {name}

{description}

## シリーズ構成

```
{series_id}/
├── series.json          # シリーズ設定
├── README.md
├── 01-first-post/
│   ├── main.md
│   └── cover.png
└── ...
```

## 記事の作成方法

```bash
blogmark-tools new series-post {series_id}/post-name
```
"""


class ScaffoldError(Exception):
    """Raised when a content skeleton cannot be created"""


@dataclass
class ScaffoldResult:
    content_type: str
    slug: str
    path: Path
    url: str


def slug_normalize(slug: str, keep_slash: bool = False) -> str:
    """
    Lowercase, map anything outside [a-z0-9-] to '-', collapse and trim.

    Example:
        >>> slug_normalize("Hello World!")
        'hello-world'
        >>> slug_normalize("My Series/Part 1", keep_slash=True)
        'my-series/part-1'
    """
    def part_normalize(part: str) -> str:
        part = re.sub(r'[^a-z0-9-]', '-', part.lower())
        part = re.sub(r'-+', '-', part)
        return part.strip('-')

    if keep_slash:
        return '/'.join(part_normalize(part) for part in slug.split('/'))
    return part_normalize(slug)


def title_fromSlug(slug: str) -> str:
    """'html-basics' -> 'Html Basics'"""
    return re.sub(r'\b\w', lambda m: m.group(0).upper(), slug.replace('-', ' '))


class Scaffolder:
    """
    Creates content skeletons under a content root

    Args:
        content_root: Directory holding blog/, news/, events/
        author: Author written into front-matter (default: appsettings.default_author)
        now: Timestamp for pubDate fields (default: current JST time)
    """

    def __init__(self, content_root: Path, author: Optional[str] = None, now: Optional[datetime] = None) -> None:
        from ..config import appsettings

        self.content_root = Path(content_root)
        self.author = author or appsettings.default_author
        self.now = now or datetime.now(JST)

    def content_create(self, content_type: str, slug: Optional[str] = None) -> ScaffoldResult:
        """
        Create one skeleton

        Args:
            content_type: One of CONTENT_TYPES
            slug: Slug (series-post: "<series-id>/<post-id>"); uuid4 when omitted

        Raises:
            ScaffoldError: unknown type, bad slug, missing series, or existing target
        """
        if content_type not in CONTENT_TYPES:
            raise ScaffoldError(f"Unknown content type '{content_type}' (expected one of {', '.join(CONTENT_TYPES)})")

        raw = slug or str(uuid.uuid4())
        normalized = slug_normalize(raw, keep_slash=(content_type == 'series-post'))
        if not normalized:
            raise ScaffoldError(f"Slug '{raw}' is empty after normalization")

        if content_type == 'series':
            return self.series_create(normalized)
        if content_type == 'series-post':
            return self.seriesPost_create(normalized)
        return self.article_create(content_type, normalized)

    def frontMatter_make(self, fields: Dict[str, str]) -> str:
        lines = ['---'] + [f'{key}: {value}' for key, value in fields.items()] + ['---', '']
        return '\n'.join(lines)

    def article_create(self, content_type: str, slug: str) -> ScaffoldResult:
        template = TEMPLATES[content_type]
        directory = DIRECTORIES[content_type]
        article_dir = self.content_root / directory / slug
        article_path = article_dir / 'main.md'
        if article_path.exists():
            raise ScaffoldError(f"Article '{slug}' already exists: {article_path}")

        timestamp = self.now.isoformat(timespec='seconds')
        fields = {
            'title': json.dumps(template['title'], ensure_ascii=False),
            'description': json.dumps(template['description'], ensure_ascii=False),
            'pubDate': timestamp,
            'author': json.dumps(self.author, ensure_ascii=False),
            'tags': '[]',
            'draft': 'false',
        }
        if content_type == 'event':
            fields['eventDate'] = timestamp
            fields['eventEndDate'] = timestamp
            fields['location'] = '"TBD"'

        body = (
            f"\n# {template['title']}\n\n"
            f"ここに{template['label']}の内容を記述してください。\n"
            + SHOWCASE
        )
        article_dir.mkdir(parents=True, exist_ok=True)
        article_path.write_text(self.frontMatter_make(fields) + body, encoding='utf-8')
        (article_dir / 'README.md').write_text(
            ARTICLE_README.format(title=template['title']), encoding='utf-8'
        )
        LOG(f"Created {content_type} {article_path}", level=1)
        return ScaffoldResult(content_type, slug, article_path, f"/{directory}/{slug}")

    def series_create(self, series_id: str) -> ScaffoldResult:
        series_dir = self.content_root / 'blog' / series_id
        if series_dir.exists():
            raise ScaffoldError(f"Series '{series_id}' already exists: {series_dir}")

        info = SeriesInfo(
            name=title_fromSlug(series_id),
            description=f"{series_id} シリーズの説明",
        )
        series_dir.mkdir(parents=True)
        (series_dir / 'series.json').write_text(
            json.dumps(info.model_dump(), ensure_ascii=False, indent=2) + '\n', encoding='utf-8'
        )
        (series_dir / 'README.md').write_text(
            SERIES_README.format(name=info.name, description=info.description, series_id=series_id),
            encoding='utf-8',
        )
        LOG(f"Created series {series_dir}", level=1)
        return ScaffoldResult('series', series_id, series_dir / 'series.json', f"/series/{series_id}")

    def seriesInfo_load(self, series_dir: Path) -> SeriesInfo:
        """series.json contents; a missing or invalid file falls back to the directory name"""
        info_path = series_dir / 'series.json'
        if info_path.exists():
            try:
                return SeriesInfo.model_validate_json(info_path.read_text(encoding='utf-8'))
            except ValidationError as e:
                LOG(f"Warning: invalid {info_path}: {e}", level=1)
        return SeriesInfo(name=series_dir.name)

    def seriesPost_create(self, full_slug: str) -> ScaffoldResult:
        parts = full_slug.split('/')
        if len(parts) != 2 or not all(parts):
            raise ScaffoldError("Series post slug must have the form 'series-id/post-id'")
        series_id, post_id = parts

        series_dir = self.content_root / 'blog' / series_id
        if not series_dir.is_dir():
            raise ScaffoldError(f"Series '{series_id}' does not exist; create it first")

        post_dir = series_dir / post_id
        post_path = post_dir / 'main.md'
        if post_path.exists():
            raise ScaffoldError(f"Article '{full_slug}' already exists: {post_path}")

        info = self.seriesInfo_load(series_dir)
        title = title_fromSlug(post_id)
        fields = {
            'title': json.dumps(title, ensure_ascii=False),
            'description': json.dumps(f"{info.name}シリーズの記事", ensure_ascii=False),
            'pubDate': self.now.isoformat(timespec='seconds'),
            'author': json.dumps(self.author, ensure_ascii=False),
            'tags': json.dumps([series_id, 'シリーズ'], ensure_ascii=False),
            'draft': 'false',
            'cover': '"./cover.png"',
            'coverAlt': json.dumps(f"{title}のカバー画像", ensure_ascii=False),
            'seriesId': json.dumps(series_id),
        }
        body = (
            f"\n# {title}\n\n"
            f"{info.name}シリーズの記事です。\n\n"
            "## 概要\n\nこの記事では...について説明します。\n\n"
            "## まとめ\n\nこの記事のまとめ...\n\n"
            "## 次回予告\n\n次回は...について解説します。\n"
        )
        post_dir.mkdir(parents=True, exist_ok=True)
        post_path.write_text(self.frontMatter_make(fields) + body, encoding='utf-8')
        LOG(f"Created series post {post_path}", level=1)
        return ScaffoldResult('series-post', full_slug, post_path, f"/blog/{full_slug}")
