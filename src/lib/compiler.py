"""
Site compiler for blog content collections

Walks a content root laid out as

    <content>/blog/<slug>/main.md
    <content>/news/<slug>/main.md
    <content>/events/<slug>/main.md

and for each document: loads the front-matter record, parses the body,
runs the transformation pipeline, renders HTML and writes

    <output>/<collection>/<slug>/index.html

plus one <output>/index.json manifest of every compiled document.
"""

import json
from datetime import datetime
from html import escape
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config.settings import StorageSettings
from ..models.content import Collection
from .frontmatter import Document, FrontMatterError, document_load
from .log import LOG, WARN, document_logContext
from .parser import Parser
from .renderer import Renderer
from .transformer import Transformer

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="ja">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<meta name="description" content="{description}">
</head>
<body>
<article class="post post-{collection}">
<header>
<h1>{title}</h1>
<p class="post-meta"><time datetime="{iso_date}">{display_date}</time> {author}</p>
</header>
{body}
</article>
</body>
</html>
"""


def collections_resolve(names: List[str]) -> List[Collection]:
    """Collection enums for configured names; unknown names are ignored"""
    known = {c.value: c for c in Collection}
    resolved = []
    for name in names:
        if name in known:
            resolved.append(known[name])
        else:
            LOG(f"Warning: unknown collection '{name}' ignored", level=1)
    return resolved


class Compiler:
    """
    Compiles a content directory into a static HTML tree

    Responsibilities:
    - Collect Markdown documents per collection
    - Validate front-matter, skip drafts
    - Parse, transform and render each body
    - Write pages and the manifest
    """

    def __init__(
        self,
        input_dir: Path,
        output_dir: Path,
        storage: StorageSettings,
        include_drafts: bool = False,
        collections: Optional[List[str]] = None,
        strict: Optional[bool] = None,
        renderer: Optional[Renderer] = None,
    ) -> None:
        """
        Initialize compiler

        Args:
            input_dir: Content root containing collection directories
            output_dir: Directory for compiled output
            storage: Storage settings threaded into the transformation passes
            include_drafts: Compile documents marked `draft: true`
            collections: Collection directory names to scan
                         (default: appsettings.content_collections)
            strict: Parser strict mode (default: appsettings.strict_mode)
            renderer: HTML renderer (default: Renderer())
        """
        from ..config import appsettings

        self.input_dir = Path(input_dir)
        self.output_dir = Path(output_dir)
        self.storage = storage
        self.include_drafts = include_drafts
        self.collections = collections_resolve(
            collections if collections is not None else appsettings.content_collections
        )
        self.strict = strict
        self.debug = appsettings.debug_mode
        self.renderer = renderer or Renderer()

        self.documents: List[Document] = []
        self.skipped: List[str] = []
        self.manifest: List[Dict[str, Any]] = []

    def documents_collect(self) -> List[Document]:
        """
        Load every document under the configured collections

        Documents with invalid front-matter are skipped with a warning;
        drafts are skipped unless include_drafts is set.
        """
        self.documents = []
        self.skipped = []
        for collection in self.collections:
            collection_dir = self.input_dir / collection.value
            if not collection_dir.is_dir():
                LOG(f"No {collection.value}/ directory under {self.input_dir}", level=2)
                continue
            for path in sorted(collection_dir.rglob('*.md')):
                if path.name.upper() == 'README.MD':
                    continue
                try:
                    document = document_load(path, collection, self.input_dir)
                except FrontMatterError as e:
                    WARN(str(e))
                    self.skipped.append(str(path))
                    continue
                if document.record.draft and not self.include_drafts:
                    LOG(f"Skipping draft {path}", level=2)
                    self.skipped.append(str(path))
                    continue
                self.documents.append(document)
        LOG(f"Collected {len(self.documents)} documents ({len(self.skipped)} skipped)", level=2)
        return self.documents

    def document_compile(self, document: Document) -> str:
        """Parse, transform and render one document body"""
        tree = Parser(document.body, debug=self.debug, strict=self.strict).parse()
        transformer = Transformer(self.storage, document.collection)
        tree = transformer.run(tree)
        LOG(f"{document.slug}: {transformer.stats_get()}", level=3)
        return self.renderer.render(tree)

    def htmlDocument_build(self, document: Document, body: str) -> str:
        """Wrap a rendered body in the page template"""
        record = document.record
        pub: datetime = record.pubDate
        return PAGE_TEMPLATE.format(
            title=escape(record.title),
            description=escape(record.description),
            collection=document.collection.value,
            iso_date=pub.isoformat(),
            display_date=pub.strftime('%Y年%m月%d日'),
            author=escape(record.author),
            body=body,
        )

    def manifestEntry_make(self, document: Document, output_file: Path) -> Dict[str, Any]:
        entry = document.record.model_dump(mode='json')
        entry['collection'] = document.collection.value
        entry['slug'] = document.slug
        entry['path'] = output_file.relative_to(self.output_dir).as_posix()
        entry['_sort'] = document.record.pubDate
        return entry

    def compile(self) -> Dict[str, Any]:
        """
        Compile every collected document

        Returns:
            dict with status, output_dir, document_count, skipped
        """
        LOG("Starting compilation...", level=2)
        if not self.documents:
            self.documents_collect()

        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.manifest = []

        for document in self.documents:
            with document_logContext(document.slug):
                body = self.document_compile(document)
            page = self.htmlDocument_build(document, body)
            output_file = self.output_dir / document.collection.value / document.slug / 'index.html'
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_text(page, encoding='utf-8')
            LOG(f"Wrote {output_file}", level=2)
            self.manifest.append(self.manifestEntry_make(document, output_file))

        self.manifest.sort(key=lambda entry: entry['_sort'], reverse=True)
        for entry in self.manifest:
            del entry['_sort']
        manifest_file = self.output_dir / 'index.json'
        manifest_file.write_text(
            json.dumps(self.manifest, ensure_ascii=False, indent=2), encoding='utf-8'
        )
        LOG(f"Wrote manifest {manifest_file}", level=2)

        return {
            'status': True,
            'output_dir': str(self.output_dir),
            'document_count': len(self.manifest),
            'skipped': list(self.skipped),
        }
