"""
Front-matter loading

Splits a `---` delimited YAML header from the Markdown body and validates
it into the record type of the document's collection.

Example:
    ---
    title: "リリースのお知らせ"
    description: "v2 を公開しました"
    pubDate: 2024-05-01
    ---
    本文...
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from ..models.content import Collection, ContentEntry, record_classFor
from .assets import collection_infer

DELIMITER = '---'


class FrontMatterError(ValueError):
    """Raised when a document's front-matter is missing, malformed, or invalid"""


@dataclass
class Document:
    """A loaded content document: validated record plus raw Markdown body"""
    path: Optional[Path]
    collection: Collection
    slug: str
    record: ContentEntry
    body: str


def frontMatter_split(text: str) -> Tuple[str, str]:
    """
    Separate the YAML header from the body.

    Returns:
        (yaml_text, body). yaml_text is "" when the document has no header.
    """
    lines = text.lstrip('﻿').splitlines(keepends=True)
    if not lines or lines[0].strip() != DELIMITER:
        return '', text

    for index in range(1, len(lines)):
        if lines[index].strip() == DELIMITER:
            return ''.join(lines[1:index]), ''.join(lines[index + 1:])

    raise FrontMatterError("Front-matter opened with '---' but never closed")


def record_load(yaml_text: str, collection: Collection) -> ContentEntry:
    """Parse and validate a YAML header for a collection"""
    try:
        data = yaml.safe_load(yaml_text) if yaml_text.strip() else None
    except yaml.YAMLError as e:
        raise FrontMatterError(f"Invalid YAML front-matter: {e}") from e

    if not isinstance(data, dict):
        raise FrontMatterError("Front-matter must be a YAML mapping")

    try:
        return record_classFor(collection).model_validate(data)
    except ValidationError as e:
        raise FrontMatterError(f"Front-matter does not match the {collection.value} schema:\n{e}") from e


def slug_derive(path: Path, content_root: Optional[Path] = None) -> str:
    """
    Slug for a document path.

    `main.md` / `index.md` take their directory name, everything else its
    stem; nested series posts keep the series prefix
    (blog/series-a/post-1/main.md -> "series-a/post-1").
    """
    parts = list(path.parts)
    if content_root is not None:
        try:
            parts = list(path.relative_to(content_root).parts)
        except ValueError:
            pass
    if path.stem in ('main', 'index') and len(parts) > 1:
        parts = parts[:-1]
    else:
        parts[-1] = path.stem
    # drop the collection directory
    if parts and parts[0] in [c.value for c in Collection]:
        parts = parts[1:]
    return '/'.join(parts) or path.stem


def document_load(
    source: Union[str, Path],
    collection: Optional[Collection] = None,
    content_root: Optional[Path] = None,
) -> Document:
    """
    Load a document from a path.

    Args:
        source: Path to the Markdown file
        collection: Explicit collection; inferred from the path otherwise
        content_root: Content directory the slug is computed relative to

    Raises:
        FrontMatterError: header missing, malformed, or failing validation
    """
    path = Path(source)
    text = path.read_text(encoding='utf-8')
    collection = collection or collection_infer(path)

    yaml_text, body = frontMatter_split(text)
    if not yaml_text:
        raise FrontMatterError(f"{path}: no front-matter")
    try:
        record = record_load(yaml_text, collection)
    except FrontMatterError as e:
        raise FrontMatterError(f"{path}: {e}") from e

    return Document(
        path=path,
        collection=collection,
        slug=slug_derive(path, content_root),
        record=record,
        body=body,
    )
