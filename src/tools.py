"""
blogmark-tools - authoring helpers

Subcommands:
    new <type> [slug]        Scaffold blog/event/news/series/series-post content
    upload <file> [...]      Upload attachments to object storage, print snippets
    list [--category CAT]    List stored objects, newest first

Examples:
    blogmark-tools new blog my-first-post --contentDir content
    blogmark-tools new series-post web-basics/html-intro --contentDir content
    blogmark-tools upload slides.pdf --category downloads
    blogmark-tools list --category audio
"""

import mimetypes
import sys
from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import storagesettings
from .lib.log import LOG, state_connectToLogger
from .lib.scaffold import CONTENT_TYPES, ScaffoldError, Scaffolder
from .lib.storage import StorageService, category_fromMimeType, config_validate, snippet_make


def parser_make() -> ArgumentParser:
    parser = ArgumentParser(prog="blogmark-tools", description="blogmark authoring helpers")
    parser.add_argument("-v", "--verbosity", action="count", default=1, help="Increase output verbosity")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    new = subparsers.add_parser("new", help="Scaffold new content")
    new.add_argument("contentType", choices=CONTENT_TYPES, help="Kind of content to create")
    new.add_argument("slug", nargs="?", default=None, help="Slug (uuid4 when omitted)")
    new.add_argument("--contentDir", default=".", help="Content root holding blog/, news/, events/")

    upload = subparsers.add_parser("upload", help="Upload files to object storage")
    upload.add_argument("files", nargs="+", help="Files to upload")
    upload.add_argument("--category", default=None, help="Storage category (inferred from MIME type when omitted)")

    listing = subparsers.add_parser("list", help="List stored objects")
    listing.add_argument("--category", default=None, help="Only list one category")

    return parser


def new_run(options: Namespace) -> int:
    try:
        result = Scaffolder(Path(options.contentDir)).content_create(options.contentType, options.slug)
    except ScaffoldError as e:
        print(f"❌ エラー: {e}", file=sys.stderr)
        return 1
    print(f"✅ 作成しました: {result.path}")
    print(f"🌐 URL: {result.url}")
    return 0


def upload_run(options: Namespace) -> int:
    missing = config_validate(storagesettings)
    if missing:
        print(f"Error: storage is not configured (missing: {', '.join(missing)})", file=sys.stderr)
        return 1

    service = StorageService(storagesettings)
    status = 0
    for name in options.files:
        path = Path(name)
        if not path.is_file():
            print(f"Error: file not found: {path}", file=sys.stderr)
            status = 1
            continue
        mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        category = options.category or category_fromMimeType(mime_type, path.name)
        result = service.upload(path.read_bytes(), path.name, mime_type, category)
        if not result.success:
            print(f"Error uploading {path}: {result.error}", file=sys.stderr)
            status = 1
            continue
        LOG(f"{result.key} ({result.size} bytes)", level=2)
        print(result.url)
        print(snippet_make(result))
    return status


def list_run(options: Namespace) -> int:
    missing = config_validate(storagesettings)
    if missing:
        print(f"Error: storage is not configured (missing: {', '.join(missing)})", file=sys.stderr)
        return 1

    result = StorageService(storagesettings).list(options.category)
    if not result.success:
        print(f"Error listing objects: {result.error}", file=sys.stderr)
        return 1
    for obj in result.objects:
        modified = obj.last_modified.isoformat() if obj.last_modified else "-"
        print(f"{modified}  {obj.size:>10}  {obj.name}  {obj.url}")
    return 0


COMMANDS = {
    "new": new_run,
    "upload": upload_run,
    "list": list_run,
}


def main(argv: Optional[List[str]] = None) -> int:
    options = parser_make().parse_args(argv)
    state_connectToLogger(options)
    return COMMANDS[options.command](options)


if __name__ == "__main__":
    sys.exit(main())
