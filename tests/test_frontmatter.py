"""
Front-matter loading tests
"""

from datetime import timedelta
from pathlib import Path

import pytest

from blogmark.lib.frontmatter import (
    FrontMatterError,
    document_load,
    frontMatter_split,
    record_load,
    slug_derive,
)
from blogmark.models.content import BlogEntry, Collection, EventEntry, NewsEntry

BLOG_HEADER = """title: "はじめての投稿"
description: "説明"
pubDate: 2024-05-01
tags: [python, blog]
"""


class TestSplit:
    """Test frontMatter_split()"""

    def test_split(self):
        yaml_text, body = frontMatter_split("---\ntitle: x\n---\n# Body\n")
        assert yaml_text == "title: x\n"
        assert body == "# Body\n"

    def test_no_header(self):
        assert frontMatter_split("# Body") == ("", "# Body")

    def test_unclosed_header(self):
        with pytest.raises(FrontMatterError):
            frontMatter_split("---\ntitle: x\n")


class TestRecords:
    """Test record_load() per collection"""

    def test_blog_record(self):
        record = record_load(BLOG_HEADER, Collection.BLOG)
        assert isinstance(record, BlogEntry)
        assert record.title == "はじめての投稿"
        assert record.tags == ["python", "blog"]
        assert record.author == "創技 光"
        assert record.draft is False
        assert record.seriesId is None

    def test_naive_date_is_jst(self):
        record = record_load(BLOG_HEADER, Collection.BLOG)
        assert record.pubDate.year == 2024
        assert record.pubDate.utcoffset() == timedelta(hours=9)

    def test_aware_string_date_kept(self):
        header = 'title: t\ndescription: d\npubDate: "2024-05-01T10:00:00+00:00"\n'
        record = record_load(header, Collection.NEWS)
        assert isinstance(record, NewsEntry)
        assert record.pubDate.utcoffset() == timedelta(0)

    def test_event_record(self):
        header = BLOG_HEADER + 'eventDate: "2024-06-01 18:00"\nlocation: "東京"\n'
        record = record_load(header, Collection.EVENTS)
        assert isinstance(record, EventEntry)
        assert record.eventDate.hour == 18
        assert record.location == "東京"

    def test_event_requires_event_date(self):
        with pytest.raises(FrontMatterError):
            record_load(BLOG_HEADER, Collection.EVENTS)

    def test_missing_title(self):
        with pytest.raises(FrontMatterError):
            record_load("description: d\npubDate: 2024-05-01\n", Collection.BLOG)

    def test_invalid_yaml(self):
        with pytest.raises(FrontMatterError):
            record_load("title: [unclosed\n", Collection.BLOG)

    def test_not_a_mapping(self):
        with pytest.raises(FrontMatterError):
            record_load("- a\n- b\n", Collection.BLOG)


class TestDocuments:
    """Test document_load() and slugs"""

    def test_load(self, tmp_path):
        path = tmp_path / "content" / "blog" / "hello" / "main.md"
        path.parent.mkdir(parents=True)
        path.write_text(f"---\n{BLOG_HEADER}---\n\n# Hello\n", encoding="utf-8")
        document = document_load(path, Collection.BLOG, tmp_path / "content")
        assert document.slug == "hello"
        assert document.collection == Collection.BLOG
        assert document.body.strip() == "# Hello"

    def test_missing_header(self, tmp_path):
        path = tmp_path / "post.md"
        path.write_text("# no header\n", encoding="utf-8")
        with pytest.raises(FrontMatterError):
            document_load(path, Collection.BLOG)

    @pytest.mark.parametrize("relative,slug", [
        ("blog/hello/main.md", "hello"),
        ("blog/series-a/post-1/main.md", "series-a/post-1"),
        ("news/launch.md", "launch"),
        ("events/meetup/index.md", "meetup"),
    ])
    def test_slug_derive(self, relative, slug):
        root = Path("/site/content")
        assert slug_derive(root / relative, root) == slug
