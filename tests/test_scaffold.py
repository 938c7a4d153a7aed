"""
Content scaffolding tests
"""

import json
import re
from datetime import datetime

import pytest

from blogmark.lib.frontmatter import document_load
from blogmark.lib.parser import Parser
from blogmark.lib.scaffold import SHOWCASE, ScaffoldError, Scaffolder, slug_normalize, title_fromSlug
from blogmark.lib.tree import nodes_find
from blogmark.models.content import JST, BlogEntry, Collection, EventEntry, SeriesInfo

NOW = datetime(2024, 5, 1, 10, 0, tzinfo=JST)


@pytest.fixture
def scaffolder(tmp_path) -> Scaffolder:
    return Scaffolder(tmp_path / "content", author="Tester", now=NOW)


class TestSlugs:
    """Test slug helpers"""

    @pytest.mark.parametrize("raw,expected", [
        ("Hello World!", "hello-world"),
        ("--a__b--", "a-b"),
        ("already-fine", "already-fine"),
        ("日本語", ""),
    ])
    def test_slug_normalize(self, raw, expected):
        assert slug_normalize(raw) == expected

    def test_keep_slash(self):
        assert slug_normalize("My Series/Part 1", keep_slash=True) == "my-series/part-1"
        assert slug_normalize("My Series/Part 1") == "my-series-part-1"

    def test_title_from_slug(self):
        assert title_fromSlug("html-basics") == "Html Basics"


class TestArticles:
    """Test blog/news/event skeletons"""

    def test_blog(self, scaffolder):
        result = scaffolder.content_create("blog", "My Post")
        assert result.slug == "my-post"
        assert result.url == "/blog/my-post"
        assert result.path == scaffolder.content_root / "blog" / "my-post" / "main.md"
        assert (result.path.parent / "README.md").exists()

        document = document_load(result.path, Collection.BLOG, scaffolder.content_root)
        assert isinstance(document.record, BlogEntry)
        assert document.record.title == "New Blog Post"
        assert document.record.author == "Tester"
        assert document.record.pubDate == NOW
        assert document.record.draft is False
        assert document.slug == "my-post"

    def test_event(self, scaffolder):
        result = scaffolder.content_create("event", "meetup")
        assert result.url == "/events/meetup"
        document = document_load(result.path, Collection.EVENTS, scaffolder.content_root)
        assert isinstance(document.record, EventEntry)
        assert document.record.eventDate == NOW
        assert document.record.location == "TBD"

    def test_news_directory(self, scaffolder):
        result = scaffolder.content_create("news", "launch")
        assert result.path.parent.parent.name == "news"

    def test_uuid_slug_when_omitted(self, scaffolder):
        result = scaffolder.content_create("blog")
        assert re.fullmatch(r'[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}', result.slug)

    def test_existing_article(self, scaffolder):
        scaffolder.content_create("blog", "dup")
        with pytest.raises(ScaffoldError):
            scaffolder.content_create("blog", "dup")

    def test_unknown_type(self, scaffolder):
        with pytest.raises(ScaffoldError):
            scaffolder.content_create("podcast", "x")

    def test_empty_slug(self, scaffolder):
        with pytest.raises(ScaffoldError):
            scaffolder.content_create("blog", "!!!")

    def test_showcase_body(self, scaffolder):
        result = scaffolder.content_create("blog", "demo")
        text = result.path.read_text(encoding="utf-8")
        assert ":::slider" in text
        assert "```javascript:example.js" in text


class TestShowcase:
    """The showcase body parses into the expected directives"""

    def test_directives(self):
        tree = Parser(SHOWCASE, strict=False).parse()
        names = [node.name for node in nodes_find(tree, "containerDirective")]
        assert names == ["info", "warning", "danger", "success", "slider", "download", "audio"]


class TestSeries:
    """Test series and series-post skeletons"""

    def test_series(self, scaffolder):
        result = scaffolder.content_create("series", "html-basics")
        assert result.url == "/series/html-basics"
        info = SeriesInfo.model_validate(json.loads(result.path.read_text(encoding="utf-8")))
        assert info.name == "Html Basics"
        assert info.icon == "📚"

    def test_existing_series(self, scaffolder):
        scaffolder.content_create("series", "s")
        with pytest.raises(ScaffoldError):
            scaffolder.content_create("series", "s")

    def test_series_post(self, scaffolder):
        scaffolder.content_create("series", "html-basics")
        result = scaffolder.content_create("series-post", "html-basics/first-steps")
        assert result.url == "/blog/html-basics/first-steps"

        document = document_load(result.path, Collection.BLOG, scaffolder.content_root)
        assert document.slug == "html-basics/first-steps"
        assert document.record.seriesId == "html-basics"
        assert document.record.title == "First Steps"
        assert document.record.description == "Html Basicsシリーズの記事"
        assert document.record.tags == ["html-basics", "シリーズ"]

    def test_series_post_requires_series(self, scaffolder):
        with pytest.raises(ScaffoldError):
            scaffolder.content_create("series-post", "missing/post")

    def test_series_post_slug_form(self, scaffolder):
        with pytest.raises(ScaffoldError):
            scaffolder.content_create("series-post", "no-slash")

    def test_invalid_series_json_falls_back(self, scaffolder):
        series_dir = scaffolder.content_root / "blog" / "broken"
        series_dir.mkdir(parents=True)
        (series_dir / "series.json").write_text('{"description": 1}', encoding="utf-8")
        assert scaffolder.seriesInfo_load(series_dir).name == "broken"
