"""
Build pipeline stage tests
"""

from argparse import Namespace

import pytest

from blogmark.__main__ import content_collect, env_check, results_report, site_compile
from blogmark.models import ProgramState, pipeline

POST = """---
title: "Post"
description: "d"
pubDate: 2024-05-01
---

Body text.
"""


def state_make(tmp_path, **overrides) -> ProgramState:
    values = {"inputdir": tmp_path, "outputdir": tmp_path / "out", "verbosity": 0, "contentSubdir": "content"}
    values.update(overrides)
    return ProgramState(**values)


class TestStages:
    """Test the stages individually and chained"""

    def test_state_from_namespace(self, tmp_path):
        options = Namespace(contentSubdir="content", includeDrafts=True, strict=False, verbosity=2, extra="x")
        state = ProgramState.state_createFromNamespace(options, tmp_path, tmp_path / "out")
        assert state.includeDrafts is True
        assert state.verbosity == 2
        assert state.inputdir == tmp_path

    def test_env_check_missing_content(self, tmp_path):
        with pytest.raises(SystemExit):
            env_check(state_make(tmp_path))

    def test_env_check(self, tmp_path):
        (tmp_path / "content").mkdir()
        state = env_check(state_make(tmp_path))
        assert state.envOK is True
        assert state.contentRoot == tmp_path / "content"
        assert (tmp_path / "out").is_dir()

    def test_pipeline(self, tmp_path):
        post = tmp_path / "content" / "blog" / "post" / "main.md"
        post.parent.mkdir(parents=True)
        post.write_text(POST, encoding="utf-8")

        state = pipeline(state_make(tmp_path), env_check, content_collect, site_compile, results_report)

        assert state.compileResult["document_count"] == 1
        assert len(state.documents) == 1
        assert (tmp_path / "out" / "blog" / "post" / "index.html").exists()
        assert state.stagesRun == ["env_check", "content_collect", "site_compile", "results_report"]

    def test_stages_do_not_mutate_input(self, tmp_path):
        (tmp_path / "content").mkdir()
        initial = state_make(tmp_path)
        env_check(initial)
        assert initial.envOK is False
        assert initial.stagesRun == []

    def test_copy_does_not_share_stage_list(self, tmp_path):
        state = state_make(tmp_path)
        state.stagesRun.append("env_check")
        copied = state.copy()
        copied.stagesRun.append("content_collect")
        assert state.stagesRun == ["env_check"]
        assert copied.inputdir == state.inputdir

    def test_strict_parse_error_exits(self, tmp_path):
        post = tmp_path / "content" / "blog" / "post" / "main.md"
        post.parent.mkdir(parents=True)
        post.write_text(POST + "\n```python\nunclosed\n", encoding="utf-8")
        with pytest.raises(SystemExit):
            pipeline(state_make(tmp_path, strict=True), env_check, content_collect, site_compile)

    def test_report_requires_result(self, tmp_path):
        with pytest.raises(SystemExit):
            results_report(state_make(tmp_path))
