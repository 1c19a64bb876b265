"""
CLI tests: exit codes and printed output of the reindex/search/inspect scripts.
"""

import pytest

from conftest import FakeEmbedder, write_doc
from docindex.config import settings
from docindex.project_root import get_docs_dir
from scripts import inspect_index, reindex, search


@pytest.fixture
def project(tmp_path, monkeypatch):
    root = tmp_path / "project"
    (root / ".system").mkdir(parents=True)
    get_docs_dir(root).mkdir(parents=True)
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def fake_provider(monkeypatch):
    embedder = FakeEmbedder(fail_on={"BOOM"})
    embedder.client_kwargs = {}

    def build(**kwargs):
        embedder.client_kwargs = kwargs
        return embedder

    monkeypatch.setattr(reindex, "EmbeddingsClient", build)
    monkeypatch.setattr(search, "EmbeddingsClient", build)
    return embedder


class TestReindexCommand:
    def test_reports_changes_and_summary(self, project, fake_provider, capsys):
        docs = get_docs_dir(project)
        write_doc(docs, "intro.md", "welcome to the docs")
        write_doc(docs, "broken.md", "BOOM")

        reindex.main([])

        out = capsys.readouterr().out
        assert "new: intro.md" in out
        assert "FAILED: broken.md" in out
        assert "new:     1 files" in out
        assert "failed:  1 files" in out
        assert "total:   2 files" in out

    def test_second_run_skips(self, project, fake_provider, capsys):
        write_doc(get_docs_dir(project), "intro.md", "welcome")
        reindex.main([])
        capsys.readouterr()

        reindex.main([])

        out = capsys.readouterr().out
        assert "skipped: 1 files" in out
        assert "new:     0 files" in out

    def test_missing_project_root_exits_non_zero(self, tmp_path, monkeypatch, fake_provider):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(SystemExit) as exc_info:
            reindex.main([])
        assert exc_info.value.code == 1

    def test_missing_credential_exits_non_zero(self, project, monkeypatch, capsys):
        monkeypatch.setattr(settings, "openai_api_key", None)
        with pytest.raises(SystemExit) as exc_info:
            reindex.main([])
        assert exc_info.value.code == 1
        assert "OPENAI_API_KEY" in capsys.readouterr().err


class TestSearchCommand:
    def test_empty_store_hint(self, project, fake_provider, capsys):
        search.main(["anything"])

        assert "Vector store is empty" in capsys.readouterr().out
        assert fake_provider.calls == []

    def test_prints_ranked_results(self, project, fake_provider, capsys):
        write_doc(get_docs_dir(project), "guide/cats.md", "cats purr softly")
        write_doc(get_docs_dir(project), "dogs.md", "dogs bark loudly")
        reindex.main([])
        capsys.readouterr()

        search.main(["cats", "purr", "softly", "--top-k", "1"])

        out = capsys.readouterr().out
        assert 'Query: "cats purr softly"' in out
        assert "Results: 1" in out
        assert "1. cats.md" in out
        assert "path: guide/cats.md" in out
        assert "similarity: 100.00%" in out

    def test_query_embedding_is_not_retried(self, project, fake_provider, capsys):
        write_doc(get_docs_dir(project), "intro.md", "welcome")
        reindex.main([])

        search.main(["welcome"])

        assert fake_provider.client_kwargs == {"max_retries": 0}

    def test_query_embedding_failure_exits_non_zero(self, project, fake_provider, capsys):
        write_doc(get_docs_dir(project), "intro.md", "welcome")
        reindex.main([])

        with pytest.raises(SystemExit) as exc_info:
            search.main(["BOOM"])
        assert exc_info.value.code == 1
        assert "Search failed" in capsys.readouterr().err


class TestInspectCommand:
    def test_lists_records(self, project, fake_provider, capsys):
        write_doc(get_docs_dir(project), "intro.md", "welcome")
        reindex.main([])
        capsys.readouterr()

        inspect_index.main(["--limit", "10"])

        out = capsys.readouterr().out
        assert "Total records in store: 1" in out
        assert "Indexed documents: 1" in out
        assert "#1: intro.md:chunk:0" in out
        assert '"source_path": "intro.md"' in out
