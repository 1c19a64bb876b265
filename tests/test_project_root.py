import pytest

from docindex.errors import ProjectRootNotFoundError
from docindex.project_root import (
    ensure_vector_data_dir,
    find_project_root,
    get_index_meta_path,
    get_vector_store_path,
)


def test_finds_marker_in_ancestor(tmp_path):
    (tmp_path / ".system").mkdir()
    nested = tmp_path / "edit" / "drafts"
    nested.mkdir(parents=True)

    assert find_project_root(nested) == tmp_path.resolve()


def test_marker_must_be_a_directory(tmp_path):
    (tmp_path / ".system").write_text("not a dir", encoding="utf-8")
    with pytest.raises(ProjectRootNotFoundError):
        find_project_root(tmp_path, marker=".system")


def test_custom_marker(tmp_path):
    (tmp_path / ".docs-root").mkdir()
    assert find_project_root(tmp_path, marker=".docs-root") == tmp_path.resolve()


def test_data_paths_live_under_vector_data_dir(tmp_path):
    data_dir = ensure_vector_data_dir(tmp_path)

    assert data_dir.is_dir()
    assert get_vector_store_path(tmp_path) == data_dir / "vector_store.json"
    assert get_index_meta_path(tmp_path) == data_dir / "index_meta.json"
