from __future__ import annotations

import shutil
from pathlib import Path

import pytest
from structlog.testing import capture_logs

from orgpress.engine import discover_sources, run_build
from orgpress.errors import ValidationError
from orgpress.registry import build_default_registry


def _site(fixtures_dir: Path, tmp_path: Path) -> Path:
    source = tmp_path / "site"
    shutil.copytree(fixtures_dir / "site", source)
    return source


def test_discover_sources_walks_the_tree(fixtures_dir: Path) -> None:
    root, paths = discover_sources(fixtures_dir / "site")
    assert root == fixtures_dir / "site"
    assert [path.relative_to(root).as_posix() for path in paths] == [
        "broken.org",
        "notes/cycle.org",
        "notes/hello.org",
        "tuples.org",
    ]


def test_discover_single_file(tuples_org: Path) -> None:
    assert discover_sources(tuples_org) == (tuples_org.parent, [tuples_org])


def test_batch_isolates_failing_documents(fixtures_dir: Path, tmp_path: Path) -> None:
    source = _site(fixtures_dir, tmp_path)
    out = tmp_path / "out"

    with capture_logs() as logs:
        result = run_build(
            registry=build_default_registry(),
            target_name="html",
            source=source,
            output_dir=out,
            version="v-test",
        )

    assert [doc.document_id for doc in result.succeeded] == ["notes/hello", "tuples"]
    assert [doc.document_id for doc in result.failed] == ["broken", "notes/cycle"]
    assert "Unterminated #+begin_src" in result.failed[0].error
    assert "a -> b -> a" in result.failed[1].error

    assert (out / "tuples.html").is_file()
    assert (out / "notes" / "hello.html").is_file()
    assert not (out / "broken.html").exists()
    assert (out / "orgpress.css").is_file()

    nested = (out / "notes" / "hello.html").read_text(encoding="utf-8")
    assert '<link rel="stylesheet" href="../orgpress.css">' in nested

    failures = [entry for entry in logs if entry["event"] == "document_build_failed"]
    assert len(failures) == 2
    finished = [entry for entry in logs if entry["event"] == "build_finished"]
    assert finished[0]["failed"] == 2


def test_site_index_lists_metadata_and_failures(fixtures_dir: Path, tmp_path: Path) -> None:
    result = run_build(
        registry=build_default_registry(),
        target_name="latex",
        source=_site(fixtures_dir, tmp_path),
        output_dir=tmp_path / "out",
        version="v-test",
    )
    index = result.site_index()
    assert index["target"] == "latex"
    assert index["version"] == "v-test"
    by_id = {entry["id"]: entry for entry in index["documents"]}
    assert by_id["tuples"]["metadata"]["tags"] == ["swift", "tuples"]
    assert by_id["tuples"]["output"][0].endswith("tuples.tex")
    assert by_id["notes/hello"]["metadata"]["summary"] == ""
    assert [entry["id"] for entry in index["failed"]] == ["broken", "notes/cycle"]
    assert index["assets"] == []


def test_parallel_build_keeps_source_order(fixtures_dir: Path, tmp_path: Path) -> None:
    result = run_build(
        registry=build_default_registry(),
        target_name="html",
        source=_site(fixtures_dir, tmp_path),
        output_dir=tmp_path / "out",
        version="v-test",
        workers=4,
    )
    assert [doc.document_id for doc in result.documents] == [
        "broken",
        "notes/cycle",
        "notes/hello",
        "tuples",
    ]


def test_unknown_target_is_a_validation_error(tmp_path: Path, tuples_org: Path) -> None:
    with pytest.raises(ValidationError, match="Unknown target 'pdf'"):
        run_build(
            registry=build_default_registry(),
            target_name="pdf",
            source=tuples_org,
            output_dir=tmp_path,
            version="v-test",
        )


def test_missing_source_is_a_validation_error(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        discover_sources(tmp_path / "nowhere")


def test_unwritable_output_fails_only_that_document(fixtures_dir: Path, tmp_path: Path) -> None:
    out = tmp_path / "out"
    (out / "notes" / "hello.html").mkdir(parents=True)

    with capture_logs() as logs:
        result = run_build(
            registry=build_default_registry(),
            target_name="html",
            source=_site(fixtures_dir, tmp_path),
            output_dir=out,
            version="v-test",
        )

    assert [doc.document_id for doc in result.succeeded] == ["tuples"]
    assert [doc.document_id for doc in result.failed] == ["broken", "notes/cycle", "notes/hello"]
    assert result.failed[2].error
    assert result.failed[2].metadata is not None
    assert (out / "tuples.html").is_file()
    failed_sources = [entry["source"] for entry in logs if entry["event"] == "document_build_failed"]
    assert failed_sources[-1].endswith("hello.org")
