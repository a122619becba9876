from __future__ import annotations

from pathlib import Path

from orgpress.engine import run_build
from orgpress.registry import build_default_registry


def _fixtures_root() -> Path:
    return Path(__file__).resolve().parent / "fixtures"


def test_html_and_latex_pipeline_smoke(tmp_path: Path) -> None:
    """
    Smoke test: run every built-in target against the fixture post.

    This exercises the full parse -> resolve -> validate -> render pipeline
    and asserts that output files are written under the requested output
    directory.
    """
    source = _fixtures_root() / "tuples.org"
    registry = build_default_registry()

    for target_name, suffix in (("html", ".html"), ("latex", ".tex")):
        output_dir = tmp_path / target_name
        result = run_build(
            registry=registry,
            target_name=target_name,
            source=source,
            output_dir=output_dir,
            version="v-test",
            extra={},
        )

        assert result.artifacts, f"Expected at least one {target_name} artifact."
        assert not result.failed

        rendered: str | None = None
        for artifact in result.artifacts:
            assert artifact.path.is_file()
            assert str(artifact.path).startswith(str(output_dir))
            if artifact.document_id == "tuples" and artifact.path.suffix == suffix:
                rendered = artifact.path.read_text(encoding="utf-8")

        # The noweb reference is expanded before rendering in every target.
        assert rendered is not None, f"Expected a rendered {suffix} file."
        assert "<<banana-count>>" not in rendered
        assert "&lt;&lt;banana-count&gt;&gt;" not in rendered
        assert "let bananas = (ripe: 4, green: 7)" in rendered
