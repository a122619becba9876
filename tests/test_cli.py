from __future__ import annotations

import json
from pathlib import Path

import pytest

from orgpress.__main__ import _parse_extra_options, main


def test_list_targets(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--list-targets"]) == 0
    out = capsys.readouterr().out
    assert "  - html" in out
    assert "  - latex" in out


def test_build_writes_output_and_site_index(tmp_path: Path, tuples_org: Path) -> None:
    out = tmp_path / "out"
    code = main(
        [
            "--target",
            "html",
            "--source",
            str(tuples_org),
            "--out",
            str(out),
            "--version",
            "v-cli",
            "--option",
            "lang=sv",
        ]
    )
    assert code == 0
    assert '<html lang="sv">' in (out / "tuples.html").read_text(encoding="utf-8")
    index = json.loads((out / "site-index.json").read_text(encoding="utf-8"))
    assert index["version"] == "v-cli"
    assert index["documents"][0]["metadata"]["title"] == "Tuples in Swift"
    assert index["failed"] == []


def test_failed_documents_exit_non_zero(
    tmp_path: Path, fixtures_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    out = tmp_path / "out"
    code = main(
        [
            "--target",
            "latex",
            "--source",
            str(fixtures_dir / "site"),
            "--out",
            str(out),
            "--version",
            "v-cli",
            "--index",
            "index.json",
        ]
    )
    assert code == 1
    assert "2 document(s) failed" in capsys.readouterr().err
    index = json.loads((out / "index.json").read_text(encoding="utf-8"))
    assert len(index["failed"]) == 2


def test_unknown_target_exits_non_zero(tmp_path: Path, tuples_org: Path) -> None:
    code = main(["--target", "pdf", "--source", str(tuples_org), "--out", str(tmp_path)])
    assert code == 1


def test_missing_arguments_exit() -> None:
    with pytest.raises(SystemExit):
        main(["--target", "html"])


def test_extra_options_coercion(tmp_path: Path) -> None:
    config = tmp_path / "options.json"
    config.write_text(json.dumps({"lang": "de", "standalone": True}), encoding="utf-8")
    extra = _parse_extra_options(
        str(config), ["standalone=false", "depth=3", "ratio=0.5", "stylesheet=site.css"]
    )
    assert extra == {
        "lang": "de",
        "standalone": False,
        "depth": 3,
        "ratio": 0.5,
        "stylesheet": "site.css",
    }


def test_malformed_option_is_rejected() -> None:
    with pytest.raises(ValueError):
        _parse_extra_options(None, ["no-equals-sign"])
