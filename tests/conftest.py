from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def tuples_org(fixtures_dir: Path) -> Path:
    return fixtures_dir / "tuples.org"
