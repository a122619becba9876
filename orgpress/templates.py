from __future__ import annotations

from pathlib import Path

from .base import GeneratedArtifact


def get_template_dir(target_name: str) -> Path:
    """
    Return the template directory for a given target.

    By convention, target assets live under:
        orgpress/templates/<target_name>/
    """
    return Path(__file__).resolve().parent / "templates" / target_name


def copy_asset(src: Path, dest_dir: Path, *, artifact_type: str = "asset") -> GeneratedArtifact:
    """
    Copy a template or static asset into the destination directory.

    Returns a GeneratedArtifact pointing at the copied file so callers may
    include it in the build report.
    """
    if not src.exists():
        raise FileNotFoundError(f"Asset not found: {src}")
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest = dest_dir / src.name
    dest.write_bytes(src.read_bytes())
    return GeneratedArtifact(path=dest, artifact_type=artifact_type)
