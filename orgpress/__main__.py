from __future__ import annotations

import argparse
import json
import subprocess
from pathlib import Path
import sys

from .engine import run_build
from .errors import PublishError
from .log import configure_logging
from .registry import TargetRegistry, build_default_registry


def _resolve_version(cwd: Path | None) -> str:
    """
    Resolve version from git (in precedence order): tag at HEAD, short commit, else 'undefined'.
    Uses cwd as the working directory for git (the source directory).
    """
    work_dir = cwd if cwd is not None and cwd.exists() else Path.cwd()
    if work_dir.is_file():
        work_dir = work_dir.parent
    try:
        r = subprocess.run(
            ["git", "describe", "--tags", "--exact-match"],
            cwd=work_dir,
            capture_output=True,
            text=True,
            timeout=5,
        )
        if r.returncode == 0 and r.stdout:
            return r.stdout.strip()
        r = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=work_dir,
            capture_output=True,
            text=True,
            timeout=5,
        )
        if r.returncode == 0 and r.stdout:
            return r.stdout.strip()
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass
    return "undefined"


def _build_registry() -> TargetRegistry:
    # Built-in targets register themselves when orgpress.targets is imported.
    return build_default_registry()


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m orgpress",
        description="Render Org-mode posts into a static site.",
    )
    parser.add_argument("--target", required=False, help="Render target (e.g. html, latex).")
    parser.add_argument("--source", help="An .org file or a directory searched recursively.")
    parser.add_argument("--out", help="Output directory for rendered files.")
    parser.add_argument(
        "--version",
        default=None,
        metavar="VERSION",
        help="Build version. If omitted: git tag at HEAD, else short commit, else 'undefined'.",
    )
    parser.add_argument(
        "--index",
        default="site-index.json",
        help="Site index file name (written under --out).",
    )
    parser.add_argument(
        "--list-targets",
        action="store_true",
        help="List available render targets and exit.",
    )
    parser.add_argument(
        "--config",
        help="Optional JSON config file providing target-specific options.",
    )
    parser.add_argument(
        "--option",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override or add a single target option (may be repeated).",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of documents rendered concurrently.",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    parser.add_argument(
        "--log-format",
        choices=("console", "json"),
        default="console",
        help="Log output format.",
    )
    return parser.parse_args(argv)


def _parse_extra_options(config_path: str | None, options: list[str]) -> dict:
    extra: dict[str, object] = {}

    if config_path:
        config_file = Path(config_path)
        payload = json.loads(config_file.read_text(encoding="utf-8"))
        if isinstance(payload, dict):
            extra.update(payload)
        else:
            raise ValueError(f"Config file {config_file} must contain a JSON object.")

    for item in options or []:
        if "=" not in item:
            raise ValueError(f"Invalid --option value '{item}'. Expected KEY=VALUE.")
        key, raw_value = item.split("=", 1)
        key = key.strip()
        raw_value = raw_value.strip()
        if not key:
            raise ValueError(f"Invalid --option value '{item}': empty key.")

        # bool -> int -> float -> str
        lowered = raw_value.lower()
        if lowered in {"true", "false"}:
            value: object = lowered == "true"
        else:
            try:
                value = int(raw_value)
            except ValueError:
                try:
                    value = float(raw_value)
                except ValueError:
                    value = raw_value
        extra[key] = value

    return extra


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(args.log_level, args.log_format)
    registry = _build_registry()

    if args.list_targets:
        suffixes = registry.suffixes()
        if suffixes:
            print("Available targets:")
            for name, suffix in suffixes.items():
                print(f"  - {name} ({suffix})")
        else:
            print("No targets are currently registered.")
        return 0

    if not args.target:
        raise SystemExit("Error: --target is required unless --list-targets is used.")
    if not args.source or not args.out:
        raise SystemExit("Error: --source and --out are required for a build.")
    if args.workers < 1:
        raise SystemExit("Error: --workers must be at least 1.")

    version = args.version if args.version is not None else _resolve_version(Path(args.source))
    try:
        extra = _parse_extra_options(args.config, args.option)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Error: {exc}") from exc

    try:
        result = run_build(
            registry=registry,
            target_name=args.target,
            source=Path(args.source),
            output_dir=Path(args.out),
            version=version,
            extra=extra,
            workers=args.workers,
        )
    except PublishError as exc:
        print(f"Build failed: {exc}", file=sys.stderr)
        return 1

    index_path = Path(args.out) / args.index
    index_path.write_text(json.dumps(result.site_index(), indent=2), encoding="utf-8")

    print(f"Rendered {len(result.succeeded)} document(s) to {Path(args.out)}")
    print(f"Wrote site index: {index_path}")
    if result.failed:
        print(f"{len(result.failed)} document(s) failed:", file=sys.stderr)
        for failure in result.failed:
            print(f"  - {failure.source}: {failure.error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
