"""Org-mode static content pipeline: parse, resolve noweb references and render."""

from .engine import publish, run_build
from .errors import (
    CyclicReferenceError,
    DuplicateFootnoteError,
    MalformedBlockError,
    PublishError,
    StructuralError,
    UndefinedReferenceError,
    UnresolvedFootnoteError,
    ValidationError,
)
from .metadata import extract_metadata
from .noweb import resolve_references
from .parsing import parse_document, parse_file

__all__ = [
    "CyclicReferenceError",
    "DuplicateFootnoteError",
    "MalformedBlockError",
    "PublishError",
    "StructuralError",
    "UndefinedReferenceError",
    "UnresolvedFootnoteError",
    "ValidationError",
    "extract_metadata",
    "parse_document",
    "parse_file",
    "publish",
    "resolve_references",
    "run_build",
]
