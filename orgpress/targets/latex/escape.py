"""LaTeX escaping and label utilities."""
from __future__ import annotations

import re

LATEX_SPECIAL_RE = re.compile(r"[\\{}$&#_%~^<>]")
LABEL_SAFE_RE = re.compile(r"[^a-z0-9:-]+")

_REPLACEMENTS = {
    "\\": "\\textbackslash{}",
    "{": "\\{",
    "}": "\\}",
    "$": "\\$",
    "&": "\\&",
    "#": "\\#",
    "_": "\\_",
    "%": "\\%",
    "~": "\\textasciitilde{}",
    "^": "\\textasciicircum{}",
    "<": "\\textless{}",
    ">": "\\textgreater{}",
}


def _escape_latex(value: str) -> str:
    return LATEX_SPECIAL_RE.sub(lambda match: _REPLACEMENTS[match.group(0)], value)


def _escape_url(url: str) -> str:
    # \href takes the URL almost verbatim; only these break its argument.
    return url.replace("\\", "\\\\").replace("#", "\\#").replace("%", "\\%")


def _label_key(text: str) -> str:
    key = text.lower().replace("_", "-").replace(" ", "-")
    return LABEL_SAFE_RE.sub("-", key).strip("-")
