"""Main document assembly: preamble, body and changelog."""
from __future__ import annotations

from ...ir import Document
from .escape import _escape_latex
from .rendering import _LatexWriter

PACKAGES = (
    "\\usepackage[utf8]{inputenc}",
    "\\usepackage[T1]{fontenc}",
    "\\usepackage{graphicx}",
    "\\usepackage{minted}",
    "\\usepackage{footmisc}",
)


def _hypersetup(document: Document) -> str:
    entries = [f"pdftitle={{{_escape_latex(document.title)}}}"]
    if document.metadata.author:
        entries.append(f"pdfauthor={{{_escape_latex(document.metadata.author)}}}")
    if document.keywords:
        entries.append(f"pdfkeywords={{{_escape_latex(', '.join(document.keywords))}}}")
    if document.summary:
        entries.append(f"pdfsubject={{{_escape_latex(document.summary)}}}")
    return "\\hypersetup{" + ", ".join(entries) + "}"


def _build_tex(document: Document, version: str, *, documentclass: str = "article") -> str:
    writer = _LatexWriter(document)
    # The body is rendered first so footnote numbering follows reading order.
    body = writer.body()
    lines = [
        f"% Generated by orgpress {version}",
        f"% Source: {document.source or '<string>'}",
        f"\\documentclass[11pt]{{{documentclass}}}",
        *PACKAGES,
        "\\usepackage{hyperref}",
        _hypersetup(document),
        "",
        f"\\title{{{_escape_latex(document.title)}}}",
        f"\\author{{{_escape_latex(document.metadata.author)}}}",
        f"\\date{{{_escape_latex(document.metadata.date)}}}",
        "",
        "\\begin{document}",
        "\\maketitle",
        "",
    ]
    if document.summary:
        lines.extend(
            ["\\begin{abstract}", _escape_latex(document.summary), "\\end{abstract}", ""]
        )
    lines.extend(body)
    lines.extend(writer.changelog())
    lines.append("\\end{document}")
    lines.append("")
    return "\n".join(lines)
