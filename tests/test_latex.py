from __future__ import annotations

from pathlib import Path

import pytest

from orgpress.base import BuildOptions
from orgpress.engine import publish
from orgpress.errors import UnresolvedFootnoteError
from orgpress.parsing import parse_document, parse_file
from orgpress.targets.latex import LatexTarget
from orgpress.targets.latex.escape import _escape_latex
from orgpress.targets.latex.rendering import _heading_for_depth


def _tex(text: str, **extra) -> str:
    return publish(parse_document(text), LatexTarget(), BuildOptions(extra=extra))


def test_fixture_renders_article(tuples_org: Path) -> None:
    tex = publish(parse_file(tuples_org), LatexTarget(), BuildOptions(version="v-test"))
    assert "% Generated by orgpress v-test" in tex
    assert "\\documentclass[11pt]{article}" in tex
    assert "pdfkeywords={swift, tuples, pattern matching}" in tex
    assert "\\title{Tuples in Swift}" in tex
    assert "\\author{Ana Lopez}" in tex
    assert "\\date{2016-03-12}" in tex
    assert "\\begin{abstract}" in tex
    assert "\\section{Introduction}" in tex
    assert "\\subsection{Returning pairs}" in tex
    assert "\\begin{minted}{swift}\nfunc report() {\n    let bananas" in tex
    assert "\\textbf{return values}" in tex
    assert "\\href{https://docs.swift.org/swift-book/}{Swift book}" in tex
    assert "\\begin{quote}" in tex
    assert "\\section*{Changelog}" in tex
    assert tex.rstrip().endswith("\\end{document}")


def test_footnotes_render_at_reference_site(tuples_org: Path) -> None:
    tex = publish(parse_file(tuples_org), LatexTarget())
    assert "\\footnote{\\label{fn:1}A tuple type is written as a parenthesised list of types.}" in tex
    assert "\\footnote{\\label{fn:2}Pattern matching is covered below.}" in tex
    assert tex.count("\\footref{fn:1}") == 1


def test_code_without_language_uses_verbatim() -> None:
    tex = _tex(": $ swift build\n")
    assert "\\begin{verbatim}\n$ swift build\n\\end{verbatim}" in tex


def test_documentclass_option() -> None:
    assert "\\documentclass[11pt]{report}" in _tex("Text.\n", documentclass="report")


def test_special_characters_are_escaped() -> None:
    assert _escape_latex("50% of $x & y_1 {~^} \\ <>") == (
        "50\\% of \\$x \\& y\\_1 \\{\\textasciitilde{}\\textasciicircum{}\\}"
        " \\textbackslash{} \\textless{}\\textgreater{}"
    )


def test_heading_commands_by_depth() -> None:
    assert [_heading_for_depth(depth) for depth in range(1, 7)] == [
        "\\section",
        "\\subsection",
        "\\subsubsection",
        "\\paragraph",
        "\\subparagraph",
        "\\subparagraph",
    ]


def test_unresolved_footnote_fails() -> None:
    with pytest.raises(UnresolvedFootnoteError):
        _tex("Dangling[fn:nowhere].\n")


def test_render_without_validation_still_rejects_unknown_footnote() -> None:
    with pytest.raises(UnresolvedFootnoteError):
        LatexTarget().render(parse_document("Dangling[fn:nowhere].\n"))


def test_footnote_labels_are_keyed_by_number() -> None:
    tex = _tex("One[fn:a_b] and two[fn:a-b], one again[fn:a_b].\n\n[fn:a_b] Under.\n\n[fn:a-b] Dash.\n")
    assert "\\footnote{\\label{fn:1}Under.}" in tex
    assert "\\footnote{\\label{fn:2}Dash.}" in tex
    assert tex.count("\\footref{fn:1}") == 1
    assert "\\footref{fn:2}" not in tex


def test_heading_with_footnote_gets_plain_short_title() -> None:
    tex = _tex("* Intro[fn:n]\n\nBody.\n\n[fn:n] Note.\n")
    assert "\\section[Intro]{Intro\\footnote{\\label{fn:1}Note.}}" in tex
    assert "\\section{Intro" not in tex
