from __future__ import annotations

from orgpress.ir import Bold, Code, FootnoteRef, Link, PlainText
from orgpress.parsing import FootnoteLabels, parse_inline


def _parse(text: str):
    return parse_inline(text, FootnoteLabels())


def test_emphasis_code_and_links() -> None:
    spans, footnotes = _parse("A *bold* word, ~code~ and =verb= in [[https://x.org][a link]].")
    assert spans == (
        PlainText("A "),
        Bold("bold"),
        PlainText(" word, "),
        Code("code"),
        PlainText(" and "),
        Code("verb", verbatim=True),
        PlainText(" in "),
        Link(url="https://x.org", text="a link"),
        PlainText("."),
    )
    assert footnotes == ()


def test_dangling_marker_stays_literal() -> None:
    spans, _ = _parse("a *dangling marker and 2*3 maths")
    assert spans == (PlainText("a *dangling marker and 2*3 maths"),)


def test_markup_inside_code_is_literal() -> None:
    spans, _ = _parse("~a *b* [[c]]~")
    assert spans == (Code("a *b* [[c]]"),)


def test_emphasis_needs_word_borders() -> None:
    spans, _ = _parse("snake*case*name")
    assert spans == (PlainText("snake*case*name"),)


def test_anonymous_footnote_is_defined_inline() -> None:
    spans, footnotes = _parse("text[fn:: note *here*]")
    assert spans == (PlainText("text"), FootnoteRef("anon-1"))
    assert len(footnotes) == 1
    assert footnotes[0].label == "anon-1"
    assert footnotes[0].body == (PlainText("note "), Bold("here"))


def test_named_inline_footnote_and_plain_reference() -> None:
    spans, footnotes = _parse("one[fn:a: defined] two[fn:b]")
    assert spans == (PlainText("one"), FootnoteRef("a"), PlainText(" two"), FootnoteRef("b"))
    assert [note.label for note in footnotes] == ["a"]


def test_labels_are_per_parse() -> None:
    first = FootnoteLabels()
    second = FootnoteLabels()
    parse_inline("x[fn:: one]", first)
    spans, _ = parse_inline("y[fn:: two]", second)
    assert spans[-1] == FootnoteRef("anon-1")
