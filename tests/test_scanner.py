from __future__ import annotations

import pytest

from orgpress.errors import MalformedBlockError, StructuralError
from orgpress.parsing import scan_blocks


def _kinds(text: str) -> list[str]:
    return [block.kind for block in scan_blocks(text)]


def test_scan_blocks_recognises_each_block_kind() -> None:
    text = "\n".join(
        [
            "#+title: Demo",
            "* Heading :tag:",
            "Some prose",
            "over two lines.",
            "",
            "#+begin_src swift :noweb yes",
            "let x = 1",
            "#+end_src",
            "#+begin_verse",
            "A line",
            "#+end_verse",
            ":PROPERTIES:",
            ":ID: abc",
            ":END:",
            ": fixed width",
            "- item one",
            "- item two",
            "[fn:note] A definition.",
        ]
    )
    assert _kinds(text) == [
        "keyword",
        "heading",
        "paragraph",
        "src",
        "quote",
        "drawer",
        "fixed",
        "list",
        "footnote",
    ]


def test_scan_blocks_records_line_numbers_and_headers() -> None:
    blocks = list(scan_blocks("intro\n\n** Second level\n#+begin_src python\npass\n#+end_src\n"))
    heading = blocks[1]
    assert (heading.kind, heading.level, heading.header) == ("heading", 2, "Second level")
    assert heading.start_line == 3
    src = blocks[2]
    assert (src.start_line, src.end_line) == (4, 6)
    assert src.header == "python"
    assert src.lines == ("pass",)


def test_unterminated_src_block_names_the_opening_line() -> None:
    text = "intro\n\n#+begin_src swift\nlet x = 1\n"
    with pytest.raises(MalformedBlockError) as excinfo:
        list(scan_blocks(text))
    assert isinstance(excinfo.value, StructuralError)
    assert excinfo.value.line == 3
    assert "begin_src" in str(excinfo.value)


def test_unterminated_drawer_raises() -> None:
    with pytest.raises(MalformedBlockError) as excinfo:
        list(scan_blocks("* Heading\n:LOGBOOK:\n- State DONE\n"))
    assert excinfo.value.line == 2


def test_star_bullet_needs_indentation() -> None:
    blocks = list(scan_blocks("* Heading\n  * indented item\n"))
    assert [block.kind for block in blocks] == ["heading", "list"]


def test_headings_are_plain_text_inside_nested_scans() -> None:
    blocks = list(scan_blocks("* not a heading", allow_headings=False))
    assert [block.kind for block in blocks] == ["paragraph"]
