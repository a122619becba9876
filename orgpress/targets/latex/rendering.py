"""Block and inline rendering for the LaTeX target."""
from __future__ import annotations

from ...footnotes import FootnoteIndex
from ...ir import (
    Block,
    Bold,
    Code,
    CodeBlock,
    Document,
    Drawer,
    FootnoteRef,
    Heading,
    InlineSpan,
    Link,
    ListBlock,
    Paragraph,
    PlainText,
    Quote,
    spans_text,
)
from ...parsing.regex import IMAGE_URL_RE
from .escape import _escape_latex, _escape_url, _label_key

_SECTIONING = (
    "\\section",
    "\\subsection",
    "\\subsubsection",
    "\\paragraph",
    "\\subparagraph",
)
_LIST_ENVIRONMENTS = {"unordered": "itemize", "ordered": "enumerate", "description": "description"}

# Org language names that Pygments knows under another alias.
_MINTED_LANGUAGES = {"emacs-lisp": "elisp", "sh": "bash", "shell": "bash", "js": "javascript"}


def _heading_for_depth(depth: int) -> str:
    if depth <= 1:
        return _SECTIONING[0]
    return _SECTIONING[min(depth, len(_SECTIONING)) - 1]


class _LatexWriter:
    def __init__(self, document: Document) -> None:
        self.document = document
        self.footnotes = FootnoteIndex(document)
        self._labels: set[str] = set()

    def body(self) -> list[str]:
        lines: list[str] = []
        for block in self.document.blocks:
            lines.append(self.block(block))
            lines.append("")
        return lines

    def _unique_label(self, text: str) -> str:
        base = "sec:" + (_label_key(text) or "section")
        candidate = base
        counter = 2
        while candidate in self._labels:
            candidate = f"{base}-{counter}"
            counter += 1
        self._labels.add(candidate)
        return candidate

    def block(self, block: Block) -> str:
        if isinstance(block, Heading):
            return self._heading(block)
        if isinstance(block, Paragraph):
            return self.spans(block.spans)
        if isinstance(block, CodeBlock):
            return self._code(block)
        if isinstance(block, Quote):
            inner = "\n\n".join(self.block(child) for child in block.children)
            return f"\\begin{{quote}}\n{inner}\n\\end{{quote}}"
        if isinstance(block, Drawer):
            return self._drawer(block)
        if isinstance(block, ListBlock):
            return self._list(block)
        raise TypeError(f"Unsupported block type: {type(block).__name__}")

    def _heading(self, heading: Heading) -> str:
        command = _heading_for_depth(heading.level)
        label = self._unique_label(spans_text(heading.title))
        title = self.spans(heading.title)
        if any(isinstance(span, FootnoteRef) for span in heading.title):
            # Footnotes must stay out of the table of contents and running heads.
            command = f"{command}[{_escape_latex(spans_text(heading.title))}]"
        lines = [f"{command}{{{title}}}", f"\\label{{{label}}}", ""]
        for child in heading.children:
            lines.append(self.block(child))
            lines.append("")
        return "\n".join(lines).rstrip("\n")

    def _code(self, block: CodeBlock) -> str:
        if not block.exported:
            return ""
        if block.language:
            language = _MINTED_LANGUAGES.get(block.language.lower(), block.language.lower())
            return f"\\begin{{minted}}{{{language}}}\n{block.text}\n\\end{{minted}}"
        return f"\\begin{{verbatim}}\n{block.text}\n\\end{{verbatim}}"

    def _drawer(self, drawer: Drawer) -> str:
        if not drawer.properties:
            return ""
        lines = ["\\begin{description}"]
        for key, value in drawer.properties:
            lines.append(f"\\item[{_escape_latex(key)}] {_escape_latex(value)}")
        lines.append("\\end{description}")
        return "\n".join(lines)

    def _list(self, block: ListBlock) -> str:
        environment = _LIST_ENVIRONMENTS[block.kind]
        lines = [f"\\begin{{{environment}}}"]
        for item in block.items:
            if block.kind == "description":
                term = self.spans(item.term) if item.term else ""
                lines.append(f"\\item[{{{term}}}] {self.spans(item.spans)}")
            else:
                lines.append(f"\\item {self.spans(item.spans)}")
        lines.append(f"\\end{{{environment}}}")
        return "\n".join(lines)

    def spans(self, spans: tuple[InlineSpan, ...]) -> str:
        return "".join(self.span(span) for span in spans)

    def span(self, span: InlineSpan) -> str:
        if isinstance(span, PlainText):
            return _escape_latex(span.text)
        if isinstance(span, Bold):
            return f"\\textbf{{{_escape_latex(span.text)}}}"
        if isinstance(span, Code):
            return f"\\texttt{{{_escape_latex(span.text)}}}"
        if isinstance(span, Link):
            url = span.url.removeprefix("file:")
            if IMAGE_URL_RE.search(url) and span.text == span.url:
                return f"\\includegraphics[width=\\linewidth]{{{url}}}"
            return f"\\href{{{_escape_url(url)}}}{{{_escape_latex(span.text)}}}"
        if isinstance(span, FootnoteRef):
            return self._footnote(span.label)
        raise TypeError(f"Unsupported inline span: {type(span).__name__}")

    def _footnote(self, label: str) -> str:
        number, first = self.footnotes.number(label)
        key = f"fn:{number}"
        if not first:
            return f"\\footref{{{key}}}"
        body = self.spans(self.footnotes.lookup(label).body)
        return f"\\footnote{{\\label{{{key}}}{body}}}"

    def changelog(self) -> list[str]:
        if not self.document.changelog:
            return []
        lines = ["\\section*{Changelog}", "\\begin{description}"]
        for entry in self.document.changelog:
            lines.append(
                f"\\item[{_escape_latex(entry.date)}] {_escape_latex(entry.description)}"
            )
        lines.extend(["\\end{description}", ""])
        return lines
