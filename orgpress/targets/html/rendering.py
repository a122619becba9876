"""Block and inline rendering for the HTML target."""
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
from .escape import _escape_attr, _escape_html, _is_image, _rewrite_url, _slugify

_LIST_TAGS = {"unordered": "ul", "ordered": "ol", "description": "dl"}


def _heading_tag(level: int) -> str:
    # h1 is the document title.
    return f"h{min(level + 1, 6)}"


class _HtmlWriter:
    """Renders one document; holds the per-render footnote numbering and used ids."""

    def __init__(self, document: Document) -> None:
        self.document = document
        self.footnotes = FootnoteIndex(document)
        self._ids: set[str] = set()

    def article(self) -> str:
        lines = ['<article class="orgpress-document">']
        lines.extend(self._header())
        for block in self.document.blocks:
            lines.append(self.block(block))
        footnotes = self._footnote_section()
        if footnotes:
            lines.append(footnotes)
        if self.document.changelog:
            lines.append(self._changelog_section())
        lines.append("</article>")
        return "\n".join(lines)

    def _header(self) -> list[str]:
        lines = ["<header>"]
        if self.document.title:
            lines.append(f'<h1 class="title">{_escape_html(self.document.title)}</h1>')
        if self.document.summary:
            lines.append(f'<p class="summary">{_escape_html(self.document.summary)}</p>')
        if self.document.tags:
            items = "".join(f"<li>{_escape_html(tag)}</li>" for tag in self.document.tags)
            lines.append(f'<ul class="tags">{items}</ul>')
        lines.append("</header>")
        return lines

    def _unique_id(self, text: str) -> str:
        base = _slugify(text)
        candidate = base
        counter = 2
        while candidate in self._ids:
            candidate = f"{base}-{counter}"
            counter += 1
        self._ids.add(candidate)
        return candidate

    def block(self, block: Block) -> str:
        if isinstance(block, Heading):
            return self._heading(block)
        if isinstance(block, Paragraph):
            return f"<p>{self.spans(block.spans)}</p>"
        if isinstance(block, CodeBlock):
            return self._code(block)
        if isinstance(block, Quote):
            inner = "\n".join(self.block(child) for child in block.children)
            return f"<blockquote>\n{inner}\n</blockquote>"
        if isinstance(block, Drawer):
            return self._drawer(block)
        if isinstance(block, ListBlock):
            return self._list(block)
        raise TypeError(f"Unsupported block type: {type(block).__name__}")

    def _heading(self, heading: Heading) -> str:
        tag = _heading_tag(heading.level)
        section_id = self._unique_id(spans_text(heading.title))
        title = self.spans(heading.title)
        if heading.tags:
            title += " " + "".join(
                f'<span class="tag">{_escape_html(name)}</span>' for name in heading.tags
            )
        lines = [
            f'<section id="{section_id}" class="level-{heading.level}">',
            f"<{tag}>{title}</{tag}>",
        ]
        lines.extend(self.block(child) for child in heading.children)
        lines.append("</section>")
        return "\n".join(lines)

    def _code(self, block: CodeBlock) -> str:
        if not block.exported:
            return ""
        name_attr = f' data-name="{_escape_attr(block.name)}"' if block.name else ""
        code = _escape_html(block.text)
        if block.language:
            language = _escape_attr(block.language)
            return (
                f'<pre class="src src-{language}"{name_attr}>'
                f'<code class="language-{language}">{code}</code></pre>'
            )
        return f'<pre class="example"{name_attr}><code>{code}</code></pre>'

    def _drawer(self, drawer: Drawer) -> str:
        lines = [f'<dl class="drawer drawer-{_escape_attr(drawer.name.lower())}">']
        for key, value in drawer.properties:
            lines.append(f"<dt>{_escape_html(key)}</dt><dd>{_escape_html(value)}</dd>")
        lines.append("</dl>")
        return "\n".join(lines)

    def _list(self, block: ListBlock) -> str:
        tag = _LIST_TAGS[block.kind]
        lines = [f"<{tag}>"]
        for item in block.items:
            if block.kind == "description":
                term = self.spans(item.term) if item.term else ""
                lines.append(f"<dt>{term}</dt><dd>{self.spans(item.spans)}</dd>")
            else:
                lines.append(f"<li>{self.spans(item.spans)}</li>")
        lines.append(f"</{tag}>")
        return "\n".join(lines)

    def spans(self, spans: tuple[InlineSpan, ...]) -> str:
        return "".join(self.span(span) for span in spans)

    def span(self, span: InlineSpan) -> str:
        if isinstance(span, PlainText):
            return _escape_html(span.text)
        if isinstance(span, Bold):
            return f"<b>{_escape_html(span.text)}</b>"
        if isinstance(span, Code):
            css = ' class="verbatim"' if span.verbatim else ""
            return f"<code{css}>{_escape_html(span.text)}</code>"
        if isinstance(span, Link):
            url = _rewrite_url(span.url)
            if _is_image(url) and span.text == span.url:
                return f'<img src="{_escape_attr(url)}" alt="">'
            return f'<a href="{_escape_attr(url)}">{_escape_html(span.text)}</a>'
        if isinstance(span, FootnoteRef):
            number, first = self.footnotes.number(span.label)
            anchor = f' id="fnr.{number}"' if first else ""
            return (
                f'<sup><a class="footref"{anchor} href="#fn.{number}" '
                f'role="doc-noteref">{number}</a></sup>'
            )
        raise TypeError(f"Unsupported inline span: {type(span).__name__}")

    def _footnote_section(self) -> str:
        items: list[str] = []
        for number, note in self.footnotes.referenced():
            body = self.spans(note.body)
            items.append(
                f'<li id="fn.{number}"><p>{body} '
                f'<a class="footback" href="#fnr.{number}" role="doc-backlink">&#8617;</a></p></li>'
            )
        if not items:
            return ""
        return "\n".join(
            [
                '<section class="footnotes" role="doc-endnotes">',
                "<h2>Footnotes</h2>",
                "<ol>",
                *items,
                "</ol>",
                "</section>",
            ]
        )

    def _changelog_section(self) -> str:
        lines = ['<section class="changelog">', "<h2>Changelog</h2>", "<dl>"]
        for entry in self.document.changelog:
            lines.append(f"<dt><time>{_escape_html(entry.date)}</time></dt>")
            lines.append(f"<dd>{_escape_html(entry.description)}</dd>")
        lines.extend(["</dl>", "</section>"])
        return "\n".join(lines)


def _render_page(
    document: Document,
    *,
    version: str,
    standalone: bool,
    stylesheet: str,
    lang: str,
) -> str:
    article = _HtmlWriter(document).article()
    if not standalone:
        return article

    head = [
        '<meta charset="utf-8">',
        f'<meta name="generator" content="orgpress {_escape_attr(version)}">',
        f"<title>{_escape_html(document.title)}</title>",
    ]
    if document.summary:
        head.append(f'<meta name="description" content="{_escape_attr(document.summary)}">')
    if document.keywords:
        head.append(f'<meta name="keywords" content="{_escape_attr(", ".join(document.keywords))}">')
    if stylesheet:
        head.append(f'<link rel="stylesheet" href="{_escape_attr(stylesheet)}">')

    return "\n".join(
        [
            "<!DOCTYPE html>",
            f'<html lang="{_escape_attr(lang)}">',
            "<head>",
            *head,
            "</head>",
            "<body>",
            article,
            "</body>",
            "</html>",
            "",
        ]
    )
