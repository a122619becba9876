"""HTML escaping, slug ids and link rewriting."""
from __future__ import annotations

import html
import re
import unicodedata

from ...parsing.regex import IMAGE_URL_RE

SLUG_UNSAFE_RE = re.compile(r"[^\w\s-]")
SLUG_SPACE_RE = re.compile(r"[\s_-]+")


def _escape_html(value: str) -> str:
    return html.escape(value, quote=False)


def _escape_attr(value: str) -> str:
    return html.escape(value, quote=True)


def _slugify(text: str, max_len: int = 60) -> str:
    """Turn heading text into an ASCII id."""
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = SLUG_UNSAFE_RE.sub("", text).strip().lower()
    text = SLUG_SPACE_RE.sub("-", text)
    return text[:max_len].strip("-") or "section"


def _rewrite_url(url: str) -> str:
    """Map ``file:post.org`` links onto the rendered page."""
    if url.startswith("file:"):
        url = url[len("file:") :]
        if url.endswith(".org"):
            url = url[: -len(".org")] + ".html"
    return url


def _is_image(url: str) -> bool:
    return bool(IMAGE_URL_RE.search(url))
