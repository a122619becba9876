"""LaTeX render target."""
from __future__ import annotations

from ...base import BuildOptions, RenderTarget
from ...ir import Document
from ...registry import register_target
from ...validation import str_option
from .document import _build_tex


class LatexTarget(RenderTarget):
    name = "latex"
    suffix = ".tex"

    def render(self, document: Document, options: BuildOptions | None = None) -> str:
        options = options or BuildOptions()
        documentclass = str_option(options.extra, "documentclass", "article")
        return _build_tex(document, options.version, documentclass=documentclass)


@register_target
def _make_latex_target() -> RenderTarget:
    """Factory used to register the LaTeX target in the default registry."""
    return LatexTarget()
