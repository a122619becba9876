"""HTML render target."""
from __future__ import annotations

from pathlib import Path

from ...base import BuildOptions, GeneratedArtifact, RenderTarget
from ...ir import Document
from ...registry import register_target
from ...templates import copy_asset, get_template_dir
from ...validation import bool_option, str_option
from .rendering import _render_page

STYLESHEET_NAME = "orgpress.css"


class HtmlTarget(RenderTarget):
    name = "html"
    suffix = ".html"

    def prepare(self, options: BuildOptions) -> list[GeneratedArtifact]:
        stylesheet = str_option(options.extra, "stylesheet", STYLESHEET_NAME)
        # Only the bundled stylesheet is copied; custom hrefs are left to the site.
        if stylesheet != STYLESHEET_NAME or options.output_dir is None:
            return []
        source = get_template_dir(self.name) / STYLESHEET_NAME
        return [copy_asset(source, Path(options.output_dir), artifact_type="stylesheet")]

    def render(self, document: Document, options: BuildOptions | None = None) -> str:
        options = options or BuildOptions()
        stylesheet = str_option(options.extra, "stylesheet", STYLESHEET_NAME)
        if stylesheet and stylesheet == STYLESHEET_NAME:
            stylesheet = str(options.extra.get("_asset_prefix", "")) + stylesheet
        return _render_page(
            document,
            version=options.version,
            standalone=bool_option(options.extra, "standalone", True),
            stylesheet=stylesheet,
            lang=str_option(options.extra, "lang", "en"),
        )


@register_target
def _make_html_target() -> RenderTarget:
    """Factory used to register the HTML target in the default registry."""
    return HtmlTarget()
