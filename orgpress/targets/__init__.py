"""Built-in render targets; importing this package registers them."""

from . import html, latex

__all__ = ["html", "latex"]
