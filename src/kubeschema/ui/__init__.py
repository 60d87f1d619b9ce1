"""User-facing output for kubeschema."""

from kubeschema.ui.display import ResultPrinter, color_enabled

__all__ = ["ResultPrinter", "color_enabled"]
