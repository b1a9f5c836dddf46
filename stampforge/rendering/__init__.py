"""Card image rendering."""

from .renderer import CardRenderer

__all__ = ["CardRenderer"]
