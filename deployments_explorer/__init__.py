"""
Deployments Explorer — parse, search and filter contract deployment records.

Architecture: Acquire (HTTP or file) → Parse markdown → Filter/search view
Philosophy:  Extract what is there. Never fail on formatting variance.
"""

from .models import Entry, FilterParams, ParseResult, Row, ViewMode
from .parser import parse_markdown

__version__ = "1.0.0"

__all__ = [
    "Entry",
    "FilterParams",
    "ParseResult",
    "Row",
    "ViewMode",
    "parse_markdown",
]
