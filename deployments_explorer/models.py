"""
Pydantic models for parsed deployment records.

The parser returns frozen models: a parse result is a snapshot of one
document and is replaced wholesale on every reparse, never patched.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ─── Parsed Records ─────────────────────────────────────────────────


class Row(BaseModel):
    """One table row: a contract deployed on a single network."""

    model_config = ConfigDict(frozen=True)

    network: str
    address: str
    explorer: str  # URL when the cell held a [label](url) link, else raw text
    args: str  # "Constructor Args" column
    salt: str

    @property
    def explorer_url(self) -> Optional[str]:
        """The explorer value when it is usable as a link."""
        return self.explorer if self.explorer.startswith("http") else None


class Entry(BaseModel):
    """One `### Title` section together with the rows of its table."""

    model_config = ConfigDict(frozen=True)

    category: str
    title: str
    rows: tuple[Row, ...] = ()


class ParseResult(BaseModel):
    """Everything the parser extracted from one document."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[Entry, ...] = ()

    @property
    def networks(self) -> frozenset[str]:
        """Distinct non-empty network values across all rows."""
        return frozenset(
            row.network for entry in self.entries for row in entry.rows if row.network
        )

    @property
    def categories(self) -> frozenset[str]:
        """Distinct category values across all entries."""
        return frozenset(entry.category for entry in self.entries)

    @classmethod
    def empty(cls) -> ParseResult:
        return cls()


# ─── Presentation State ─────────────────────────────────────────────


class ViewMode(str, Enum):
    """How the visible entries are laid out."""

    CARDS = "cards"
    TABLE = "table"


class FilterParams(BaseModel):
    """Current search/filter parameters. Empty string means "All"."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    search: str = ""
    network: str = ""
    category: str = ""
    view: ViewMode = ViewMode.CARDS

    @field_validator("search")
    @classmethod
    def _strip_search(cls, value: str) -> str:
        return value.strip()


class DocumentInfo(BaseModel):
    """Where the currently loaded document came from."""

    origin: str
    sections: int = Field(ge=0)
    networks: int = Field(ge=0)
