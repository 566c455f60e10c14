"""
Explorer state — orchestrates acquisition, parsing and the filtered view.

Flow:
  ┌──────────────┐
  │ URL or file  │
  └──────┬───────┘
         │            ┌──────────────┐
  ┌──────▼───────┐    │  fallback    │   ← only if the primary fails
  │   Acquire    │◄───┤  source      │
  └──────┬───────┘    └──────────────┘
         │
  ┌──────▼───────┐
  │    Parse     │   ← pure, returns a frozen ParseResult
  └──────┬───────┘
         │
  ┌──────▼───────┐
  │   Filter     │   ← re-derived from FilterParams on every call
  └──────────────┘

Design principles:
  - A load is a full reparse: entries and facets are replaced, never merged.
  - A failed load keeps the previous result and re-raises.
  - Filter parameters are an immutable value; changing one replaces it.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from .config import Settings
from .loader import load_with_fallback
from .models import DocumentInfo, Entry, FilterParams, ParseResult
from .parser import parse_markdown
from .search import facet_options, filter_entries

logger = logging.getLogger(__name__)


class DeploymentsExplorer:
    """Holds the current parse result and filter parameters.

    Usage:
        explorer = DeploymentsExplorer()
        explorer.load()
        explorer.update_filters(network="mainnet", search="token")
        for entry in explorer.visible_entries():
            print(entry.title)
    """

    def __init__(self, settings: Settings | None = None, client: httpx.Client | None = None):
        self.settings = settings or Settings()
        self.client = client
        self.filters = FilterParams()
        # result and its document info are swapped in as one tuple
        self._loaded: tuple[ParseResult, DocumentInfo | None] = (ParseResult.empty(), None)

    @property
    def result(self) -> ParseResult:
        return self._loaded[0]

    @property
    def document(self) -> DocumentInfo | None:
        return self._loaded[1]

    def snapshot(self) -> tuple[ParseResult, DocumentInfo | None]:
        """The current result and its document info, read together."""
        return self._loaded

    def load(
        self, source: str | Path | None = None, fallback: str | Path | None = None
    ) -> ParseResult:
        """Acquire the document and reparse it.

        Raises:
            DocumentLoadError: neither source could be loaded; the current
                result is left as it was.
        """
        text, origin = load_with_fallback(
            source if source is not None else self.settings.source,
            fallback if fallback is not None else self.settings.fallback,
            client=self.client,
            timeout=self.settings.fetch_timeout,
        )
        return self.load_text(text, origin)

    def load_text(self, text: str, origin: str = "<text>") -> ParseResult:
        """Replace the current result with a parse of `text`."""
        result = parse_markdown(text)
        document = DocumentInfo(
            origin=origin,
            sections=len(result.entries),
            networks=len(result.networks),
        )
        self._loaded = (result, document)
        logger.info("Loaded %s: %s", origin, self.loaded_text())
        return result

    def update_filters(self, **changes: object) -> FilterParams:
        """Replace the filter parameters with the given fields changed."""
        self.filters = FilterParams.model_validate(
            {**self.filters.model_dump(), **changes}
        )
        return self.filters

    def visible_entries(self) -> list[Entry]:
        return filter_entries(self.result.entries, self.filters)

    def network_options(self) -> list[str]:
        return facet_options(self.result.networks)

    def category_options(self) -> list[str]:
        return facet_options(self.result.categories)

    def loaded_text(self) -> str:
        """Status line after a load."""
        return (
            f"Loaded {len(self.result.entries)} sections · "
            f"{len(self.result.networks)} networks"
        )

    def status_text(self) -> str:
        """Status line for the current filtered view."""
        return f"{len(self.visible_entries())} sections shown"
