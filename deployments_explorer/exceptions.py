"""
Exception hierarchy for the deployments explorer.

The parser never raises: malformed markdown only yields fewer entries or
rows. The one failure surfaced to callers is document acquisition, and
every such error names the document that failed and why.
"""

from __future__ import annotations


class ExplorerError(Exception):
    """Base exception for all explorer failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class DocumentLoadError(ExplorerError):
    """The deployments document could not be obtained."""

    def __init__(self, code: str, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(
            code,
            f"Could not load {source}: {reason}",
            {"source": source, "reason": reason},
        )


class DocumentFetchError(DocumentLoadError):
    """Fetching the document over HTTP failed (bad status or transport error)."""

    def __init__(self, source: str, reason: str):
        super().__init__("DOCUMENT_FETCH_FAILED", source, reason)


class DocumentReadError(DocumentLoadError):
    """Reading the document from the local filesystem failed."""

    def __init__(self, source: str, reason: str):
        super().__init__("DOCUMENT_READ_FAILED", source, reason)
