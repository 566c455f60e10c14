"""
Document acquisition: fetch the deployments markdown over HTTP or read it
from disk, with an optional fallback source.

Any failure raises a DocumentLoadError subclass that names the document and
the reason, so the caller can tell the user what failed and offer another
way in (a local file).
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from .exceptions import DocumentFetchError, DocumentLoadError, DocumentReadError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_document(
    url: str, client: httpx.Client | None = None, timeout: float = DEFAULT_TIMEOUT
) -> str:
    """GET a document, bypassing caches.

    Args:
        url: Absolute http(s) URL.
        client: Optional pre-configured client (tests pass one with a
            MockTransport). A temporary client is created otherwise.
        timeout: Request timeout in seconds when no client is given.

    Raises:
        DocumentFetchError: non-2xx status or transport failure.
    """
    owns_client = client is None
    http = client or httpx.Client(timeout=timeout, follow_redirects=True)
    try:
        response = http.get(url, headers={"Cache-Control": "no-cache"})
    except httpx.HTTPError as e:
        raise DocumentFetchError(url, str(e) or type(e).__name__) from e
    finally:
        if owns_client:
            http.close()

    if not response.is_success:
        raise DocumentFetchError(url, f"HTTP {response.status_code}")
    return response.text


def read_document(path: str | Path) -> str:
    """Read a UTF-8 document from disk.

    Raises:
        DocumentReadError: missing, unreadable or not valid UTF-8.
    """
    resolved = Path(path)
    try:
        return resolved.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise DocumentReadError(str(resolved), "file not found") from e
    except UnicodeDecodeError as e:
        raise DocumentReadError(str(resolved), "file is not valid UTF-8 text") from e
    except OSError as e:
        raise DocumentReadError(str(resolved), e.strerror or str(e)) from e


def load_document(
    source: str | Path,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """Load from a URL or a filesystem path, whichever `source` is."""
    if isinstance(source, str) and is_url(source):
        return fetch_document(source, client=client, timeout=timeout)
    return read_document(source)


def load_with_fallback(
    source: str | Path,
    fallback: str | Path | None = None,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> tuple[str, str]:
    """Load `source`, falling back to `fallback` if that fails.

    Returns:
        (text, origin) where origin is the source that was actually read.

    Raises:
        DocumentLoadError: the primary failed and there was no fallback, or
            the fallback failed as well (the fallback's error is raised).
    """
    try:
        return load_document(source, client=client, timeout=timeout), str(source)
    except DocumentLoadError as e:
        if fallback is None:
            raise
        logger.warning("%s; trying %s", e, fallback)

    text = load_document(fallback, client=client, timeout=timeout)
    return text, str(fallback)
