"""
Deployments Explorer — FastAPI Server
======================================

Read-only HTTP API over the parsed deployments document.

Endpoints:
    POST /parse            Parse markdown sent in the request body
    POST /parse/file       Upload a markdown file for parsing
    GET  /entries          Search/filter the document loaded at startup
    POST /reload           Re-acquire and reparse the configured document
    GET  /health           Health check / readiness probe

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production

Docs:
    http://localhost:8000/docs             # Swagger UI (auto-generated)
"""

from __future__ import annotations

import asyncio
import logging
import threading
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, UploadFile
from pydantic import BaseModel, Field

from deployments_explorer import __version__
from deployments_explorer.config import Settings
from deployments_explorer.exceptions import DocumentLoadError
from deployments_explorer.explorer import DeploymentsExplorer
from deployments_explorer.models import Entry, FilterParams, ParseResult
from deployments_explorer.parser import parse_markdown
from deployments_explorer.search import filter_entries

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 1_048_576


# ─── Application Lifespan (initial load) ────────────────────────────

_explorer: DeploymentsExplorer | None = None
_reload_lock = threading.Lock()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the configured document on startup.

    A failed load is logged, not fatal: /parse keeps working and /reload
    can retry once the source is reachable.
    """
    global _explorer  # noqa: PLW0603
    _explorer = DeploymentsExplorer(Settings())
    try:
        await asyncio.to_thread(_explorer.load)
    except DocumentLoadError as e:
        logger.warning("Initial load failed: %s", e)
    yield
    _explorer = None


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="Deployments Explorer API",
    description=(
        "Parses a markdown document of contract deployments (### sections "
        "with Network/Address tables) and serves searchable, filterable entries."
    ),
    version=__version__,
    lifespan=lifespan,
)


# ─── Request / Response Schemas ─────────────────────────────────────

_EXAMPLE_MARKDOWN = (
    "## Tokens\n"
    "### MyToken\n"
    "| Network | Address | Explorer | Constructor Args | Salt |\n"
    "|---|---|---|---|---|\n"
    "| mainnet | 0x1 | [x](http://e/1) | () | 0x0 |\n"
)


class ParseRequest(BaseModel):
    """Request body for the /parse endpoint."""

    markdown: str = Field(
        ...,
        description="The deployments markdown document.",
        json_schema_extra={"example": _EXAMPLE_MARKDOWN},
    )


class ParseResponse(BaseModel):
    """Entries plus the facet values used to populate filter choices."""

    section_count: int
    row_count: int
    networks: list[str]
    categories: list[str]
    entries: list[Entry]


class EntriesResponse(BaseModel):
    """Filtered view of the loaded document."""

    origin: Optional[str] = None
    filters: FilterParams
    shown: int
    entries: list[Entry]


class HealthResponse(BaseModel):
    status: str
    version: str
    source: Optional[str] = None
    sections_loaded: int


# ─── Helpers ─────────────────────────────────────────────────────────


def _get_explorer() -> DeploymentsExplorer:
    if _explorer is None:
        raise HTTPException(status_code=503, detail="Explorer not initialised")
    return _explorer


def _build_response(result: ParseResult) -> ParseResponse:
    return ParseResponse(
        section_count=len(result.entries),
        row_count=sum(len(e.rows) for e in result.entries),
        networks=sorted(result.networks),
        categories=sorted(result.categories),
        entries=list(result.entries),
    )


# ─── Endpoints ───────────────────────────────────────────────────────


@app.post("/parse", summary="Parse a deployments document", tags=["Parsing"])
def parse_document(request: ParseRequest) -> ParseResponse:
    """Parse markdown sent inline. Malformed sections are skipped, never rejected."""
    return _build_response(parse_markdown(request.markdown))


@app.post(
    "/parse/file",
    summary="Parse an uploaded deployments file",
    tags=["Parsing"],
    responses={
        413: {"description": "File too large (max 1 MB)"},
        400: {"description": "File is not valid UTF-8 text"},
    },
)
async def parse_document_file(file: UploadFile) -> ParseResponse:
    """Upload a `.md` file. Accepts any UTF-8 text file up to 1 MB."""
    if file.size and file.size > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="File too large (max 1 MB)")

    # size is not always known up front; never read past the limit
    content = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="File too large (max 1 MB)")
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File must be UTF-8 encoded text")

    result = await asyncio.to_thread(parse_markdown, text)
    return _build_response(result)


@app.get(
    "/entries",
    summary="Search and filter loaded entries",
    tags=["Explorer"],
    responses={503: {"description": "Explorer not yet initialised"}},
)
def list_entries(search: str = "", network: str = "", category: str = "") -> EntriesResponse:
    """Entries of the loaded document matching the given filters.

    Empty parameters mean "All". Sections left without matching rows are omitted.
    """
    result, document = _get_explorer().snapshot()
    params = FilterParams(search=search, network=network, category=category)
    visible = filter_entries(result.entries, params)
    return EntriesResponse(
        origin=document.origin if document else None,
        filters=params,
        shown=len(visible),
        entries=visible,
    )


@app.post(
    "/reload",
    summary="Reload the configured document",
    tags=["Explorer"],
    responses={
        502: {"description": "Document could not be acquired"},
        503: {"description": "Explorer not yet initialised"},
    },
)
def reload_document() -> ParseResponse:
    """Fetch (or read) the configured source again and replace the loaded entries."""
    explorer = _get_explorer()
    try:
        with _reload_lock:
            result = explorer.load()
    except DocumentLoadError as e:
        raise HTTPException(status_code=502, detail=e.details)
    return _build_response(result)


@app.get(
    "/health",
    summary="Health check",
    tags=["System"],
    responses={503: {"description": "Explorer not yet initialised"}},
)
def health_check() -> HealthResponse:
    """Returns service status and what is currently loaded."""
    result, document = _get_explorer().snapshot()
    return HealthResponse(
        status="healthy",
        version=__version__,
        source=document.origin if document else None,
        sections_loaded=len(result.entries),
    )
