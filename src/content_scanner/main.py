"""FastAPI application for content search and audit."""

import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .config import ScannerConfig
from .models import (
    AuditRequest,
    AuditResponse,
    PatternInfo,
    SearchRequest,
    SearchResponse,
)
from .orchestrator import run_audit, run_search
from .patterns import MARKUP_BLOAT_PATTERNS, is_generic, pattern_strings

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Content Scanner",
    description="Searches CMS content for a term and audits it for pasted markup bloat",
    version="0.1.0",
)

# CORS - allow common development origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:3000",
        "http://localhost:8000",
    ],
    allow_methods=["POST", "GET"],
    allow_headers=["*"],
)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/patterns", response_model=list[PatternInfo])
async def patterns() -> list[PatternInfo]:
    """List the markup bloat catalog used by /audit."""
    catalog = pattern_strings()
    return [
        PatternInfo(
            pattern=entry.pattern,
            source=entry.source,
            description=entry.description,
            generic=is_generic(entry.pattern, catalog),
        )
        for entry in MARKUP_BLOAT_PATTERNS
    ]


@app.post("/search", response_model=SearchResponse)
async def search(request: SearchRequest) -> SearchResponse:
    """
    Search content for a term.

    - **term**: Text to look for (case-insensitive, whitespace and entities folded)
    - **page_types** / **collection_keys** / **include_blog**: Scopes to search
    - **negate**: Return records that do not contain the term
    """
    try:
        return await run_search(request, ScannerConfig.from_env())
    except Exception as e:
        logger.error(f"Search failed: {e}")
        raise HTTPException(status_code=500, detail=f"Search failed: {str(e)}")


@app.post("/audit", response_model=AuditResponse)
async def audit(request: AuditRequest) -> AuditResponse:
    """
    Audit content for markup bloat.

    - **page_types** / **collection_keys** / **include_blog**: Scopes to audit
    """
    try:
        return await run_audit(request, ScannerConfig.from_env())
    except Exception as e:
        logger.error(f"Audit failed: {e}")
        raise HTTPException(status_code=500, detail=f"Audit failed: {str(e)}")
