"""Content scanner - substring search and markup bloat audit for CMS content."""

from .config import ScannerConfig
from .models import AuditRequest, AuditResponse, SearchRequest, SearchResponse
from .orchestrator import audit_content, run_audit, run_search, search_content

__version__ = "0.1.0"

__all__ = [
    "ScannerConfig",
    "AuditRequest",
    "AuditResponse",
    "SearchRequest",
    "SearchResponse",
    "audit_content",
    "search_content",
    "run_audit",
    "run_search",
]
