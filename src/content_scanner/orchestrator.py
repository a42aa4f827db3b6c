"""Search and audit orchestration across content scopes.

A request names one or more scopes (page types, the blog, collections). Each
scope is fetched concurrently; a scope that fails is logged and reported in
failed_scopes while the remaining scopes are still processed.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, NamedTuple, Protocol

from .butter_client import ButterClient
from .config import ScannerConfig
from .dedup import find_bloat_matches
from .models import (
    AuditFinding,
    AuditIssue,
    AuditRequest,
    AuditResponse,
    ScopeRequest,
    SearchMatch,
    SearchRequest,
    SearchResponse,
    SearchResult,
)
from .patterns import PATTERN_SOURCES
from .walker import walk_record

logger = logging.getLogger(__name__)

BLOG_SOURCE_TYPE = "Blog"
UNTITLED = "Untitled"
MISSING_SLUG = "N/A"

NO_SCOPE_ERROR = "Please select at least one scope (Blog, Page Type, or Collection Key)"
ALL_SCOPES_FAILED_ERROR = "Failed to fetch all selected scopes. Check logs for details."
MISSING_TOKEN_ERROR = "An API token is required"
BLANK_PAGE_TYPE_ERROR = "Page type identifiers must not be blank"
BLANK_COLLECTION_KEY_ERROR = "Collection keys must not be blank"


class ContentSource(Protocol):
    """Fetches every record of one source, pagination and retries included."""

    async def get_all_pages(self, page_type: str, preview: bool = False) -> list[Any]: ...

    async def get_all_posts(self, preview: bool = False) -> list[Any]: ...

    async def get_all_collections(self, collection_type: str, preview: bool = False) -> list[Any]: ...


class Scope(NamedTuple):
    """One source to fetch."""

    kind: str  # "pages", "blog" or "collections"
    key: str | None
    label: str
    source_type: str


class FetchedRecord(NamedTuple):
    data: Any
    source_type: str


def validate_scopes(request: ScopeRequest) -> str | None:
    """Return an error message when the request selects no usable scope."""
    if not request.has_scope():
        return NO_SCOPE_ERROR
    if any(not page_type.strip() for page_type in request.page_types):
        return BLANK_PAGE_TYPE_ERROR
    if any(not key.strip() for key in request.collection_keys):
        return BLANK_COLLECTION_KEY_ERROR
    return None


def build_scopes(request: ScopeRequest) -> list[Scope]:
    """List the request's scopes: page types, then blog, then collections."""
    scopes = [
        Scope("pages", page_type, f"Page Type: {page_type}", page_type)
        for page_type in request.page_types
    ]
    if request.include_blog:
        scopes.append(Scope("blog", None, BLOG_SOURCE_TYPE, BLOG_SOURCE_TYPE))
    scopes.extend(
        Scope("collections", key, f"Collection: {key}", key)
        for key in request.collection_keys
    )
    return scopes


async def _fetch_scope(source: ContentSource, scope: Scope, preview: bool) -> list[Any] | None:
    """Fetch one scope, returning None when it fails."""
    try:
        if scope.kind == "pages":
            return await source.get_all_pages(scope.key, preview)
        if scope.kind == "blog":
            return await source.get_all_posts(preview)
        return await source.get_all_collections(scope.key, preview)
    except Exception as e:
        logger.error(f"Failed to fetch {scope.label}: {e}")
        return None


async def fetch_scopes(
    source: ContentSource,
    scopes: list[Scope],
    preview: bool,
) -> tuple[list[FetchedRecord], list[str]]:
    """
    Fetch all scopes concurrently.

    Cancelling the caller cancels every in-flight fetch; nothing is kept.

    Returns:
        Tuple of (records tagged with their source type in scope order,
        labels of the scopes that failed)
    """
    results = await asyncio.gather(*(_fetch_scope(source, scope, preview) for scope in scopes))

    records: list[FetchedRecord] = []
    failed_scopes: list[str] = []
    for scope, items in zip(scopes, results):
        if items is None:
            failed_scopes.append(scope.label)
            continue
        records.extend(FetchedRecord(item, scope.source_type) for item in items)

    return records, failed_scopes


def record_title(record: Any) -> str:
    """First of name, title, slug, else 'Untitled'."""
    if isinstance(record, Mapping):
        for key in ("name", "title", "slug"):
            value = record.get(key)
            if value:
                return str(value)
    return UNTITLED


def record_slug(record: Any) -> str:
    if isinstance(record, Mapping) and record.get("slug"):
        return str(record["slug"])
    return MISSING_SLUG


def search_record(record: Any, term: str) -> list[SearchMatch]:
    """Matches of term within record in traversal order, blank snippets dropped."""
    matches = [
        SearchMatch(path=acc.path, value=acc.value, count=acc.count)
        for acc in walk_record(record, term).values()
    ]
    return [m for m in matches if m.value.strip()]


def audit_record(record: Any) -> list[AuditIssue]:
    """Markup bloat issues within record, sorted by pattern then path."""
    issues = []
    for pattern, match_map in find_bloat_matches(record).items():
        for acc in match_map.values():
            if not acc.value.strip():
                continue
            issues.append(
                AuditIssue(
                    pattern=pattern,
                    source=PATTERN_SOURCES.get(pattern, ""),
                    path=acc.path,
                    value=acc.value,
                    count=acc.count,
                )
            )
    issues.sort(key=lambda issue: (issue.pattern, issue.path))
    return issues


def collect_search_results(
    records: list[FetchedRecord], term: str, negate: bool = False
) -> list[SearchResult]:
    """Match term against every record and return the results sorted by slug."""
    results: list[SearchResult] = []
    for record in records:
        matches = search_record(record.data, term)
        if negate:
            if matches:
                continue
            matches = []
        elif not matches:
            continue

        results.append(
            SearchResult(
                title=record_title(record.data),
                slug=record_slug(record.data),
                source_type=record.source_type,
                matches=matches,
            )
        )

    results.sort(key=lambda result: result.slug)
    return results


def collect_audit_results(records: list[FetchedRecord]) -> list[AuditFinding]:
    """Audit every record and return the findings sorted by slug."""
    results: list[AuditFinding] = []
    for record in records:
        issues = audit_record(record.data)
        if not issues:
            continue
        results.append(
            AuditFinding(
                title=record_title(record.data),
                slug=record_slug(record.data),
                source_type=record.source_type,
                issues=issues,
            )
        )

    results.sort(key=lambda finding: finding.slug)
    return results


async def search_content(request: SearchRequest, source: ContentSource) -> SearchResponse:
    """
    Search every record of the requested scopes for a term.

    With negate set, the response lists the records that do not contain the
    term, each with an empty match list. Matching runs in a worker thread so
    large scopes do not block the event loop.
    """
    error = validate_scopes(request)
    if error:
        return SearchResponse(success=False, total_items=0, error=error)

    term = request.term.strip()
    if not term:
        return SearchResponse(success=True, total_items=0)

    scopes = build_scopes(request)
    logger.info(f"Searching {len(scopes)} scope(s) (negate={request.negate})")

    try:
        records, failed_scopes = await fetch_scopes(source, scopes, request.preview)

        if len(failed_scopes) == len(scopes):
            return SearchResponse(
                success=False,
                total_items=None,
                failed_scopes=failed_scopes,
                error=ALL_SCOPES_FAILED_ERROR,
            )

        results = await asyncio.to_thread(
            collect_search_results, records, term, request.negate
        )
        return SearchResponse(
            success=True,
            results=results,
            total_items=len(records),
            failed_scopes=failed_scopes or None,
        )
    except Exception as e:
        logger.error(f"Search failed: {e}")
        return SearchResponse(success=False, total_items=None, error=str(e))


async def audit_content(request: AuditRequest, source: ContentSource) -> AuditResponse:
    """Audit every record of the requested scopes against the bloat catalog."""
    error = validate_scopes(request)
    if error:
        return AuditResponse(success=False, error=error)

    scopes = build_scopes(request)
    logger.info(f"Auditing {len(scopes)} scope(s)")
    failed_scopes: list[str] = []

    try:
        records, failed_scopes = await fetch_scopes(source, scopes, request.preview)

        if len(failed_scopes) == len(scopes):
            return AuditResponse(
                success=False,
                failed_scopes=failed_scopes,
                error=ALL_SCOPES_FAILED_ERROR,
            )

        results = await asyncio.to_thread(collect_audit_results, records)
        issues = [issue for finding in results for issue in finding.issues]
        return AuditResponse(
            success=True,
            results=results,
            total_issues=sum(issue.count for issue in issues),
            patterns_found=sorted({issue.pattern for issue in issues}),
            failed_scopes=failed_scopes or None,
        )
    except Exception as e:
        logger.error(f"Audit failed: {e}")
        return AuditResponse(success=False, failed_scopes=failed_scopes or None, error=str(e))


async def run_search(request: SearchRequest, config: ScannerConfig | None = None) -> SearchResponse:
    """Search using a ButterClient built from config and the request token."""
    config = (config or ScannerConfig.from_env()).with_token(request.token)
    if validate_scopes(request) is None and request.term.strip() and not config.token:
        return SearchResponse(success=False, total_items=0, error=MISSING_TOKEN_ERROR)

    async with ButterClient(config) as client:
        return await search_content(request, client)


async def run_audit(request: AuditRequest, config: ScannerConfig | None = None) -> AuditResponse:
    """Audit using a ButterClient built from config and the request token."""
    config = (config or ScannerConfig.from_env()).with_token(request.token)
    if validate_scopes(request) is None and not config.token:
        return AuditResponse(success=False, error=MISSING_TOKEN_ERROR)

    async with ButterClient(config) as client:
        return await audit_content(request, client)
