"""Pydantic models for content search and audit."""

from typing import Optional

from pydantic import BaseModel, Field


class ScopeRequest(BaseModel):
    """The sources to query for one search or audit."""

    page_types: list[str] = Field(default_factory=list, description="Page type identifiers")
    collection_keys: list[str] = Field(default_factory=list, description="Collection keys")
    include_blog: bool = Field(default=False, description="Whether to include blog posts")
    preview: bool = Field(default=False, description="Fetch draft (preview) content")
    token: Optional[str] = Field(
        default=None, description="API token; falls back to the configured token"
    )

    def has_scope(self) -> bool:
        return bool(self.include_blog or self.page_types or self.collection_keys)


class SearchRequest(ScopeRequest):
    """Request body for a substring search."""

    term: str = Field(description="Text to search for")
    negate: bool = Field(
        default=False, description="Return records that do NOT contain the term instead"
    )


class AuditRequest(ScopeRequest):
    """Request body for a markup bloat audit."""


class SearchMatch(BaseModel):
    """One matching leaf within a record."""

    path: str = Field(description="Location of the leaf, e.g. fields.hero.items[2].title")
    value: str = Field(description="Snippet around the first occurrence")
    count: int = Field(description="Occurrences of the term in this leaf")


class SearchResult(BaseModel):
    """A record matching a search."""

    title: str
    slug: str
    source_type: Optional[str] = Field(
        default=None, description="Page type, 'Blog' or collection key the record came from"
    )
    matches: list[SearchMatch] = Field(default_factory=list)


class SearchResponse(BaseModel):
    """Response from a search."""

    success: bool
    results: list[SearchResult] = Field(default_factory=list)
    total_items: Optional[int] = Field(default=None, description="Records considered")
    failed_scopes: Optional[list[str]] = None
    error: Optional[str] = None


class AuditIssue(BaseModel):
    """One pattern found in one leaf of a record."""

    pattern: str = Field(description="Catalog pattern that matched")
    source: str = Field(default="", description="Tool family the pattern comes from")
    path: str = Field(description="Location of the leaf")
    value: str = Field(description="Snippet around the first occurrence")
    count: int = Field(description="Occurrences of the pattern in this leaf")


class AuditFinding(BaseModel):
    """A record with at least one markup bloat issue."""

    title: str
    slug: str
    source_type: str
    issues: list[AuditIssue] = Field(default_factory=list)


class AuditResponse(BaseModel):
    """Response from an audit."""

    success: bool
    results: list[AuditFinding] = Field(default_factory=list)
    total_issues: int = 0
    patterns_found: list[str] = Field(default_factory=list)
    failed_scopes: Optional[list[str]] = None
    error: Optional[str] = None


class PatternInfo(BaseModel):
    """A catalog entry as exposed by the API."""

    pattern: str
    source: str
    description: str
    generic: bool = Field(description="Whether other patterns start with this one")
