"""
Pydantic models for one search request and everything it produces.

All of these are created fresh per request and discarded once the response
has been built.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from litscout.constants import DEFAULT_MAX_RESULTS
from litscout.models.model_paper import Paper


class SearchProfile(str, Enum):
    GENERAL = "general"  # health / life-science literature
    BUSINESS = "business"  # business & management literature, journal-ranked


class MatchKind(str, Enum):
    DOI = "doi"
    TITLE = "title"


# ------------------------------------------------------------------
# Per-adapter envelope
# ------------------------------------------------------------------


class SourceResult(BaseModel):
    """What one source adapter returned for one query."""

    source_name: str
    papers: list[Paper] = []
    total_available_count: int = 0
    elapsed_ms: float = 0.0
    error: str | None = None

    @model_validator(mode="after")
    def failed_source_has_no_papers(self) -> "SourceResult":
        if self.error is not None and self.papers:
            raise ValueError("a failed source result cannot carry papers")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None


# ------------------------------------------------------------------
# Deduplication
# ------------------------------------------------------------------


class DuplicateMatch(BaseModel):
    """Why a paper was classified as a duplicate, and of which kept paper."""

    duplicate: Paper
    kept: Paper
    matched_by: MatchKind
    similarity: float = 1.0


class DedupStats(BaseModel):
    total_found: int = 0
    duplicates_removed: int = 0
    unique_count: int = 0
    count_by_source: dict[str, int] = {}
    # overlap_matrix[a][b]: papers from source a judged duplicates of a paper kept from b
    overlap_matrix: dict[str, dict[str, int]] = {}


class DedupOutcome(BaseModel):
    """Partition of the unioned papers into unique and duplicate.

    ``matches[i]`` explains ``duplicates[i]``.
    """

    unique: list[Paper] = []
    duplicates: list[Paper] = []
    matches: list[DuplicateMatch] = []
    stats: DedupStats = Field(default_factory=DedupStats)


# ------------------------------------------------------------------
# Request / response
# ------------------------------------------------------------------


class SearchRequest(BaseModel):
    query: str = ""
    sources: list[str] | None = None  # None -> profile defaults
    max_results: int = DEFAULT_MAX_RESULTS
    profile: SearchProfile = SearchProfile.GENERAL
    min_journal_tier: int | None = None  # business profile only


class SourceBreakdown(BaseModel):
    """One row of the per-source summary shown to the user."""

    source: str
    returned_count: int
    total_available: int
    elapsed_ms: float
    error: str | None = None


class SearchResponse(BaseModel):
    query: str
    profile: SearchProfile
    sources_requested: list[str]
    papers: list[Paper]
    total_unique: int
    total_found: int
    duplicates_removed: int
    per_source: list[SourceBreakdown]
    stats: DedupStats
    total_elapsed_ms: float
    searched_at: datetime

    @property
    def failed_sources(self) -> list[str]:
        return [b.source for b in self.per_source if b.error is not None]
