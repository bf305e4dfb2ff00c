"""Reshapes fan-out and dedup output into the client-facing search response."""

from collections.abc import Sequence
from datetime import datetime, timezone

from litscout.models.model_paper import Paper
from litscout.models.model_search import (
    DedupOutcome,
    SearchProfile,
    SearchResponse,
    SourceBreakdown,
    SourceResult,
)


def assemble_response(
    query: str,
    sources_requested: Sequence[str],
    results: Sequence[SourceResult],
    outcome: DedupOutcome,
    *,
    profile: SearchProfile = SearchProfile.GENERAL,
    papers: list[Paper] | None = None,
) -> SearchResponse:
    """Build the SearchResponse.

    ``papers`` overrides ``outcome.unique`` when the caller has enriched,
    filtered or re-sorted the unique papers; ``total_unique`` always counts
    the papers actually returned.
    """
    final_papers = outcome.unique if papers is None else papers
    per_source = [
        SourceBreakdown(
            source=r.source_name,
            returned_count=len(r.papers),
            total_available=r.total_available_count,
            elapsed_ms=r.elapsed_ms,
            error=r.error,
        )
        for r in results
    ]
    return SearchResponse(
        query=query,
        profile=profile,
        sources_requested=list(sources_requested),
        papers=final_papers,
        total_unique=len(final_papers),
        total_found=outcome.stats.total_found,
        duplicates_removed=outcome.stats.duplicates_removed,
        per_source=per_source,
        stats=outcome.stats,
        total_elapsed_ms=sum(r.elapsed_ms for r in results),
        searched_at=datetime.now(timezone.utc),
    )
