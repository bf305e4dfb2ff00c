"""
End-to-end literature search: validate, fan out, deduplicate, enrich, assemble.

Callers choose the sources explicitly on each request. There is no global
"enabled sources" state.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from litscout.config import Settings, get_settings
from litscout.constants import BUSINESS_DEFAULT_SOURCES, GENERAL_DEFAULT_SOURCES
from litscout.data_sources.base_client import SourceAdapter
from litscout.data_sources.registry import available_sources, build_adapters
from litscout.models.model_search import (
    SearchProfile,
    SearchRequest,
    SearchResponse,
    SourceResult,
)
from litscout.services.assembler import assemble_response
from litscout.services.deduplicator import deduplicate
from litscout.services.fan_out import search_all
from litscout.services.journal_enrichment import (
    JournalRankingLookup,
    enrich_with_journal_rankings,
    filter_by_min_tier,
    sort_by_tier_and_citations,
)

logger = logging.getLogger(__name__)


class SearchRequestError(ValueError):
    """The request cannot be run as given (bad query, sources or limits)."""


class AllSourcesFailedError(RuntimeError):
    """Every selected source failed; ``results`` holds the per-source errors."""

    def __init__(self, results: list[SourceResult]):
        self.results = results
        summary = "; ".join(f"{r.source_name}: {r.error}" for r in results)
        super().__init__(f"All sources failed ({summary})")


@dataclass(frozen=True)
class ProfileConfig:
    """What a search profile binds: sources, threshold and enrichment."""

    allowed_sources: tuple[str, ...]
    default_sources: tuple[str, ...]
    similarity_threshold: float
    rank_journals: bool


def profile_config(profile: SearchProfile, settings: Settings) -> ProfileConfig:
    if profile is SearchProfile.BUSINESS:
        return ProfileConfig(
            allowed_sources=available_sources(profile),
            default_sources=BUSINESS_DEFAULT_SOURCES,
            similarity_threshold=settings.business_similarity_threshold,
            rank_journals=True,
        )
    return ProfileConfig(
        allowed_sources=available_sources(profile),
        default_sources=GENERAL_DEFAULT_SOURCES,
        similarity_threshold=settings.general_similarity_threshold,
        rank_journals=False,
    )


def resolve_sources(request: SearchRequest, config: ProfileConfig) -> list[str]:
    """Validate the request and return its source ids, repeats removed."""
    if not request.query or not request.query.strip():
        raise SearchRequestError("missing query")
    if request.max_results < 1:
        raise SearchRequestError("max_results must be a positive integer")

    sources = config.default_sources if request.sources is None else request.sources
    source_ids = list(dict.fromkeys(s.strip() for s in sources if s and s.strip()))
    if not source_ids:
        raise SearchRequestError("no sources selected")

    unknown = [s for s in source_ids if s not in config.allowed_sources]
    if unknown:
        raise SearchRequestError(
            f"unknown source(s) for {request.profile.value} profile: "
            f"{', '.join(unknown)}; available: {', '.join(config.allowed_sources)}"
        )
    return source_ids


async def run_search(
    request: SearchRequest,
    *,
    settings: Settings | None = None,
    journal_rankings: JournalRankingLookup | None = None,
    adapter_factory: Callable[[list[str], Settings], Sequence[SourceAdapter]] = build_adapters,
) -> SearchResponse:
    """
    Run one literature search.

    Raises
    ------
    SearchRequestError
        Blank query, empty or unknown sources, non-positive ``max_results``.
    AllSourcesFailedError
        Every selected source returned an error.
    """
    settings = settings or get_settings()
    config = profile_config(request.profile, settings)
    source_ids = resolve_sources(request, config)
    query = request.query.strip()

    adapters = adapter_factory(source_ids, settings)
    results = await search_all(adapters, query, request.max_results)

    if all(r.error is not None for r in results):
        raise AllSourcesFailedError(results)

    outcome = deduplicate(results, threshold=config.similarity_threshold)

    papers = outcome.unique
    if config.rank_journals:
        if journal_rankings is not None:
            papers = enrich_with_journal_rankings(papers, journal_rankings)
        papers = filter_by_min_tier(papers, request.min_journal_tier)
        papers = sort_by_tier_and_citations(papers)

    response = assemble_response(
        query,
        source_ids,
        results,
        outcome,
        profile=request.profile,
        papers=papers,
    )
    logger.info(
        "Search %r (%s): %d unique of %d found across %d sources, %d failed",
        query,
        request.profile.value,
        response.total_unique,
        response.total_found,
        len(results),
        len(response.failed_sources),
    )
    return response
