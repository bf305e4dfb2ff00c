"""FastAPI application."""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Query, Response
from pydantic import BaseModel

from litscout import __version__
from litscout.config import Settings, get_settings
from litscout.data_sources.registry import build_adapters, describe_sources
from litscout.models.model_journal import CorpusStats
from litscout.models.model_paper import Paper
from litscout.models.model_search import SearchProfile, SearchRequest, SearchResponse
from litscout.services.corpus_stats import calculate_corpus_stats
from litscout.services.export import EXPORT_FORMATS, export_papers
from litscout.services.journal_enrichment import InMemoryJournalRankings
from litscout.services.query_expansion import expand_query
from litscout.services.search import (
    AllSourcesFailedError,
    SearchRequestError,
    run_search,
)

logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="LitScout API",
    description="Multi-source literature search and deduplication for systematic reviews",
    version=__version__,
)


class ExportRequest(BaseModel):
    papers: list[Paper]
    format: str = "ris"
    include_rankings: bool = False


class PapersRequest(BaseModel):
    papers: list[Paper]


class ExpandRequest(BaseModel):
    query: str


class ExpandResponse(BaseModel):
    query: str
    expanded: list[str]


@lru_cache
def get_journal_rankings() -> InMemoryJournalRankings:
    """Journal ranking table, loaded once; empty when no CSV is configured."""
    path = get_settings().journal_rankings_path
    if path is None:
        return InMemoryJournalRankings()
    return InMemoryJournalRankings.from_csv(path)


def get_adapter_factory():
    return build_adapters


async def _search(
    request: SearchRequest,
    settings: Settings,
    rankings: InMemoryJournalRankings,
    adapter_factory,
) -> SearchResponse:
    try:
        return await run_search(
            request,
            settings=settings,
            journal_rankings=rankings,
            adapter_factory=adapter_factory,
        )
    except SearchRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AllSourcesFailedError as e:
        logger.warning("Search %r failed on every source", request.query)
        raise HTTPException(
            status_code=502,
            detail={
                "error": "all sources failed",
                "per_source": [
                    {"source": r.source_name, "elapsed_ms": r.elapsed_ms, "error": r.error}
                    for r in e.results
                ],
            },
        )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/databases")
async def list_databases(
    profile: SearchProfile = SearchProfile.GENERAL,
) -> dict[str, list[dict[str, str]]]:
    return {"databases": describe_sources(profile)}


@app.post("/search")
async def search_post(
    request: SearchRequest,
    settings: Annotated[Settings, Depends(get_settings)],
    rankings: Annotated[InMemoryJournalRankings, Depends(get_journal_rankings)],
    adapter_factory=Depends(get_adapter_factory),
) -> SearchResponse:
    return await _search(request, settings, rankings, adapter_factory)


@app.get("/search")
async def search_get(
    settings: Annotated[Settings, Depends(get_settings)],
    rankings: Annotated[InMemoryJournalRankings, Depends(get_journal_rankings)],
    adapter_factory=Depends(get_adapter_factory),
    q: str = "",
    databases: Annotated[str | None, Query(description="Comma-separated source ids")] = None,
    max_results: Annotated[int, Query(alias="max")] = 100,
) -> SearchResponse:
    """Simple query-string search over the general profile."""
    request = SearchRequest(
        query=q,
        sources=databases.split(",") if databases is not None else None,
        max_results=max_results,
    )
    return await _search(request, settings, rankings, adapter_factory)


@app.post("/export")
async def export(body: ExportRequest) -> Response:
    fmt = body.format.lower()
    try:
        content = export_papers(body.papers, fmt, include_rankings=body.include_rankings)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    export_format = EXPORT_FORMATS[fmt]
    return Response(
        content=content,
        media_type=export_format.mime_type,
        headers={
            "Content-Disposition": f'attachment; filename="litscout_papers.{export_format.extension}"'
        },
    )


@app.post("/stats")
async def stats(body: PapersRequest) -> CorpusStats:
    return calculate_corpus_stats(body.papers)


@app.post("/expand")
async def expand(body: ExpandRequest) -> ExpandResponse:
    if not body.query.strip():
        raise HTTPException(status_code=400, detail="missing query")
    return ExpandResponse(query=body.query, expanded=await expand_query(body.query))
