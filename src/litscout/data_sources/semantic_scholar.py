"""Semantic Scholar source adapter (used by both search profiles)."""

from typing import Any

from litscout.constants import (
    SEMANTIC_SCHOLAR_FIELDS,
    SEMANTIC_SCHOLAR_MAX_LIMIT,
    SEMANTIC_SCHOLAR_SEARCH_URL,
    UNKNOWN_AUTHOR,
)
from litscout.data_sources.base_client import RequestContext, SourceAdapter
from litscout.helpers.paper_helpers import first
from litscout.models.model_paper import Author, Paper


class SemanticScholarClient(SourceAdapter):
    """Client for the Semantic Scholar Graph API paper search."""

    @property
    def _source_name(self) -> str:
        return "semantic_scholar"

    async def _search(self, query: str, max_results: int) -> tuple[list[Paper], int]:
        params = {
            "query": query,
            "limit": min(max_results, SEMANTIC_SCHOLAR_MAX_LIMIT),
            "fields": SEMANTIC_SCHOLAR_FIELDS,
        }
        data = await self._rest_get(
            SEMANTIC_SCHOLAR_SEARCH_URL,
            params,
            context=RequestContext(
                source="semantic_scholar", method="paper_search", params=params
            ),
        )
        papers = [self._parse_paper(item) for item in data.get("data") or []]
        return papers, data.get("total") or len(papers)

    def _parse_paper(self, item: dict[str, Any]) -> Paper:
        external_ids = item.get("externalIds") or {}
        journal = item.get("journal") or {}
        pmid = external_ids.get("PubMed")
        return Paper(
            doi=external_ids.get("DOI"),
            pmid=str(pmid) if pmid is not None else None,
            external_id=item.get("paperId"),
            title=item.get("title"),
            abstract=item.get("abstract"),
            authors=[
                Author(name=a.get("name") or UNKNOWN_AUTHOR)
                for a in item.get("authors") or []
            ],
            journal=journal.get("name") or item.get("venue") or None,
            journal_issn=journal.get("issn"),
            year=item.get("year"),
            url=item.get("url"),
            citation_count=item.get("citationCount"),
            publication_type=first(item.get("publicationTypes") or []),
            source=self._source_name,
        )
