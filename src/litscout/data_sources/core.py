"""CORE (open-access aggregator) source adapter (business profile)."""

from typing import Any

from litscout.constants import CORE_MAX_LIMIT, CORE_SEARCH_URL, UNKNOWN_AUTHOR
from litscout.data_sources.base_client import RequestContext, SourceAdapter
from litscout.helpers.paper_helpers import doi_url, first, parse_year
from litscout.models.model_paper import Author, Paper


class CoreClient(SourceAdapter):
    """Client for the CORE v3 works search."""

    @property
    def _source_name(self) -> str:
        return "core"

    async def _search(self, query: str, max_results: int) -> tuple[list[Paper], int]:
        params = {"q": query, "limit": min(max_results, CORE_MAX_LIMIT)}
        data = await self._rest_get(
            CORE_SEARCH_URL,
            params,
            headers={
                "Authorization": f"Bearer {self.settings.core_api_key}",
                "Accept": "application/json",
            },
            context=RequestContext(source="core", method="search_works", params=params),
        )
        papers = [self._parse_work(item) for item in data.get("results") or []]
        return papers, data.get("totalHits") or len(papers)

    def _parse_work(self, item: dict[str, Any]) -> Paper:
        doi = item.get("doi")
        journal = first(item.get("journals") or []) or {}
        core_id = item.get("id")
        return Paper(
            doi=doi,
            external_id=str(core_id) if core_id is not None else None,
            title=item.get("title"),
            abstract=item.get("abstract"),
            authors=[
                Author(name=a.get("name") or UNKNOWN_AUTHOR)
                for a in item.get("authors") or []
            ],
            journal=journal.get("title") or item.get("publisher"),
            journal_issn=_issn(first(journal.get("identifiers") or [])),
            year=parse_year(item.get("yearPublished")),
            url=item.get("downloadUrl")
            or first(item.get("sourceFulltextUrls") or [])
            or doi_url(doi),
            citation_count=item.get("citationCount"),
            publication_type=item.get("documentType"),
            source=self._source_name,
        )


def _issn(identifier: str | None) -> str | None:
    # CORE journal identifiers look like "issn:0001-4273"
    return identifier.removeprefix("issn:") if identifier else None
