"""Crossref source adapter (business profile)."""

from typing import Any

from litscout.constants import (
    CROSSREF_MAX_ROWS,
    CROSSREF_SELECT,
    CROSSREF_WORKS_URL,
    UNKNOWN_AUTHOR,
    USER_AGENT,
)
from litscout.data_sources.base_client import RequestContext, SourceAdapter
from litscout.helpers.paper_helpers import doi_url, first, strip_html
from litscout.models.model_paper import Author, Paper


class CrossrefClient(SourceAdapter):
    """Client for the Crossref REST ``/works`` query."""

    @property
    def _source_name(self) -> str:
        return "crossref"

    async def _search(self, query: str, max_results: int) -> tuple[list[Paper], int]:
        params = {
            "query": query,
            "rows": min(max_results, CROSSREF_MAX_ROWS),
            "select": CROSSREF_SELECT,
            "mailto": self.settings.contact_email,
        }
        data = await self._rest_get(
            CROSSREF_WORKS_URL,
            params,
            headers={"User-Agent": f"{USER_AGENT} (mailto:{self.settings.contact_email})"},
            context=RequestContext(source="crossref", method="works", params=params),
        )
        message = data.get("message") or {}
        papers = [self._parse_item(item) for item in message.get("items") or []]
        return papers, message.get("total-results") or len(papers)

    def _parse_item(self, item: dict[str, Any]) -> Paper:
        doi = item.get("DOI")
        date_parts = (item.get("published") or {}).get("date-parts") or [[]]
        year = first(first(date_parts) or [])

        authors = []
        for a in item.get("author") or []:
            name = f"{a.get('given') or ''} {a.get('family') or ''}".strip()
            affiliation = first(a.get("affiliation") or []) or {}
            authors.append(
                Author(
                    name=name or a.get("name") or UNKNOWN_AUTHOR,
                    affiliation=affiliation.get("name"),
                    orcid=a.get("ORCID"),
                )
            )

        return Paper(
            doi=doi,
            title=first(item.get("title")),
            abstract=strip_html(item.get("abstract")),
            authors=authors,
            journal=first(item.get("container-title")),
            journal_issn=first(item.get("ISSN")),
            year=year if isinstance(year, int) else None,
            url=item.get("URL") or doi_url(doi),
            citation_count=item.get("is-referenced-by-count"),
            publication_type=item.get("type"),
            source=self._source_name,
        )
