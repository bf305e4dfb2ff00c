"""BASE (Bielefeld Academic Search Engine) source adapter (business profile).

BASE only answers requests from registered IP addresses; elsewhere the
search fails with an HTTP error and the usual error envelope.
"""

from typing import Any

from litscout.constants import BASE_MAX_HITS, BASE_SEARCH_URL
from litscout.data_sources.base_client import RequestContext, SourceAdapter
from litscout.helpers.paper_helpers import extract_doi_from_url, first, parse_year
from litscout.models.model_paper import Author, Paper


class BaseSearchClient(SourceAdapter):
    """Client for the BASE HTTP search interface (Dublin Core records)."""

    @property
    def _source_name(self) -> str:
        return "base"

    async def _search(self, query: str, max_results: int) -> tuple[list[Paper], int]:
        params = {
            "func": "PerformSearch",
            "query": query,
            "format": "json",
            "hits": min(max_results, BASE_MAX_HITS),
        }
        data = await self._rest_get(
            BASE_SEARCH_URL,
            params,
            context=RequestContext(source="base", method="PerformSearch", params=params),
        )
        response = data.get("response") or {}
        papers = [self._parse_doc(doc) for doc in response.get("docs") or []]
        return papers, response.get("numFound") or len(papers)

    def _parse_doc(self, doc: dict[str, Any]) -> Paper:
        identifiers = _as_list(doc.get("dcdoi")) + _as_list(doc.get("dcidentifier"))
        doi = next(filter(None, map(extract_doi_from_url, identifiers)), None)
        link = first(doc.get("dclink")) or next(
            (i for i in identifiers if i.startswith("http")), None
        )
        return Paper(
            doi=doi,
            title=first(doc.get("dctitle")),
            abstract=first(doc.get("dcdescription")),
            authors=[Author(name=name) for name in _as_list(doc.get("dccreator"))],
            journal=first(doc.get("dcsource")),
            year=parse_year(first(doc.get("dcyear"))),
            url=link,
            source=self._source_name,
        )


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    values = value if isinstance(value, list) else [value]
    return [str(v).strip() for v in values if v and str(v).strip()]
