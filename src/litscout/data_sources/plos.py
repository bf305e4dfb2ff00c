"""PLOS journals source adapter (general profile)."""

from typing import Any

from litscout.constants import (
    PLOS_ARTICLE_URL,
    PLOS_FIELDS,
    PLOS_MAX_ROWS,
    PLOS_SEARCH_URL,
)
from litscout.data_sources.base_client import RequestContext, SourceAdapter
from litscout.helpers.paper_helpers import first, parse_int, parse_year
from litscout.models.model_paper import Author, Paper


class PlosClient(SourceAdapter):
    """Client for the PLOS Solr search API."""

    @property
    def _source_name(self) -> str:
        return "plos"

    async def _search(self, query: str, max_results: int) -> tuple[list[Paper], int]:
        params = {
            "q": query,
            # Whole articles only; the index also holds per-section documents
            "fq": "doc_type:full",
            "rows": min(max_results, PLOS_MAX_ROWS),
            "wt": "json",
            "fl": PLOS_FIELDS,
        }
        data = await self._rest_get(
            PLOS_SEARCH_URL,
            params,
            context=RequestContext(source="plos", method="search", params=params),
        )
        response = data.get("response") or {}
        papers = [self._parse_doc(doc) for doc in response.get("docs") or []]
        return papers, response.get("numFound") or len(papers)

    def _parse_doc(self, doc: dict[str, Any]) -> Paper:
        doi = doc.get("id")
        return Paper(
            doi=doi,
            title=first(doc.get("title")),
            abstract=(first(doc.get("abstract")) or "").strip() or None,
            authors=[Author(name=name) for name in doc.get("author") or [] if name],
            journal=doc.get("journal") or "PLOS",
            year=parse_year(doc.get("publication_date")),
            url=PLOS_ARTICLE_URL.format(doi=doi) if doi else None,
            # PLOS reports total article views, not citations
            citation_count=parse_int(doc.get("counter_total_all")),
            publication_type=doc.get("article_type"),
            source=self._source_name,
        )
