"""Directory of Open Access Journals source adapter (business profile)."""

from typing import Any
from urllib.parse import quote

from litscout.constants import (
    DOAJ_ARTICLE_URL,
    DOAJ_MAX_PAGE_SIZE,
    DOAJ_SEARCH_URL,
    UNKNOWN_AUTHOR,
)
from litscout.data_sources.base_client import RequestContext, SourceAdapter
from litscout.helpers.paper_helpers import doi_url, parse_year
from litscout.models.model_paper import Author, Paper


class DoajClient(SourceAdapter):
    """Client for the DOAJ article search.

    The query is part of the URL path, so it is percent-encoded in full.
    """

    @property
    def _source_name(self) -> str:
        return "doaj"

    async def _search(self, query: str, max_results: int) -> tuple[list[Paper], int]:
        params = {"pageSize": min(max_results, DOAJ_MAX_PAGE_SIZE)}
        data = await self._rest_get(
            DOAJ_SEARCH_URL.format(query=quote(query, safe="")),
            params,
            context=RequestContext(
                source="doaj", method="search_articles", params=params
            ),
        )
        papers = [self._parse_result(r) for r in data.get("results") or []]
        return papers, data.get("total") or len(papers)

    def _parse_result(self, result: dict[str, Any]) -> Paper:
        bibjson = result.get("bibjson") or {}
        journal = bibjson.get("journal") or {}
        doi = _typed(bibjson.get("identifier"), "doi", "id")
        issns = [
            i.get("id")
            for i in bibjson.get("identifier") or []
            if i.get("type") in ("pissn", "eissn") and i.get("id")
        ]
        article_id = result.get("id")
        return Paper(
            doi=doi,
            external_id=article_id,
            title=bibjson.get("title"),
            abstract=bibjson.get("abstract"),
            authors=[
                Author(
                    name=a.get("name") or UNKNOWN_AUTHOR,
                    affiliation=a.get("affiliation"),
                )
                for a in bibjson.get("author") or []
            ],
            journal=journal.get("title"),
            journal_issn=issns[0] if issns else None,
            year=parse_year(bibjson.get("year")),
            url=_typed(bibjson.get("link"), "fulltext", "url")
            or doi_url(doi)
            or (DOAJ_ARTICLE_URL.format(id=article_id) if article_id else None),
            publication_type="article",
            source=self._source_name,
        )


def _typed(entries: list[dict[str, Any]] | None, kind: str, key: str) -> str | None:
    """Value of ``key`` in the first entry whose ``type`` is ``kind``."""
    for entry in entries or []:
        if (entry.get("type") or "").lower() == kind and entry.get(key):
            return entry[key]
    return None
