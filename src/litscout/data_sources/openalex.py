"""OpenAlex source adapter (used by both search profiles)."""

from typing import Any

from litscout.constants import (
    OPENALEX_MAX_PER_PAGE,
    OPENALEX_WORKS_URL,
    UNKNOWN_AUTHOR,
    USER_AGENT,
)
from litscout.data_sources.base_client import RequestContext, SourceAdapter
from litscout.helpers.paper_helpers import first, reconstruct_abstract, strip_doi_prefix
from litscout.models.model_paper import Author, Paper


class OpenAlexClient(SourceAdapter):
    """Client for the OpenAlex works search."""

    @property
    def _source_name(self) -> str:
        return "openalex"

    async def _search(self, query: str, max_results: int) -> tuple[list[Paper], int]:
        params = {
            "search": query,
            "per_page": min(max_results, OPENALEX_MAX_PER_PAGE),
            "mailto": self.settings.contact_email,
        }
        data = await self._rest_get(
            OPENALEX_WORKS_URL,
            params,
            headers={"User-Agent": f"{USER_AGENT} (mailto:{self.settings.contact_email})"},
            context=RequestContext(source="openalex", method="works", params=params),
        )
        papers = [self._parse_work(work) for work in data.get("results") or []]
        total = (data.get("meta") or {}).get("count") or len(papers)
        return papers, total

    def _parse_work(self, work: dict[str, Any]) -> Paper:
        location = work.get("primary_location") or {}
        venue = location.get("source") or {}
        inverted_index = work.get("abstract_inverted_index")

        authors = []
        for authorship in work.get("authorships") or []:
            author = authorship.get("author") or {}
            institution = first(authorship.get("institutions") or []) or {}
            authors.append(
                Author(
                    name=author.get("display_name") or UNKNOWN_AUTHOR,
                    orcid=author.get("orcid"),
                    affiliation=institution.get("display_name"),
                )
            )

        return Paper(
            doi=strip_doi_prefix(work.get("doi")),
            external_id=work.get("id"),
            title=work.get("title"),
            abstract=reconstruct_abstract(inverted_index) if inverted_index else None,
            authors=authors,
            journal=venue.get("display_name"),
            journal_issn=venue.get("issn_l"),
            year=work.get("publication_year"),
            url=location.get("landing_page_url") or work.get("doi"),
            citation_count=work.get("cited_by_count"),
            publication_type=work.get("type"),
            source=self._source_name,
        )
