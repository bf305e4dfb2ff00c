"""
arXiv source adapter, restricted to the economics categories (business profile).

The arXiv API answers with an Atom feed. Query terms are ANDed and each one is
matched against all fields.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from litscout.constants import (
    ARXIV_ECON_CATEGORY,
    ARXIV_ECON_JOURNAL,
    ARXIV_MAX_RESULTS,
    ARXIV_QUERY_URL,
)
from litscout.data_sources.base_client import (
    DataSourceError,
    RequestContext,
    SourceAdapter,
)
from litscout.helpers.paper_helpers import parse_int, parse_year
from litscout.models.model_paper import Author, Paper

NAMESPACES = {
    "atom": "http://www.w3.org/2005/Atom",
    "arxiv": "http://arxiv.org/schemas/atom",
    "opensearch": "http://a9.com/-/spec/opensearch/1.1/",
}


class ArxivEconClient(SourceAdapter):
    """Client for the arXiv export API, economics (``econ.*``) only."""

    @property
    def _source_name(self) -> str:
        return "arxiv_econ"

    async def _search(self, query: str, max_results: int) -> tuple[list[Paper], int]:
        params = {
            "search_query": build_search_query(query),
            "start": 0,
            "max_results": min(max_results, ARXIV_MAX_RESULTS),
            "sortBy": "relevance",
        }
        xml_text = await self._rest_get_text(
            ARXIV_QUERY_URL,
            params,
            context=RequestContext(source="arxiv_econ", method="query", params=params),
        )
        return self._parse_feed(xml_text)

    def _parse_feed(self, xml_text: str) -> tuple[list[Paper], int]:
        try:
            root = ET.fromstring(xml_text)
        except ET.ParseError as e:
            raise DataSourceError(self._source_name, f"Failed to parse XML: {e}")

        papers = []
        for entry in root.findall("atom:entry", NAMESPACES):
            entry_id = _text(entry, "atom:id") or ""
            # Invalid queries come back as a single entry describing the error
            if "/api/errors" in entry_id:
                raise DataSourceError(
                    self._source_name, _text(entry, "atom:summary") or "query rejected"
                )
            papers.append(self._parse_entry(entry, entry_id))

        total = parse_int(_text(root, "opensearch:totalResults"))
        return papers, total if total is not None else len(papers)

    def _parse_entry(self, entry: ET.Element, entry_id: str) -> Paper:
        authors = [
            Author(
                name=name,
                affiliation=_text(author, "arxiv:affiliation"),
            )
            for author in entry.findall("atom:author", NAMESPACES)
            if (name := _text(author, "atom:name"))
        ]
        return Paper(
            doi=_text(entry, "arxiv:doi"),
            external_id=entry_id.rsplit("/abs/", 1)[-1] or None,
            title=_text(entry, "atom:title"),
            abstract=_text(entry, "atom:summary"),
            authors=authors,
            journal=_text(entry, "arxiv:journal_ref") or ARXIV_ECON_JOURNAL,
            year=parse_year(_text(entry, "atom:published")),
            url=entry_id or None,
            publication_type="preprint",
            source=self._source_name,
        )


def build_search_query(query: str) -> str:
    """``all:term1 AND all:term2 ... AND cat:econ.*``"""
    terms = [f"all:{term}" for term in query.split()]
    return " AND ".join([*terms, f"cat:{ARXIV_ECON_CATEGORY}"])


def _text(elem: ET.Element, path: str) -> str | None:
    """Whitespace-collapsed text of a namespaced child element, or None."""
    found = elem.find(path, NAMESPACES)
    if found is None or found.text is None:
        return None
    return " ".join(found.text.split()) or None
