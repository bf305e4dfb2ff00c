"""
Export formatters: RIS, CSV and BibTeX.

Each is a pure function of the paper list, so exporting the same papers twice
yields byte-identical output.
"""

import csv
import io
import re
from collections.abc import Callable
from typing import NamedTuple

from litscout.constants import (
    BIBTEX_MIME_TYPE,
    CSV_HEADER,
    CSV_MIME_TYPE,
    CSV_RANKING_HEADER,
    RIS_MIME_TYPE,
)
from litscout.models.model_paper import Paper

_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")


def to_ris(papers: list[Paper]) -> str:
    """One RIS record per paper, tags in a fixed order reference managers expect."""
    records = []
    for paper in papers:
        lines = ["TY  - JOUR", f"TI  - {paper.title}"]
        if paper.abstract:
            lines.append(f"AB  - {paper.abstract}")
        if paper.journal:
            lines.append(f"JO  - {paper.journal}")
        if paper.year:
            lines.append(f"PY  - {paper.year}")
        if paper.doi:
            lines.append(f"DO  - {paper.doi}")
        if paper.pmid:
            lines.append(f"AN  - {paper.pmid}")
        if paper.url:
            lines.append(f"UR  - {paper.url}")
        lines.extend(f"AU  - {name}" for name in paper.author_names)
        # Source database, for PRISMA identification counts
        lines.append(f"N1  - Source: {paper.source}")
        lines.append("ER  - ")
        records.append("\n".join(lines))
    return "\n".join(records)


def to_csv(papers: list[Paper], include_rankings: bool = False) -> str:
    """Header row plus one row per paper; authors joined with ``"; "``.

    Fields containing a comma, quote or newline are quoted, with inner quotes
    doubled. ``include_rankings`` appends the journal-ranking columns.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER + (CSV_RANKING_HEADER if include_rankings else []))
    for paper in papers:
        row = [
            paper.title,
            paper.abstract,
            "; ".join(paper.author_names),
            paper.journal,
            paper.year,
            paper.doi,
            paper.pmid,
            paper.url,
            paper.source,
            paper.citation_count,
        ]
        if include_rankings:
            row += [paper.journal_tier, paper.abs_rating, paper.abdc_rating, paper.is_ft50]
        writer.writerow(row)
    return buffer.getvalue().removesuffix("\n")


def bibtex_key(paper: Paper, index: int) -> str:
    """DOI stripped to alphanumerics, else ``paper{index + 1}``."""
    return _NON_ALNUM_RE.sub("", paper.doi or "") or f"paper{index + 1}"


def to_bibtex(papers: list[Paper]) -> str:
    entries = []
    for i, paper in enumerate(papers):
        entries.append(
            f"@article{{{bibtex_key(paper, i)},\n"
            f"  title = {{{paper.title}}},\n"
            f"  author = {{{' and '.join(paper.author_names)}}},\n"
            f"  journal = {{{paper.journal or ''}}},\n"
            f"  year = {{{paper.year or ''}}},\n"
            f"  doi = {{{paper.doi or ''}}},\n"
            f"  url = {{{paper.url or ''}}}\n"
            "}"
        )
    return "\n\n".join(entries)


class ExportFormat(NamedTuple):
    formatter: Callable[[list[Paper]], str]
    mime_type: str
    extension: str


EXPORT_FORMATS: dict[str, ExportFormat] = {
    "ris": ExportFormat(to_ris, RIS_MIME_TYPE, "ris"),
    "csv": ExportFormat(to_csv, CSV_MIME_TYPE, "csv"),
    "bibtex": ExportFormat(to_bibtex, BIBTEX_MIME_TYPE, "bib"),
}


def export_papers(papers: list[Paper], fmt: str, include_rankings: bool = False) -> str:
    """Render ``papers`` in the named format.

    Raises
    ------
    ValueError
        If ``fmt`` is not one of ``EXPORT_FORMATS``.
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(
            f"Invalid format {fmt!r}. Use one of: {', '.join(EXPORT_FORMATS)}"
        )
    if fmt == "csv":
        return to_csv(papers, include_rankings=include_rankings)
    return EXPORT_FORMATS[fmt].formatter(papers)
