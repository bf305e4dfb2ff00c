"""
Two-stage deduplication of papers gathered from several sources.

Stage 1 is an exact, case-insensitive DOI match. Stage 2 compares the
normalized title against every title kept so far using Jaccard similarity
over word sets. A single pass over the papers in source order decides, so
the first copy seen of any work is the one kept.

Title comparison is quadratic in the number of kept papers.
"""

import logging
import re
from collections.abc import Sequence

from litscout.constants import GENERAL_SIMILARITY_THRESHOLD
from litscout.models.model_paper import Paper
from litscout.models.model_search import (
    DedupOutcome,
    DedupStats,
    DuplicateMatch,
    MatchKind,
    SourceResult,
)

logger = logging.getLogger(__name__)

_NON_WORD_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """Lowercase, drop punctuation and collapse whitespace."""
    title = _NON_WORD_RE.sub("", title.lower())
    return _WHITESPACE_RE.sub(" ", title).strip()


def jaccard_similarity(a: str, b: str) -> float:
    """Jaccard similarity of the whitespace-separated word sets of two strings.

    Two empty strings are identical (1.0).
    """
    words_a = set(a.split())
    words_b = set(b.split())
    union = words_a | words_b
    if not union:
        return 1.0
    return len(words_a & words_b) / len(union)


def deduplicate(
    results: Sequence[SourceResult],
    threshold: float = GENERAL_SIMILARITY_THRESHOLD,
    *,
    title_check_fresh_doi: bool = True,
    count_doi_overlap: bool = False,
) -> DedupOutcome:
    """
    Partition every paper in ``results`` into unique and duplicate.

    Parameters
    ----------
    results : Sequence[SourceResult]
        Fan-out output. Order matters: earlier sources win ties.
    threshold : float
        Minimum title similarity (inclusive) for two papers to be the same work.
    title_check_fresh_doi : bool
        Also compare titles for papers whose DOI has not been seen. Catches
        the same work listed under two DOIs (preprint and journal version).
        When False a fresh DOI alone makes a paper unique.
    count_doi_overlap : bool
        Record DOI matches in the overlap matrix. Off by default: only title
        matches are counted there.
    """
    unique: list[Paper] = []
    duplicates: list[Paper] = []
    matches: list[DuplicateMatch] = []

    # DOI -> the unique paper that represents it. A paper can introduce a DOI
    # and still be a title duplicate, in which case its DOI maps to the kept
    # paper it matched.
    kept_by_doi: dict[str, Paper] = {}
    kept_titles: list[tuple[str, Paper]] = []

    source_names = [r.source_name for r in results]
    count_by_source: dict[str, int] = {}
    overlap: dict[str, dict[str, int]] = {
        a: {b: 0 for b in source_names} for a in source_names
    }

    total = 0
    for result in results:
        for paper in result.papers:
            total += 1
            match = _classify(
                paper,
                kept_by_doi,
                kept_titles,
                threshold,
                title_check_fresh_doi,
            )

            if match is None:
                unique.append(paper)
                count_by_source[paper.source] = count_by_source.get(paper.source, 0) + 1
                continue

            duplicates.append(paper)
            matches.append(match)
            logger.debug(
                "Duplicate (%s, %.2f): %r from %s matches %r from %s",
                match.matched_by.value,
                match.similarity,
                paper.title,
                paper.source,
                match.kept.title,
                match.kept.source,
            )
            if match.matched_by is MatchKind.TITLE or count_doi_overlap:
                row = overlap.setdefault(paper.source, {})
                row[match.kept.source] = row.get(match.kept.source, 0) + 1

    logger.info(
        "Deduplicated %d papers: %d unique, %d duplicates",
        total,
        len(unique),
        len(duplicates),
    )
    return DedupOutcome(
        unique=unique,
        duplicates=duplicates,
        matches=matches,
        stats=DedupStats(
            total_found=total,
            duplicates_removed=len(duplicates),
            unique_count=len(unique),
            count_by_source=count_by_source,
            overlap_matrix=overlap,
        ),
    )


def _classify(
    paper: Paper,
    kept_by_doi: dict[str, Paper],
    kept_titles: list[tuple[str, Paper]],
    threshold: float,
    title_check_fresh_doi: bool,
) -> DuplicateMatch | None:
    """Return the match that makes ``paper`` a duplicate, or None if it is unique.

    Updates the seen-DOI and seen-title state as a side effect.
    """
    doi = paper.doi.lower() if paper.doi else None
    if doi is not None and doi in kept_by_doi:
        return DuplicateMatch(
            duplicate=paper, kept=kept_by_doi[doi], matched_by=MatchKind.DOI
        )

    if doi is not None and not title_check_fresh_doi:
        kept_by_doi[doi] = paper
        kept_titles.append((normalize_title(paper.title), paper))
        return None

    title = normalize_title(paper.title)
    for kept_title, kept_paper in kept_titles:
        similarity = jaccard_similarity(title, kept_title)
        if similarity >= threshold:
            if doi is not None:
                kept_by_doi[doi] = kept_paper
            return DuplicateMatch(
                duplicate=paper,
                kept=kept_paper,
                matched_by=MatchKind.TITLE,
                similarity=similarity,
            )

    if doi is not None:
        kept_by_doi[doi] = paper
    kept_titles.append((title, paper))
    return None
