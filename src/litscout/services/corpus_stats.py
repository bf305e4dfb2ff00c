"""Descriptive statistics over a corpus of papers."""

import math
from collections import Counter, defaultdict

from litscout.constants import TOP_JOURNALS_LIMIT
from litscout.models.model_journal import CorpusStats, TopJournal
from litscout.models.model_paper import Paper


def calculate_corpus_stats(papers: list[Paper]) -> CorpusStats:
    journal_counts: Counter[str] = Counter()
    journal_tiers: dict[str, list[int]] = defaultdict(list)
    year_counts: Counter[str] = Counter()
    total_citations = 0

    for paper in papers:
        if paper.journal:
            journal_counts[paper.journal] += 1
            if paper.journal_tier:
                journal_tiers[paper.journal].append(paper.journal_tier)
        if paper.year:
            year_counts[str(paper.year)] += 1
        total_citations += paper.citation_count or 0

    # most_common keeps first-seen order among equal counts
    top_journals = [
        TopJournal(
            journal=journal,
            count=count,
            avg_tier=(
                sum(journal_tiers[journal]) / len(journal_tiers[journal])
                if journal_tiers[journal]
                else 0.0
            ),
        )
        for journal, count in journal_counts.most_common(TOP_JOURNALS_LIMIT)
    ]

    return CorpusStats(
        total_papers=len(papers),
        journal_distribution=dict(journal_counts),
        year_distribution=dict(year_counts),
        # half-up rounding
        avg_citations=math.floor(total_citations / len(papers) + 0.5) if papers else 0,
        top_journals=top_journals,
    )
