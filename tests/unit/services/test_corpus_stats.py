"""Unit tests for corpus statistics."""

from litscout.models.model_paper import Paper
from litscout.services.corpus_stats import calculate_corpus_stats


def test_empty_corpus():
    stats = calculate_corpus_stats([])

    assert stats.total_papers == 0
    assert stats.avg_citations == 0
    assert stats.journal_distribution == {}
    assert stats.top_journals == []


def test_distributions_and_top_journals():
    papers = [
        Paper(title="a", source="x", journal="AMJ", year=2020, citation_count=10, journal_tier=1),
        Paper(title="b", source="x", journal="AMJ", year=2021, citation_count=5, journal_tier=2),
        Paper(title="c", source="x", journal="JMS", year=2021),
        Paper(title="d", source="x"),
    ]

    stats = calculate_corpus_stats(papers)

    assert stats.total_papers == 4
    assert stats.journal_distribution == {"AMJ": 2, "JMS": 1}
    assert stats.year_distribution == {"2020": 1, "2021": 2}
    # 15 / 4 = 3.75
    assert stats.avg_citations == 4
    assert stats.top_journals[0].journal == "AMJ"
    assert stats.top_journals[0].count == 2
    assert stats.top_journals[0].avg_tier == 1.5
    assert stats.top_journals[1].avg_tier == 0.0


def test_half_rounds_up():
    papers = [
        Paper(title="a", source="x", citation_count=1),
        Paper(title="b", source="x", citation_count=2),
    ]

    assert calculate_corpus_stats(papers).avg_citations == 2


def test_top_journals_limited_to_ten():
    papers = [Paper(title=str(i), source="x", journal=f"J{i}") for i in range(15)]

    assert len(calculate_corpus_stats(papers).top_journals) == 10
