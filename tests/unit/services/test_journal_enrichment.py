"""Unit tests for journal-ranking enrichment."""

from litscout.models.model_journal import (
    JournalRanking,
    normalize_issn,
    normalize_journal_name,
)
from litscout.models.model_paper import Paper
from litscout.services.journal_enrichment import (
    InMemoryJournalRankings,
    enrich_with_journal_rankings,
    filter_by_min_tier,
    sort_by_tier_and_citations,
)

AMJ = JournalRanking(
    journal_name="Academy of Management Journal",
    issn="0001-4273",
    tier=1,
    abs_rating="4*",
    abdc_rating="A*",
    is_ft50=True,
)
JMS = JournalRanking(journal_name="Journal of Management Studies", tier=2, abs_rating="4")


class FailingLookup:
    def lookup(self, names, issns):
        raise ConnectionError("rankings store unavailable")


class RecordingLookup(InMemoryJournalRankings):
    def __init__(self, rankings):
        super().__init__(rankings)
        self.queries = []

    def lookup(self, names, issns):
        self.queries.append((names, issns))
        return super().lookup(names, issns)


class TestEnrich:
    def test_matches_by_issn_then_name(self):
        by_issn = Paper(title="A", source="crossref", journal="AMJ", journal_issn="0001-4273")
        by_name = Paper(title="B", source="openalex", journal="JOURNAL OF MANAGEMENT STUDIES")
        unknown = Paper(title="C", source="core", journal="Some Newsletter")

        enriched = enrich_with_journal_rankings(
            [by_issn, by_name, unknown], InMemoryJournalRankings([AMJ, JMS])
        )

        assert enriched[0].journal_tier == 1
        assert enriched[0].abs_rating == "4*"
        assert enriched[0].abdc_rating == "A*"
        assert enriched[0].is_ft50 is True
        assert enriched[1].journal_tier == 2
        assert enriched[1].is_ft50 is False
        assert enriched[2] is unknown
        # inputs untouched
        assert by_issn.journal_tier is None

    def test_single_lookup_with_normalized_keys(self):
        lookup = RecordingLookup([AMJ])
        papers = [
            Paper(title="A", source="x", journal="Academy of Management Journal"),
            Paper(title="B", source="x", journal="academy of management journal", journal_issn="0001-4273"),
        ]

        enrich_with_journal_rankings(papers, lookup)

        assert lookup.queries == [({"academy of management journal"}, {"0001-4273"})]

    def test_whitespace_and_issn_case_do_not_block_matches(self):
        ranked = JournalRanking(journal_name=" Journal of Finance ", issn="0022-108x", tier=1)
        padded_name = Paper(title="A", source="openalex", journal="Journal of Finance  ")
        upper_issn = Paper(title="B", source="crossref", journal="JF", journal_issn=" 0022-108X")

        enriched = enrich_with_journal_rankings(
            [padded_name, upper_issn], InMemoryJournalRankings([ranked])
        )

        assert [p.journal_tier for p in enriched] == [1, 1]

    def test_lookup_receives_normalized_issns(self):
        lookup = RecordingLookup([])

        enrich_with_journal_rankings(
            [Paper(title="A", source="x", journal_issn="1234-567x ")], lookup
        )

        assert lookup.queries == [(set(), {"1234-567X"})]

    def test_no_journals_skips_lookup(self):
        lookup = RecordingLookup([AMJ])
        papers = [Paper(title="A", source="ssrn")]

        assert enrich_with_journal_rankings(papers, lookup) == papers
        assert lookup.queries == []

    def test_failing_lookup_returns_papers_unranked(self):
        papers = [Paper(title="A", source="x", journal="Academy of Management Journal")]

        assert enrich_with_journal_rankings(papers, FailingLookup()) == papers


class TestInMemoryRankings:
    def test_from_csv(self, tmp_path):
        path = tmp_path / "rankings.csv"
        path.write_text(
            "journal_name,issn,tier,abs_rating,abdc_rating,is_ft50\n"
            "Academy of Management Journal,0001-4273,1,4*,A*,true\n"
            "Journal of Management Studies,,2,4,A*,false\n"
            "Regional Review,,,,,\n"
            ",,1,,,\n"
        )

        rankings = InMemoryJournalRankings.from_csv(path)

        assert len(rankings) == 3
        found = rankings.lookup({"regional review"}, {"0001-4273"})
        assert {r.journal_name for r in found} == {"Academy of Management Journal", "Regional Review"}
        regional = next(r for r in found if r.journal_name == "Regional Review")
        assert regional.tier == 5
        assert regional.issn is None
        assert regional.is_ft50 is False

    def test_lookup_does_not_duplicate_rankings(self):
        found = InMemoryJournalRankings([AMJ]).lookup(
            {"academy of management journal"}, {"0001-4273"}
        )

        assert found == [AMJ]


def test_filter_by_min_tier():
    papers = [
        Paper(title="a", source="x", journal_tier=1),
        Paper(title="b", source="x", journal_tier=3),
        Paper(title="c", source="x"),
    ]

    assert [p.title for p in filter_by_min_tier(papers, 2)] == ["a", "c"]
    assert filter_by_min_tier(papers, None) == papers


def test_sort_by_tier_then_citations():
    papers = [
        Paper(title="unranked", source="x", citation_count=1000),
        Paper(title="t2-low", source="x", journal_tier=2, citation_count=1),
        Paper(title="t1", source="x", journal_tier=1),
        Paper(title="t2-high", source="x", journal_tier=2, citation_count=40),
        Paper(title="t5", source="x", journal_tier=5),
    ]

    ordered = [p.title for p in sort_by_tier_and_citations(papers)]

    assert ordered == ["t1", "t2-high", "t2-low", "t5", "unranked"]


def test_normalizers():
    assert normalize_journal_name("  Strategic Management Journal ") == "strategic management journal"
    assert normalize_issn(" 0022-108x") == "0022-108X"
