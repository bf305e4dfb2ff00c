"""Unit tests for the RIS, CSV and BibTeX formatters."""

import csv
import io

import pytest

from litscout.models.model_paper import Author, Paper
from litscout.services.export import (
    EXPORT_FORMATS,
    bibtex_key,
    export_papers,
    to_bibtex,
    to_csv,
    to_ris,
)


class TestRis:
    def test_full_record_tag_order(self, sample_papers):
        record = to_ris(sample_papers[:1])

        assert record == "\n".join(
            [
                "TY  - JOUR",
                "TI  - Effects of Metformin on Type 2 Diabetes",
                "AB  - A randomized trial.",
                "JO  - Diabetes Care",
                "PY  - 2021",
                "DO  - 10.2337/dc21-0001",
                "AN  - 33000001",
                "UR  - https://pubmed.ncbi.nlm.nih.gov/33000001/",
                "AU  - Jane Smith",
                "AU  - Ali Khan",
                "N1  - Source: pubmed",
                "ER  - ",
            ]
        )

    def test_optional_tags_omitted(self, sample_papers):
        record = to_ris(sample_papers[2:])

        assert record == "TY  - JOUR\nTI  - Untitled preprint\nN1  - Source: medrxiv\nER  - "

    def test_records_joined_by_newline(self, sample_papers):
        output = to_ris(sample_papers)

        assert output.count("TY  - JOUR") == 3
        assert "ER  - \nTY  - JOUR" in output

    def test_idempotent(self, sample_papers):
        assert to_ris(sample_papers) == to_ris(sample_papers)

    def test_empty(self):
        assert to_ris([]) == ""


class TestCsv:
    def test_header_and_rows(self, sample_papers):
        lines = to_csv(sample_papers).split("\n")

        assert lines[0] == "title,abstract,authors,journal,year,doi,pmid,url,source,citation_count"
        assert lines[1] == (
            "Effects of Metformin on Type 2 Diabetes,A randomized trial.,Jane Smith; Ali Khan,"
            "Diabetes Care,2021,10.2337/dc21-0001,33000001,"
            "https://pubmed.ncbi.nlm.nih.gov/33000001/,pubmed,12"
        )
        assert lines[3] == "Untitled preprint,,,,,,,,medrxiv,"
        assert len(lines) == 4

    def test_comma_and_quote_escaping_round_trip(self):
        title = 'Metformin, "the wonder drug", revisited'
        paper = Paper(title=title, abstract="line one\nline two", source="openalex")

        output = to_csv([paper])

        assert '"Metformin, ""the wonder drug"", revisited"' in output
        rows = list(csv.reader(io.StringIO(output)))
        assert rows[1][0] == title
        assert rows[1][1] == "line one\nline two"

    def test_ranking_columns(self):
        paper = Paper(
            title="T",
            source="crossref",
            journal_tier=1,
            abs_rating="4*",
            abdc_rating="A*",
            is_ft50=True,
        )

        rows = list(csv.reader(io.StringIO(to_csv([paper], include_rankings=True))))

        assert rows[0][-4:] == ["journal_tier", "abs_rating", "abdc_rating", "is_ft50"]
        assert rows[1][-4:] == ["1", "4*", "A*", "True"]

    def test_idempotent(self, sample_papers):
        assert to_csv(sample_papers) == to_csv(sample_papers)

    def test_idempotent_with_rankings(self, sample_papers):
        ranked = [
            p.model_copy(update={"journal_tier": 2, "abs_rating": "3", "is_ft50": False})
            for p in sample_papers
        ]

        first_run = to_csv(ranked, include_rankings=True)

        assert first_run == to_csv(ranked, include_rankings=True)
        assert first_run != to_csv(ranked)

    def test_empty_is_header_only(self):
        assert to_csv([]) == "title,abstract,authors,journal,year,doi,pmid,url,source,citation_count"


class TestBibtex:
    def test_entry_layout(self, sample_papers):
        entry = to_bibtex(sample_papers[:1])

        assert entry == (
            "@article{102337dc210001,\n"
            "  title = {Effects of Metformin on Type 2 Diabetes},\n"
            "  author = {Jane Smith and Ali Khan},\n"
            "  journal = {Diabetes Care},\n"
            "  year = {2021},\n"
            "  doi = {10.2337/dc21-0001},\n"
            "  url = {https://pubmed.ncbi.nlm.nih.gov/33000001/}\n"
            "}"
        )

    def test_idempotent(self, sample_papers):
        assert to_bibtex(sample_papers) == to_bibtex(sample_papers)

    def test_keys_fall_back_to_position(self, sample_papers):
        output = to_bibtex(sample_papers)

        assert "@article{paper2," in output
        assert "@article{paper3," in output
        assert output.count("}\n\n@article{") == 2

    def test_bibtex_key(self):
        assert bibtex_key(Paper(source="x", doi="10.1000/ABC-def.1"), 0) == "101000ABCdef1"
        assert bibtex_key(Paper(source="x"), 4) == "paper5"


class TestRegistry:
    def test_mime_types(self):
        assert EXPORT_FORMATS["ris"].mime_type == "application/x-research-info-systems"
        assert EXPORT_FORMATS["csv"].mime_type == "text/csv"
        assert EXPORT_FORMATS["bibtex"].mime_type == "application/x-bibtex"
        assert EXPORT_FORMATS["bibtex"].extension == "bib"

    def test_export_papers_dispatch(self, sample_papers):
        assert export_papers(sample_papers, "ris") == to_ris(sample_papers)
        assert export_papers(sample_papers, "csv", include_rankings=True) == to_csv(
            sample_papers, include_rankings=True
        )

    def test_unknown_format(self, sample_papers):
        with pytest.raises(ValueError, match="Invalid format 'endnote'"):
            export_papers(sample_papers, "endnote")


def test_authors_in_csv_joined_with_semicolons():
    paper = Paper(title="T", source="x", authors=[Author(name="A, B"), Author(name="C")])

    rows = list(csv.reader(io.StringIO(to_csv([paper]))))

    assert rows[1][2] == "A, B; C"
