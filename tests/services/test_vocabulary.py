"""
Tests for vocabulary loading from CSV.
"""

from pathlib import Path

import pytest

from tagassist.exceptions import VocabularyUnavailableError
from tagassist.services.vocabulary import CsvVocabularySource, parse_vocabulary_rows


class TestCsvVocabularySource:
    """Tests for CsvVocabularySource.load."""

    def test_loads_rows_with_header(self, tmp_path):
        path = tmp_path / "vocab.csv"
        path.write_text(
            "category,name,uses\n"
            "fandom,Example Fandom,1200\n"
            'relationship,"Hero & Rival, Platonic",\n',
            encoding="utf-8",
        )

        entries = CsvVocabularySource(path).load()

        assert [(e.category, e.name, e.uses) for e in entries] == [
            ("fandom", "Example Fandom", 1200),
            ("relationship", "Hero & Rival, Platonic", 0),
        ]

    def test_loads_rows_without_header(self, tmp_path):
        path = tmp_path / "vocab.csv"
        path.write_text("freeform, Fluff, 650389\n", encoding="utf-8")

        entries = CsvVocabularySource(path).load()

        assert entries[0].name == "Fluff"
        assert entries[0].uses == 650389

    def test_missing_file_is_unavailable(self, tmp_path):
        with pytest.raises(VocabularyUnavailableError):
            CsvVocabularySource(tmp_path / "missing.csv").load()

    def test_empty_file_is_unavailable(self, tmp_path):
        path = tmp_path / "vocab.csv"
        path.write_text("category,name,uses\n", encoding="utf-8")

        with pytest.raises(VocabularyUnavailableError):
            CsvVocabularySource(path).load()

    def test_reads_fresh_each_time(self, tmp_path):
        path = tmp_path / "vocab.csv"
        path.write_text("freeform,Fluff,1\n", encoding="utf-8")
        source = CsvVocabularySource(path)
        assert len(source.load()) == 1

        path.write_text("freeform,Fluff,1\nfreeform,Angst,2\n", encoding="utf-8")
        assert len(source.load()) == 2


class TestParseVocabularyRows:
    """Tests for parse_vocabulary_rows."""

    def test_skips_blank_and_malformed_rows(self):
        entries = parse_vocabulary_rows([
            ["fandom", "Example Fandom", "5"],
            [],
            ["", "", ""],
            ["character"],
            ["character", "", "3"],
            ["freeform", "Fluff", "many"],
        ])

        assert [e.name for e in entries] == ["Example Fandom", "Fluff"]
        assert entries[1].uses == 0

    def test_thousands_separators(self):
        entries = parse_vocabulary_rows([["freeform", "Angst", "810,264"]])
        assert entries[0].uses == 810264

    def test_shipped_sample_vocabulary_loads(self):
        path = Path(__file__).resolve().parents[2] / "data" / "vocabulary.csv"
        entries = CsvVocabularySource(path).load()

        assert len(entries) > 10
        assert {"fandom", "character", "relationship"} <= {e.category for e in entries}
