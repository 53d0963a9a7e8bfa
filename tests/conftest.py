"""Shared test fixtures."""
from __future__ import annotations

import pytest

from article_trainer.models import Article, VocabularyEntry


@pytest.fixture
def tisch():
    return VocabularyEntry(Article.DER, "Tisch", "Der Tisch ist groß.", "table", "The table is big.")


@pytest.fixture
def lampe():
    return VocabularyEntry(Article.DIE, "Lampe", "Die Lampe ist neu.", "lamp", "The lamp is new.")


@pytest.fixture
def buch():
    return VocabularyEntry(Article.DAS, "Buch", "Ich lese ein Buch.", "book", "I am reading a book.")


@pytest.fixture
def sample_pool(tisch, lampe, buch):
    """The three-noun pool used throughout the quiz tests."""
    return [tisch, lampe, buch]


@pytest.fixture
def nouns_csv_content():
    """Minimal german_nouns_*.csv content for parser testing."""
    return """\
german,german example,english,english example
"die Ansage, -n","Hören Sie die Ansage, bitte.",announcement,"Listen to the announcement, please."
der Anschluss,Ich habe keinen Anschluss.,connection,I have no connection.
"das Auto, -s",Das Auto ist rot.,car,The car is red.
"""


@pytest.fixture
def data_dir(tmp_path, nouns_csv_content):
    """A data directory with a valid A1 file and an all-malformed B1 file."""
    (tmp_path / "german_nouns_a1.csv").write_text(nouns_csv_content, encoding="utf-8")
    (tmp_path / "german_nouns_b1.csv").write_text(
        "german,german example,english,english example\n"
        "ein Tisch,Beispiel,table,Example\n"
        "der Tisch,only two\n",
        encoding="utf-8",
    )
    return tmp_path
