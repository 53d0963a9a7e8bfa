"""Parse german_nouns_*.csv files into VocabularyEntry objects.

Row format (after a header line):
  german,german example,english,english example

The German column holds the article and the noun, optionally followed by
a plural marker:
  die Ansage, -n   ->  (die, Ansage)
  der Anschluss    ->  (der, Anschluss)

Fields containing commas are wrapped in double quotes. Quoting is a plain
toggle: escaped quotes inside a quoted field are not supported. The split
consumes quote characters, so the German column loses at most one further
layer of wrapping quotes before the article is read.
Rows that don't fit the format are skipped, never raised.
"""
from __future__ import annotations

import logging

from article_trainer.models import Article, VocabularyEntry

log = logging.getLogger("article_trainer.parser")

ARTICLES = {a.value for a in Article}


def split_csv_line(line: str) -> list[str]:
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(ch)

    fields.append("".join(current).strip())
    return fields


def extract_article_and_noun(german: str) -> tuple[Article, str] | None:
    """Split 'die Ansage, -n' into (Article.DIE, 'Ansage')."""
    cleaned = german.strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] == '"':
        cleaned = cleaned[1:-1].strip()
    parts = cleaned.split(None, 2)
    if not parts:
        return None

    article = parts[0].lower()
    if article not in ARTICLES:
        return None
    if len(parts) < 2:
        return None

    # Everything after the article up to the first comma; plural markers go
    noun = " ".join(parts[1:]).split(",")[0].strip()
    if not noun:
        return None

    return Article(article), noun


def parse_noun_line(line: str) -> VocabularyEntry | None:
    columns = split_csv_line(line)
    if len(columns) < 4:
        return None

    parsed = extract_article_and_noun(columns[0])
    if parsed is None:
        return None
    article, noun = parsed

    return VocabularyEntry(
        article=article,
        noun=noun,
        example_source=columns[1].strip(),
        translation=columns[2].strip(),
        example_target=columns[3].strip(),
    )


def parse_noun_text(text: str, source: str = "<string>") -> list[VocabularyEntry]:
    entries: list[VocabularyEntry] = []
    lines = text.lstrip("\ufeff").splitlines()

    # First line is the header
    for lineno, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        entry = parse_noun_line(line)
        if entry is None:
            log.debug("%s:%d: skipped malformed row %r", source, lineno, line)
            continue
        entries.append(entry)

    return entries
