"""Level-to-file mapping and loading of noun dictionaries."""
from __future__ import annotations

import logging
from pathlib import Path

from article_trainer.config import Settings
from article_trainer.models import VocabularyEntry
from article_trainer.parsers.noun_parser import parse_noun_text

log = logging.getLogger("article_trainer.dictionary")

DEFAULT_TEMPLATE = "german_nouns_{level}.csv"


class LoadError(Exception):
    """A level's dictionary could not be read or had no usable rows."""


def resource_name(level: str, template: str = DEFAULT_TEMPLATE) -> str:
    return template.format(level=level.strip().lower())


def available_levels(settings: Settings) -> list[str]:
    return list(settings.levels)


def load_dictionary(path: Path) -> list[VocabularyEntry]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"Cannot read {path.name}: {e}") from e

    entries = parse_noun_text(text, source=path.name)
    if not entries:
        raise LoadError(f"Empty dictionary: no valid nouns in {path.name}")

    log.info("Loaded %d nouns from %s", len(entries), path.name)
    return entries


def load_level(
    level: str,
    data_dir: Path,
    template: str = DEFAULT_TEMPLATE,
) -> list[VocabularyEntry]:
    path = data_dir / resource_name(level, template)
    log.debug("Loading level %s from %s", level, path)
    return load_dictionary(path)
