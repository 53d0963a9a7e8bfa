from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Article(str, Enum):
    DER = "der"
    DIE = "die"
    DAS = "das"

    @classmethod
    def parse(cls, text: str) -> Article:
        """Case-insensitive lookup; raises ValueError for anything else."""
        return cls(text.strip().lower())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class VocabularyEntry:
    article: Article
    noun: str
    example_source: str  # German example sentence
    translation: str
    example_target: str  # English example sentence

    @property
    def full_form(self) -> str:
        return f"{self.article.value} {self.noun}"


@dataclass(frozen=True)
class AnswerFeedback:
    is_correct: bool
    correct_article: Article


@dataclass(frozen=True)
class Session:
    nouns: tuple[VocabularyEntry, ...]
    original_nouns: tuple[VocabularyEntry, ...]
    current_index: int = 0
    correct_count: int = 0
    incorrect_count: int = 0
    failed_nouns: tuple[VocabularyEntry, ...] = ()  # first-failure order, no duplicates
    show_hint: bool = False
    answer_feedback: AnswerFeedback | None = None

    @property
    def current_noun(self) -> VocabularyEntry:
        return self.nouns[self.current_index]

    @property
    def total_words(self) -> int:
        return len(self.nouns)

    @property
    def progress(self) -> str:
        return f"Word {self.current_index + 1} of {self.total_words}"

    @property
    def is_last(self) -> bool:
        return self.current_index >= len(self.nouns) - 1


@dataclass(frozen=True)
class Result:
    correct_count: int
    incorrect_count: int
    failed_nouns: tuple[VocabularyEntry, ...] = ()
    original_nouns: tuple[VocabularyEntry, ...] = ()

    @property
    def total_answers(self) -> int:
        return self.correct_count + self.incorrect_count

    @property
    def success_rate(self) -> int:
        """Percentage of correct answers, truncated toward zero."""
        if self.total_answers == 0:
            return 0
        return self.correct_count * 100 // self.total_answers

    @property
    def has_failed_words(self) -> bool:
        return len(self.failed_nouns) > 0

    @property
    def is_complete(self) -> bool:
        return not self.failed_nouns
