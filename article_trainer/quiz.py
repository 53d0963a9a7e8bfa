"""Quiz state machine.

States are frozen dataclasses; each transition function takes the current
state and returns the next one. Calls that don't apply to the current
state return it unchanged. QuizMachine owns the loaded pool and the
current state, and is the only thing that talks to the loader.
"""
from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import Union

from article_trainer.config import Settings
from article_trainer.dictionary import LoadError, load_level
from article_trainer.models import (
    AnswerFeedback,
    Article,
    Result,
    Session,
    VocabularyEntry,
)

log = logging.getLogger("article_trainer.quiz")

Loader = Callable[[str], Sequence[VocabularyEntry]]


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Loading:
    level: str


@dataclass(frozen=True)
class LoadFailed:
    level: str
    message: str


@dataclass(frozen=True)
class Ready:
    level: str
    pool_size: int


@dataclass(frozen=True)
class InSession:
    level: str
    session: Session


@dataclass(frozen=True)
class Finished:
    level: str
    result: Result


QuizState = Union[Idle, Loading, LoadFailed, Ready, InSession, Finished]


def normalize_level(level: str) -> str:
    return level.strip().upper()


def clamp_count(count: int, pool_size: int) -> int:
    return max(1, min(count, pool_size))


# ── Pure transitions ─────────────────────────────────────────────────────

def begin_session(
    pool: Sequence[VocabularyEntry],
    count: int,
    level: str,
    rng: random.Random | None = None,
) -> InSession:
    rng = rng or random.Random()
    picked = tuple(rng.sample(list(pool), clamp_count(count, len(pool))))
    return InSession(level=level, session=Session(nouns=picked, original_nouns=picked))


def toggle_hint(state: QuizState) -> QuizState:
    if not isinstance(state, InSession) or state.session.answer_feedback is not None:
        return state
    session = state.session
    return replace(state, session=replace(session, show_hint=not session.show_hint))


def submit_answer(state: QuizState, article: Article) -> QuizState:
    if not isinstance(state, InSession):
        return state
    session = state.session
    # Duplicate taps arrive while feedback is still on screen
    if session.answer_feedback is not None:
        return state

    current = session.current_noun
    is_correct = article == current.article

    if is_correct:
        session = replace(session, correct_count=session.correct_count + 1)
    else:
        failed = session.failed_nouns
        if current not in failed:
            failed = failed + (current,)
        session = replace(
            session,
            incorrect_count=session.incorrect_count + 1,
            failed_nouns=failed,
        )

    feedback = AnswerFeedback(is_correct=is_correct, correct_article=current.article)
    return replace(state, session=replace(session, answer_feedback=feedback))


def advance(state: QuizState) -> QuizState:
    if not isinstance(state, InSession):
        return state
    session = state.session
    # Only an answered word moves on; repeated auto-advance timers land here
    if session.answer_feedback is None:
        return state

    if session.is_last:
        result = Result(
            correct_count=session.correct_count,
            incorrect_count=session.incorrect_count,
            failed_nouns=session.failed_nouns,
            original_nouns=session.original_nouns,
        )
        return Finished(level=state.level, result=result)

    return replace(
        state,
        session=replace(
            session,
            current_index=session.current_index + 1,
            show_hint=False,
            answer_feedback=None,
        ),
    )


def practice_failed_words(state: QuizState) -> QuizState:
    if not isinstance(state, Finished) or not state.result.has_failed_words:
        return state
    result = state.result
    session = Session(nouns=result.failed_nouns, original_nouns=result.original_nouns)
    return InSession(level=state.level, session=session)


# ── Owner ────────────────────────────────────────────────────────────────

class QuizMachine:
    """Holds the single live quiz state and the pool for the loaded level.

    Not thread-safe: callers serialize transitions, including loads.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        loader: Loader | None = None,
        rng: random.Random | None = None,
    ):
        self.settings = settings or Settings()
        self._loader = loader or self._load_from_disk
        self._rng = rng or random.Random(self.settings.random_seed)
        self.state: QuizState = Idle()
        self.pool: tuple[VocabularyEntry, ...] = ()
        self.level: str | None = None

    def _load_from_disk(self, level: str) -> Sequence[VocabularyEntry]:
        s = self.settings
        return load_level(level, s.data_path, s.filename_template)

    @property
    def is_loading(self) -> bool:
        return isinstance(self.state, Loading)

    def _load(self, level: str) -> bool:
        level = normalize_level(level)
        self.state = Loading(level)
        try:
            entries = tuple(self._loader(level))
            if not entries:
                raise LoadError(f"Empty dictionary for level {level}")
        except LoadError as e:
            log.warning("Loading level %s failed: %s", level, e)
            self.pool = ()
            self.level = None
            self.state = LoadFailed(level=level, message=str(e))
            return False

        self.pool = entries
        self.level = level
        return True

    def select_level(self, level: str) -> QuizState:
        if self._load(level):
            self.state = Ready(level=self.level, pool_size=len(self.pool))
        return self.state

    def start_session(self, count: int | None = None, level: str | None = None) -> QuizState:
        if not isinstance(self.state, (Ready, Finished, LoadFailed)):
            log.debug("start_session ignored in %s", type(self.state).__name__)
            return self.state

        wanted = normalize_level(level or self.level or self.settings.default_level)
        if wanted != self.level or not self.pool:
            if not self._load(wanted):
                return self.state

        if count is None:
            count = self.settings.session_size
        self.state = begin_session(self.pool, count, self.level, self._rng)
        log.info("Session started: %d of %d %s nouns",
                 self.state.session.total_words, len(self.pool), self.level)
        return self.state

    def toggle_hint(self) -> QuizState:
        self.state = toggle_hint(self.state)
        return self.state

    def submit_answer(self, article: Article) -> QuizState:
        self.state = submit_answer(self.state, article)
        return self.state

    def advance(self) -> QuizState:
        self.state = advance(self.state)
        if isinstance(self.state, Finished):
            r = self.state.result
            log.info("Session finished: %d/%d correct (%d%%)",
                     r.correct_count, r.total_answers, r.success_rate)
        return self.state

    def practice_failed_words(self) -> QuizState:
        self.state = practice_failed_words(self.state)
        return self.state

    def return_to_start(self) -> QuizState:
        if isinstance(self.state, Finished) and self.level is not None:
            self.state = Ready(level=self.level, pool_size=len(self.pool))
        return self.state


# ── Serialization ────────────────────────────────────────────────────────

def entry_to_dict(entry: VocabularyEntry) -> dict:
    return {
        "article": entry.article.value,
        "noun": entry.noun,
        "full_form": entry.full_form,
        "example_source": entry.example_source,
        "translation": entry.translation,
        "example_target": entry.example_target,
    }


def serialize_state(state: QuizState) -> dict:
    if isinstance(state, Idle):
        return {"state": "idle"}
    if isinstance(state, Loading):
        return {"state": "loading", "level": state.level}
    if isinstance(state, LoadFailed):
        return {"state": "error", "level": state.level, "message": state.message}
    if isinstance(state, Ready):
        return {"state": "ready", "level": state.level, "max_words": state.pool_size}
    if isinstance(state, InSession):
        s = state.session
        feedback = None
        if s.answer_feedback is not None:
            feedback = {
                "is_correct": s.answer_feedback.is_correct,
                "correct_article": s.answer_feedback.correct_article.value,
            }
        return {
            "state": "quiz",
            "level": state.level,
            "current_index": s.current_index,
            "total_words": s.total_words,
            "progress": s.progress,
            "current_noun": entry_to_dict(s.current_noun),
            "correct_count": s.correct_count,
            "incorrect_count": s.incorrect_count,
            "failed_count": len(s.failed_nouns),
            "show_hint": s.show_hint,
            "answer_feedback": feedback,
        }
    if isinstance(state, Finished):
        r = state.result
        return {
            "state": "result",
            "level": state.level,
            "correct_count": r.correct_count,
            "incorrect_count": r.incorrect_count,
            "total_answers": r.total_answers,
            "success_rate": r.success_rate,
            "has_failed_words": r.has_failed_words,
            "is_complete": r.is_complete,
            "failed_nouns": [entry_to_dict(e) for e in r.failed_nouns],
            "original_nouns": [entry_to_dict(e) for e in r.original_nouns],
        }
    raise TypeError(f"Unknown quiz state: {state!r}")
