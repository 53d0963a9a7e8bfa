"""FastAPI application exposing the quiz state machine."""
from __future__ import annotations

import asyncio
import logging

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, HTTPException, Request

from article_trainer.config import DEFAULTS, Settings, load_settings, save_settings
from article_trainer.dictionary import available_levels
from article_trainer.models import Article
from article_trainer.quiz import QuizMachine, serialize_state

app = FastAPI(title="Article Trainer")

# Global state (initialized in startup)
_machine: QuizMachine | None = None
_settings: Settings | None = None
# One transition at a time, loads included
_lock = asyncio.Lock()

_log = logging.getLogger("article_trainer.api")


def get_machine() -> QuizMachine:
    assert _machine is not None
    return _machine


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


async def _json_body(request: Request) -> dict:
    if not await request.body():
        return {}
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(400, "Invalid JSON body")
    if not isinstance(body, dict):
        raise HTTPException(400, "Expected a JSON object")
    return body


@app.on_event("startup")
async def startup():
    global _machine, _settings
    if _machine is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()
    _machine = QuizMachine(_settings)
    await asyncio.to_thread(_machine.select_level, _settings.default_level)


# ── API: State ───────────────────────────────────────────────────────────

@app.get("/api/state")
async def api_state():
    return serialize_state(get_machine().state)


@app.get("/api/levels")
async def api_levels():
    m = get_machine()
    return {
        "levels": available_levels(get_settings()),
        "current_level": m.level,
    }


@app.post("/api/level")
async def api_select_level(request: Request):
    body = await _json_body(request)
    level = body.get("level")
    if not isinstance(level, str) or not level.strip():
        raise HTTPException(400, "No level provided")

    m = get_machine()
    async with _lock:
        _log.info("Selecting level %s", level)
        state = await asyncio.to_thread(m.select_level, level)
    return serialize_state(state)


# ── API: Session ─────────────────────────────────────────────────────────

@app.post("/api/session/start")
async def api_session_start(request: Request):
    body = await _json_body(request)
    count = body.get("count")
    level = body.get("level")
    if count is not None and (isinstance(count, bool) or not isinstance(count, int)):
        raise HTTPException(400, "count must be an integer")
    if level is not None and not isinstance(level, str):
        raise HTTPException(400, "level must be a string")

    m = get_machine()
    async with _lock:
        state = await asyncio.to_thread(m.start_session, count, level)
    return serialize_state(state)


@app.post("/api/session/hint")
async def api_session_hint():
    async with _lock:
        state = get_machine().toggle_hint()
    return serialize_state(state)


@app.post("/api/session/answer")
async def api_session_answer(request: Request):
    body = await _json_body(request)
    raw = body.get("article")
    if not isinstance(raw, str):
        raise HTTPException(400, "No article provided")
    try:
        article = Article.parse(raw)
    except ValueError:
        raise HTTPException(400, f"Unknown article: {raw}")

    async with _lock:
        state = get_machine().submit_answer(article)
    return serialize_state(state)


@app.post("/api/session/next")
async def api_session_next():
    async with _lock:
        state = get_machine().advance()
    return serialize_state(state)


@app.post("/api/session/practice-failed")
async def api_session_practice_failed():
    async with _lock:
        state = get_machine().practice_failed_words()
    return serialize_state(state)


@app.post("/api/session/return")
async def api_session_return():
    async with _lock:
        state = get_machine().return_to_start()
    return serialize_state(state)


# ── API: Settings ────────────────────────────────────────────────────────

def _setting_type_ok(key: str, value) -> bool:
    if key == "random_seed":
        return value is None or (isinstance(value, int) and not isinstance(value, bool))
    if isinstance(value, bool):
        return False
    if key == "levels":
        return isinstance(value, list) and all(isinstance(v, str) for v in value)
    if key == "auto_advance_seconds":
        return isinstance(value, (int, float))
    return isinstance(value, type(DEFAULTS[key]))


@app.get("/api/settings")
async def api_get_settings():
    return get_settings().to_dict()


@app.put("/api/settings")
async def api_update_settings(request: Request):
    body = await _json_body(request)
    s = get_settings()
    updates = {k: v for k, v in body.items() if k in DEFAULTS}
    for key, value in updates.items():
        if not _setting_type_ok(key, value):
            raise HTTPException(400, f"Invalid value for {key}: {value!r}")
    for key, value in updates.items():
        setattr(s, key, value)
    save_settings(s)
    return s.to_dict()
