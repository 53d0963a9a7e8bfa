"""Tests for the FastAPI application routes."""
from __future__ import annotations

import random
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from article_trainer import app as app_module
from article_trainer.app import app
from article_trainer.config import Settings
from article_trainer.quiz import QuizMachine


@pytest.fixture
def test_app(data_dir):
    """App wired to a temporary data dir, with A1 already loaded."""
    settings = Settings(data_dir=str(data_dir), session_size=2, levels=["A1", "B1"])
    machine = QuizMachine(settings, rng=random.Random(3))
    machine.select_level("A1")

    # Set globals BEFORE creating TestClient so startup() is a no-op
    app_module._machine = machine
    app_module._settings = settings

    with patch("article_trainer.app.save_settings"):
        client = TestClient(app, raise_server_exceptions=False)
        yield client, machine, settings
        client.close()

    app_module._machine = None
    app_module._settings = None


def _answer_all(client, wrong=()):
    data = client.get("/api/state").json()
    while data["state"] == "quiz":
        noun = data["current_noun"]
        article = noun["article"]
        if noun["noun"] in wrong:
            article = "das" if article != "das" else "der"
        client.post("/api/session/answer", json={"article": article})
        data = client.post("/api/session/next").json()
    return data


class TestStateAPI:
    def test_ready_after_startup(self, test_app):
        client, _, _ = test_app
        resp = client.get("/api/state")
        assert resp.status_code == 200
        assert resp.json() == {"state": "ready", "level": "A1", "max_words": 3}

    def test_levels(self, test_app):
        client, _, _ = test_app
        data = client.get("/api/levels").json()
        assert data["levels"] == ["A1", "B1"]
        assert data["current_level"] == "A1"


class TestLevelAPI:
    def test_select_missing_level(self, test_app):
        client, _, _ = test_app
        data = client.post("/api/level", json={"level": "C2"}).json()
        assert data["state"] == "error"
        assert "german_nouns_c2.csv" in data["message"]

    def test_select_empty_dictionary(self, test_app):
        client, _, _ = test_app
        data = client.post("/api/level", json={"level": "B1"}).json()
        assert data["state"] == "error"
        assert "Empty dictionary" in data["message"]

    def test_recover_after_error(self, test_app):
        client, _, _ = test_app
        client.post("/api/level", json={"level": "C2"})
        data = client.post("/api/level", json={"level": "a1"}).json()
        assert data == {"state": "ready", "level": "A1", "max_words": 3}

    def test_no_level(self, test_app):
        client, _, _ = test_app
        resp = client.post("/api/level", json={})
        assert resp.status_code == 400


class TestSessionAPI:
    def test_start_default_count(self, test_app):
        client, _, _ = test_app
        data = client.post("/api/session/start").json()
        assert data["state"] == "quiz"
        assert data["total_words"] == 2
        assert data["progress"] == "Word 1 of 2"

    def test_start_clamps(self, test_app):
        client, _, _ = test_app
        data = client.post("/api/session/start", json={"count": 100}).json()
        assert data["total_words"] == 3

    def test_start_bad_count(self, test_app):
        client, _, _ = test_app
        resp = client.post("/api/session/start", json={"count": "ten"})
        assert resp.status_code == 400

    def test_start_with_failing_level(self, test_app):
        client, _, _ = test_app
        data = client.post("/api/session/start", json={"count": 3, "level": "C2"}).json()
        assert data["state"] == "error"

    def test_hint(self, test_app):
        client, _, _ = test_app
        client.post("/api/session/start", json={"count": 3})
        data = client.post("/api/session/hint").json()
        assert data["show_hint"] is True

    def test_answer_feedback_and_double_tap(self, test_app):
        client, machine, _ = test_app
        client.post("/api/session/start", json={"count": 3})
        correct = machine.state.session.current_noun.article.value

        first = client.post("/api/session/answer", json={"article": correct.upper()}).json()
        assert first["answer_feedback"] == {"is_correct": True, "correct_article": correct}
        assert first["correct_count"] == 1

        second = client.post("/api/session/answer", json={"article": "ein"})
        assert second.status_code == 400
        third = client.post("/api/session/answer", json={"article": correct}).json()
        assert third["correct_count"] == 1

    def test_answer_missing_article(self, test_app):
        client, _, _ = test_app
        client.post("/api/session/start")
        resp = client.post("/api/session/answer", json={})
        assert resp.status_code == 400

    def test_answer_outside_session_is_noop(self, test_app):
        client, _, _ = test_app
        data = client.post("/api/session/answer", json={"article": "der"}).json()
        assert data["state"] == "ready"

    def test_complete_round_with_retry(self, test_app):
        client, _, _ = test_app
        client.post("/api/session/start", json={"count": 3})
        result = _answer_all(client, wrong={"Auto"})
        assert result["state"] == "result"
        assert result["correct_count"] == 2
        assert result["incorrect_count"] == 1
        assert result["success_rate"] == 66
        assert result["is_complete"] is False

        retry = client.post("/api/session/practice-failed").json()
        assert retry["state"] == "quiz"
        assert retry["total_words"] == 1
        assert retry["current_noun"]["noun"] == "Auto"

        final = _answer_all(client)
        assert final["is_complete"] is True
        assert len(final["original_nouns"]) == 3

    def test_practice_failed_noop_on_perfect(self, test_app):
        client, _, _ = test_app
        client.post("/api/session/start", json={"count": 2})
        result = _answer_all(client)
        assert result["is_complete"] is True
        data = client.post("/api/session/practice-failed").json()
        assert data == result

    def test_return_to_start(self, test_app):
        client, _, _ = test_app
        client.post("/api/session/start", json={"count": 1})
        _answer_all(client)
        data = client.post("/api/session/return").json()
        assert data == {"state": "ready", "level": "A1", "max_words": 3}


class TestSettingsAPI:
    def test_get_settings(self, test_app):
        client, _, _ = test_app
        data = client.get("/api/settings").json()
        assert data["session_size"] == 2
        assert data["auto_advance_seconds"] == 3.0

    def test_update_settings(self, test_app):
        client, machine, _ = test_app
        resp = client.put("/api/settings", json={"session_size": 1, "bogus": True})
        assert resp.status_code == 200
        data = resp.json()
        assert data["session_size"] == 1
        assert "bogus" not in data
        assert client.post("/api/session/start").json()["total_words"] == 1

    @pytest.mark.parametrize("body", [
        {"session_size": "2"},
        {"session_size": True},
        {"levels": "A1"},
        {"random_seed": 1.5},
        {"auto_advance_seconds": "3"},
    ])
    def test_update_settings_wrong_type(self, test_app, body):
        client, _, settings = test_app
        resp = client.put("/api/settings", json=body)
        assert resp.status_code == 400
        assert settings.session_size == 2
        assert settings.levels == ["A1", "B1"]
        data = client.post("/api/session/start").json()
        assert data["total_words"] == 2

    def test_update_settings_accepts_seed_and_int_delay(self, test_app):
        client, _, _ = test_app
        data = client.put("/api/settings", json={"random_seed": None, "auto_advance_seconds": 2}).json()
        assert data["random_seed"] is None
        assert data["auto_advance_seconds"] == 2
