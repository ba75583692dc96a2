import logging

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from videotube import queries
from videotube.config import Config
from videotube.main import app
from videotube.models import Tweet


@pytest.fixture
def quiet_client(client):
    """서버 예외를 다시 던지지 않고 응답으로 받는 클라이언트 (get_db 오버라이드는 client 픽스처가 설치)"""
    return TestClient(app, raise_server_exceptions=False)


def test_store_failure_returns_database_envelope(client, seed, engine):
    user = seed.user()
    with engine.begin() as conn:
        conn.execute(text("DROP TABLE tweets"))

    response = client.get(f"/api/dashboard/stats/{user.id}")

    assert response.status_code == 500
    assert response.json() == {
        "statusCode": 500,
        "message": "Database operation failed",
        "success": False,
    }


def test_failed_commit_rolls_back_and_returns_500(client, seed, auth, engine, session_factory):
    owner = seed.user()
    with engine.begin() as conn:
        conn.execute(text(
            "CREATE TRIGGER reject_tweets BEFORE INSERT ON tweets "
            "BEGIN SELECT RAISE(ABORT, 'store unavailable'); END"
        ))

    failed = client.post("/api/tweets", json={"content": "lost"}, headers=auth(owner))

    assert failed.status_code == 500
    assert failed.json() == {
        "statusCode": 500,
        "message": "Error while creating tweet",
        "success": False,
    }
    with session_factory() as db:
        assert db.query(Tweet).count() == 0

    # 롤백 후 같은 커넥션으로 다시 쓸 수 있어야 함
    with engine.begin() as conn:
        conn.execute(text("DROP TRIGGER reject_tweets"))
    saved = client.post("/api/tweets", json={"content": "kept"}, headers=auth(owner))

    assert saved.status_code == 201
    with session_factory() as db:
        assert [tweet.content for tweet in db.query(Tweet).all()] == ["kept"]


def test_unexpected_error_uses_error_envelope(quiet_client, monkeypatch):
    def broken_stats(db, user_id):
        raise ValueError("boom")

    monkeypatch.setattr(queries, "channel_stats", broken_stats)

    response = quiet_client.get("/api/dashboard/stats/1")

    assert response.status_code == 500
    assert response.json() == {
        "statusCode": 500,
        "message": "Internal server error",
        "success": False,
    }


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json()["success"] is False


@pytest.mark.parametrize("raw, expected", [("info", "INFO"), (" debug ", "DEBUG"), ("WARNING", "WARNING")])
def test_log_level_is_case_insensitive(monkeypatch, raw, expected):
    monkeypatch.setenv("LOG_LEVEL", raw)

    level = Config().LOG_LEVEL

    assert level == expected
    assert isinstance(logging.getLevelName(level), int)
