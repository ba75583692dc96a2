import os

# 앱 import 전에 설정 (기본값은 PostgreSQL)
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from videotube.database import Base, get_db
from videotube.main import app
from videotube.models import Comment, Like, Playlist, PlaylistVideo, Subscription, Tweet, User, Video


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sql_log(engine):
    """실행된 SQL 문 기록"""
    statements = []

    def record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", record)
    yield statements
    event.remove(engine, "before_cursor_execute", record)


@pytest.fixture
def auth():
    """X-User-Id 헤더 생성"""
    def headers(user):
        return {"X-User-Id": str(user.id)}
    return headers


class Seeder:
    """테스트 데이터 생성 도우미. 각 메서드는 커밋 후 객체를 돌려줌"""

    def __init__(self, session_factory):
        self.session_factory = session_factory
        self._counter = 0

    def _save(self, obj):
        with self.session_factory() as db:
            db.add(obj)
            db.commit()
            db.refresh(obj)
        return obj

    def user(self, username=None, **kwargs):
        self._counter += 1
        username = username or f"user{self._counter}"
        return self._save(User(
            username=username,
            email=kwargs.pop("email", f"{username}@example.com"),
            full_name=kwargs.pop("full_name", username.title()),
            **kwargs
        ))

    def video(self, owner, title="video", views=0, is_published=True, thumbnail=None):
        return self._save(Video(
            owner_id=owner.id,
            title=title,
            description=f"{title} description",
            video_file=f"https://cdn.example.com/{title}.mp4",
            thumbnail=thumbnail,
            views=views,
            is_published=is_published,
        ))

    def like(self, video, user):
        return self._save(Like(video_id=video.id, liked_by_id=user.id))

    def comment(self, video, user, content="nice"):
        return self._save(Comment(video_id=video.id, owner_id=user.id, content=content))

    def tweet(self, user, content="hello"):
        return self._save(Tweet(owner_id=user.id, content=content))

    def subscription(self, subscriber, channel):
        return self._save(Subscription(subscriber_id=subscriber.id, channel_id=channel.id))

    def playlist(self, owner, name="favourites", videos=()):
        playlist = Playlist(name=name, description="", owner_id=owner.id)
        for position, video in enumerate(videos, start=1):
            playlist.entries.append(PlaylistVideo(video_id=video.id, position=position))
        return self._save(playlist)


@pytest.fixture
def seed(session_factory):
    return Seeder(session_factory)
