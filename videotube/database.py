# database.py

import sqlite3

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from videotube.config import config


def engine_options(url: str) -> dict:
    """URL 종류에 맞는 create_engine 옵션"""
    options = {
        "echo": config.DB_ECHO,
        "pool_pre_ping": True,  # 연결 끊김 자동 재연결
    }

    if url.startswith("sqlite"):
        # check_same_thread=False는 FastAPI 스레드풀에서 세션을 쓰기 위해 필요
        options["connect_args"] = {"check_same_thread": False}
        return options

    options["pool_timeout"] = config.DB_POOL_TIMEOUT
    if url.startswith("postgresql") and config.DB_STATEMENT_TIMEOUT_MS > 0:
        # 느린 쿼리가 요청을 무한정 붙잡지 않도록 서버 측 타임아웃
        options["connect_args"] = {
            "options": f"-c statement_timeout={config.DB_STATEMENT_TIMEOUT_MS}"
        }
    return options


engine = create_engine(config.DATABASE_URL, **engine_options(config.DATABASE_URL))

# 세션 생성기
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 기본 클래스
Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite는 기본적으로 FK(ON DELETE CASCADE 포함)를 무시함
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db(engine, metadata):
    metadata.create_all(bind=engine)


# DB 세션을 얻기 위한 의존성 주입 함수 (FastAPI에서 사용)
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
