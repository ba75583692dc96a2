import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from videotube import __version__
from videotube import models  # noqa: F401  (Base.metadata에 테이블 등록)
from videotube.config import config
from videotube.database import Base, engine, init_db
from videotube.responses import register_exception_handlers
from videotube.routers import comments, dashboard, likes, playlists, subscriptions, tweets, users, videos

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# FastAPI 앱 생성
app = FastAPI(
    title="VideoTube API",
    description="영상 공유 플랫폼 백엔드 - 채널 통계 / 플레이리스트 / 구독",
    version=__version__
)


@app.on_event("startup")
def startup_event():
    """서버가 시작될 때 단 한 번 실행되어 테이블을 생성합니다."""
    logger.info("데이터베이스 테이블 초기화 시작...")
    init_db(engine, Base.metadata)
    logger.info("데이터베이스 초기화 완료.")


# CORS 설정 (프론트엔드 연동용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 에러 응답 봉투
register_exception_handlers(app)

# 라우터 등록
app.include_router(users.router)
app.include_router(videos.router)
app.include_router(likes.router)
app.include_router(comments.router)
app.include_router(tweets.router)
app.include_router(dashboard.router)
app.include_router(playlists.router)
app.include_router(subscriptions.router)


# 루트 엔드포인트
@app.get("/")
async def root():
    return {
        "message": "VideoTube API 서버",
        "version": __version__,
        "endpoints": {
            "docs": "/docs",
            "stats": "/api/dashboard/stats/{userId}",
            "playlists": "/api/playlists",
            "subscriptions": "/api/subscriptions/c/{channelId}"
        }
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
