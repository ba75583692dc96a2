import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func

from videotube.database import get_db
from videotube.dependencies import commit_or_500, get_acting_user, get_current_user_id, parse_id
from videotube.models import Like
from videotube.responses import api_response
from videotube.routers.videos import get_video_or_404
from videotube.schemas import ApiResponse, LikeStatus

router = APIRouter(prefix="/api/videos", tags=["likes"])

logger = logging.getLogger(__name__)


def _likes_count(db: Session, video_id: int) -> int:
    return db.query(func.count(Like.id)).filter(Like.video_id == video_id).scalar() or 0


@router.post("/{video_id}/like", response_model=ApiResponse[LikeStatus])
def toggle_like(
    video_id: str,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """
    좋아요 토글
    - 좋아요 안 눌렀으면 → 좋아요
    - 이미 눌렀으면 → 좋아요 취소
    """
    target_id = parse_id(video_id, "video")

    # 비디오 존재 확인
    get_video_or_404(db, target_id)

    # 이미 좋아요 눌렀는지 확인
    existing_like = db.query(Like).filter(
        Like.video_id == target_id,
        Like.liked_by_id == current_user_id
    ).first()

    if existing_like:
        # 좋아요 취소
        db.delete(existing_like)
        commit_or_500(db, "Error while removing like")
        is_liked = False
    else:
        # 좋아요 추가
        user = get_acting_user(db, current_user_id)
        db.add(Like(video_id=target_id, liked_by_id=user.id))
        commit_or_500(db, "Error while adding like")
        is_liked = True

    logger.info(f"✅ 좋아요 토글: video_id={target_id}, user_id={current_user_id}, is_liked={is_liked}")

    return api_response(
        LikeStatus(video_id=target_id, likes_count=_likes_count(db, target_id), is_liked=is_liked),
        "Like toggled successfully"
    )


@router.get("/{video_id}/like", response_model=ApiResponse[LikeStatus])
def get_like_status(
    video_id: str,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """
    좋아요 상태 조회
    - 좋아요 개수
    - 현재 사용자가 좋아요 눌렀는지
    """
    target_id = parse_id(video_id, "video")
    get_video_or_404(db, target_id)

    is_liked = db.query(Like).filter(
        Like.video_id == target_id,
        Like.liked_by_id == current_user_id
    ).first() is not None

    return api_response(
        LikeStatus(video_id=target_id, likes_count=_likes_count(db, target_id), is_liked=is_liked),
        "Like status fetched successfully"
    )
