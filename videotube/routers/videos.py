from fastapi import APIRouter, HTTPException, Query, status, Depends
from typing import Optional
import logging
from sqlalchemy.orm import Session
from videotube.database import get_db
from videotube.dependencies import (
    commit_or_500, ensure_owner, get_acting_user, get_current_user_id, get_optional_user_id, parse_id
)
from videotube.models import Video
from videotube.responses import api_response
from videotube.schemas import ApiResponse, VideoCreate, VideoListResponse, VideoResponse, VideoUpdate

router = APIRouter(prefix="/api/videos", tags=["videos"])

logger = logging.getLogger(__name__)


def get_video_or_404(db: Session, video_id: int) -> Video:
    video = db.query(Video).filter(Video.id == video_id).first()
    if not video:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Video not found"
        )
    return video


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[VideoResponse])
def publish_video(
    payload: VideoCreate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """동영상 등록 (파일/썸네일은 외부 스토리지 URL)"""
    owner = get_acting_user(db, current_user_id)

    db_video = Video(
        owner_id=owner.id,
        title=payload.title,
        description=payload.description,
        video_file=payload.video_file,
        thumbnail=payload.thumbnail,
        duration=payload.duration,
        is_published=payload.is_published
    )

    db.add(db_video)
    commit_or_500(db, "Error while publishing video")
    db.refresh(db_video)
    logger.info(f"✅ 동영상 등록: video_id={db_video.id}, owner_id={owner.id}")

    return api_response(
        VideoResponse.model_validate(db_video),
        "Video published successfully",
        status_code=status.HTTP_201_CREATED
    )


@router.get("", response_model=ApiResponse[VideoListResponse])
def get_videos(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """공개 동영상 목록 (최신순)"""
    published = db.query(Video).filter(Video.is_published.is_(True))

    videos = published.order_by(Video.created_at.desc(), Video.id.desc()).offset(skip).limit(limit).all()
    total = published.count()

    return api_response(
        VideoListResponse(
            total=total,
            videos=[VideoResponse.model_validate(video) for video in videos]
        ),
        "Videos fetched successfully"
    )


@router.get("/{video_id}", response_model=ApiResponse[VideoResponse])
def get_video(
    video_id: str,
    db: Session = Depends(get_db),
    current_user_id: Optional[int] = Depends(get_optional_user_id)
):
    """
    단일 동영상 조회
    - 비공개 영상은 소유자만 볼 수 있음 (그 외에는 404)
    - 소유자 본인 조회는 조회수에 포함하지 않음
    """
    target_id = parse_id(video_id, "video")
    video = get_video_or_404(db, target_id)

    is_owner = video.owner_id == current_user_id
    if not video.is_published and not is_owner:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Video not found"
        )
    if is_owner:
        return api_response(VideoResponse.model_validate(video), "Video fetched successfully")

    # 원자적 증가 (동시 요청에서도 누락 없음)
    db.query(Video).filter(Video.id == target_id).update(
        {Video.views: Video.views + 1}, synchronize_session=False
    )
    commit_or_500(db, "Error while updating views")
    db.refresh(video)

    return api_response(VideoResponse.model_validate(video), "Video fetched successfully")


@router.patch("/{video_id}", response_model=ApiResponse[VideoResponse])
def update_video(
    video_id: str,
    payload: VideoUpdate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """
    동영상 정보 수정
    - title, description, thumbnail 중 주어진 것만 변경
    """
    target_id = parse_id(video_id, "video")
    video = get_video_or_404(db, target_id)

    update_data = {key: value for key, value in payload.dict(exclude_unset=True).items() if value is not None}
    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Nothing to update"
        )
    if "title" in update_data and not update_data["title"].strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title cannot be blank"
        )

    ensure_owner(video.owner_id, current_user_id)

    for field_name, value in update_data.items():
        setattr(video, field_name, value)

    commit_or_500(db, "Error while updating video")
    db.refresh(video)
    logger.info(f"✅ 동영상 수정: video_id={target_id}, fields={sorted(update_data)}")

    return api_response(VideoResponse.model_validate(video), "Video updated successfully")


@router.patch("/{video_id}/publish", response_model=ApiResponse[VideoResponse])
def toggle_publish_status(
    video_id: str,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """공개/비공개 전환"""
    target_id = parse_id(video_id, "video")
    video = get_video_or_404(db, target_id)
    ensure_owner(video.owner_id, current_user_id)

    video.is_published = not video.is_published
    commit_or_500(db, "Error while toggling publish status")
    db.refresh(video)
    logger.info(f"✅ 공개 상태 변경: video_id={target_id}, is_published={video.is_published}")

    return api_response(VideoResponse.model_validate(video), "Publish status toggled successfully")


@router.delete("/{video_id}", response_model=ApiResponse[VideoResponse])
def delete_video(
    video_id: str,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """동영상 삭제 (좋아요/댓글/플레이리스트 항목은 DB에서 CASCADE)"""
    target_id = parse_id(video_id, "video")
    video = get_video_or_404(db, target_id)
    ensure_owner(video.owner_id, current_user_id)

    deleted = VideoResponse.model_validate(video)
    db.delete(video)
    commit_or_500(db, "Error while deleting video")
    logger.info(f"✅ DB 삭제 완료: video_id={target_id}")

    return api_response(deleted, "Video deleted successfully")
