from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from videotube import queries
from videotube.database import get_db
from videotube.dependencies import get_current_user_id, parse_id
from videotube.responses import api_response
from videotube.schemas import ApiResponse, ChannelStats, ChannelVideo

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats/{user_id}", response_model=ApiResponse[ChannelStats])
def get_channel_stats(user_id: str, db: Session = Depends(get_db)):
    """채널 통계 (데이터가 없으면 모두 0)"""
    channel_id = parse_id(user_id, "user")
    stats = queries.channel_stats(db, channel_id)
    return api_response(ChannelStats(**stats), "Channel stats fetched successfully")


@router.get("/videos", response_model=ApiResponse[List[ChannelVideo]])
def get_channel_videos(
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """내 채널 영상 목록 (좋아요/댓글 수 포함)"""
    videos = queries.channel_videos(db, current_user_id)
    return api_response(
        [ChannelVideo(**video) for video in videos],
        "Videos fetched successfully"
    )
