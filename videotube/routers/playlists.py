import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from videotube import queries
from videotube.database import get_db
from videotube.dependencies import commit_or_500, ensure_owner, get_acting_user, get_current_user_id, parse_id
from videotube.models import Playlist, PlaylistVideo, Video
from videotube.responses import api_response
from videotube.schemas import (
    ApiResponse,
    PlaylistCreate,
    PlaylistDetail,
    PlaylistMembership,
    PlaylistResponse,
    PlaylistSummary,
    PlaylistUpdate,
)

router = APIRouter(prefix="/api/playlists", tags=["playlists"])

logger = logging.getLogger(__name__)


def _playlist_response(playlist: Playlist) -> PlaylistResponse:
    return PlaylistResponse(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        owner_id=playlist.owner_id,
        videos=playlist.video_ids,
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


def _get_playlist_or_404(db: Session, playlist_id: int) -> Playlist:
    playlist = db.query(Playlist).filter(Playlist.id == playlist_id).first()
    if not playlist:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Playlist not found"
        )
    return playlist


def _get_video_or_404(db: Session, video_id: int) -> Video:
    video = db.query(Video).filter(Video.id == video_id).first()
    if not video:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Video not found"
        )
    return video


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[PlaylistResponse])
def create_playlist(
    payload: PlaylistCreate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """플레이리스트 생성 (이름 필수)"""
    if not payload.name or not payload.name.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name is required"
        )

    owner = get_acting_user(db, current_user_id)

    playlist = Playlist(
        name=payload.name.strip(),
        description=payload.description or "",
        owner_id=owner.id
    )
    db.add(playlist)
    commit_or_500(db, "Error while creating playlist")
    db.refresh(playlist)
    logger.info(f"✅ 플레이리스트 생성: playlist_id={playlist.id}, owner_id={owner.id}")

    return api_response(
        _playlist_response(playlist),
        "Playlist created successfully",
        status_code=status.HTTP_201_CREATED
    )


@router.get("/user/{user_id}", response_model=ApiResponse[List[PlaylistSummary]])
def get_user_playlists(user_id: str, db: Session = Depends(get_db)):
    """사용자의 플레이리스트 목록"""
    owner_id = parse_id(user_id, "user")
    playlists = queries.user_playlists(db, owner_id)
    return api_response(
        [PlaylistSummary(**playlist) for playlist in playlists],
        "Playlists fetched successfully"
    )


@router.get("/video/{video_id}", response_model=ApiResponse[List[PlaylistMembership]])
def get_video_playlists(
    video_id: str,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """내 플레이리스트 각각에 영상이 들어 있는지"""
    target_video_id = parse_id(video_id, "video")
    playlists = queries.video_playlist_membership(db, current_user_id, target_video_id)
    return api_response(
        [PlaylistMembership(**playlist) for playlist in playlists],
        "Playlists fetched successfully"
    )


@router.get("/{playlist_id}", response_model=ApiResponse[PlaylistDetail])
def get_playlist(playlist_id: str, db: Session = Depends(get_db)):
    """플레이리스트 단건 (공개 영상만 포함)"""
    target_id = parse_id(playlist_id, "playlist")
    playlist = queries.playlist_details(db, target_id)
    if playlist is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Playlist not found"
        )
    return api_response(PlaylistDetail(**playlist), "Playlist fetched successfully")


@router.post("/{playlist_id}/videos/{video_id}", response_model=ApiResponse[PlaylistResponse])
def add_video_to_playlist(
    playlist_id: str,
    video_id: str,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """플레이리스트 끝에 영상 추가 (중복 불가)"""
    target_playlist_id = parse_id(playlist_id, "playlist")
    target_video_id = parse_id(video_id, "video")

    playlist = _get_playlist_or_404(db, target_playlist_id)
    _get_video_or_404(db, target_video_id)
    ensure_owner(playlist.owner_id, current_user_id)

    if target_video_id in playlist.video_ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Video already in playlist"
        )

    # 확인과 삽입 사이에 경쟁이 생기면 복합 PK 위반으로 커밋이 실패함 (500)
    last_position = db.query(func.max(PlaylistVideo.position)).filter(
        PlaylistVideo.playlist_id == playlist.id
    ).scalar()
    playlist.entries.append(
        PlaylistVideo(video_id=target_video_id, position=(last_position or 0) + 1)
    )
    commit_or_500(db, "Error while adding video to playlist")
    db.refresh(playlist)
    logger.info(f"✅ 플레이리스트 영상 추가: playlist_id={playlist.id}, video_id={target_video_id}")

    return api_response(_playlist_response(playlist), "Video added to playlist successfully")


@router.delete("/{playlist_id}/videos/{video_id}", response_model=ApiResponse[PlaylistResponse])
def remove_video_from_playlist(
    playlist_id: str,
    video_id: str,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """플레이리스트에서 영상 제거"""
    target_playlist_id = parse_id(playlist_id, "playlist")
    target_video_id = parse_id(video_id, "video")

    playlist = _get_playlist_or_404(db, target_playlist_id)
    _get_video_or_404(db, target_video_id)
    ensure_owner(playlist.owner_id, current_user_id)

    entry = next(
        (item for item in playlist.entries if item.video_id == target_video_id),
        None
    )
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Video is not in playlist"
        )

    playlist.entries.remove(entry)  # delete-orphan → 행 삭제
    commit_or_500(db, "Error while removing video from playlist")
    db.refresh(playlist)
    logger.info(f"✅ 플레이리스트 영상 제거: playlist_id={playlist.id}, video_id={target_video_id}")

    return api_response(_playlist_response(playlist), "Video removed from playlist successfully")


@router.patch("/{playlist_id}", response_model=ApiResponse[PlaylistResponse])
def update_playlist(
    playlist_id: str,
    payload: PlaylistUpdate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """
    플레이리스트 수정
    - name, description 중 최소 하나 필요
    - 주지 않은 필드는 기존 값 유지
    """
    target_id = parse_id(playlist_id, "playlist")
    playlist = _get_playlist_or_404(db, target_id)

    update_data = payload.dict(exclude_unset=True)
    name = update_data.get("name")
    description = update_data.get("description")

    if name is None and description is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one of name or description is required"
        )

    ensure_owner(playlist.owner_id, current_user_id)

    if name is not None:
        if not name.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Name cannot be blank"
            )
        playlist.name = name.strip()
    if description is not None:
        playlist.description = description

    commit_or_500(db, "Error while updating playlist")
    db.refresh(playlist)
    logger.info(f"✅ 플레이리스트 수정: playlist_id={playlist.id}")

    return api_response(_playlist_response(playlist), "Playlist updated successfully")


@router.delete("/{playlist_id}", response_model=ApiResponse[PlaylistResponse])
def delete_playlist(
    playlist_id: str,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """플레이리스트 삭제 (영상/사용자에는 영향 없음)"""
    target_id = parse_id(playlist_id, "playlist")
    playlist = _get_playlist_or_404(db, target_id)
    ensure_owner(playlist.owner_id, current_user_id)

    deleted = _playlist_response(playlist)
    db.delete(playlist)
    commit_or_500(db, "Error while deleting playlist")
    logger.info(f"✅ 플레이리스트 삭제: playlist_id={target_id}")

    return api_response(deleted, "Playlist deleted successfully")
