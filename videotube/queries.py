# queries.py
"""
집계 쿼리 모음 (읽기 전용)

각 함수는 필터 → 조인 → 파생 필드 → 그룹 → 프로젝션 순서로 쿼리를 조립하고
스키마에 바로 넣을 수 있는 dict(snake_case 키)를 돌려준다.
결과가 비어 있어도 오류가 아니다. 집계 값은 0, 목록은 [] 로 채운다.
"""
from typing import List, Optional

from sqlalchemy import exists, func, select
from sqlalchemy.orm import Session, aliased

from videotube.models import Comment, Like, Playlist, PlaylistVideo, Subscription, Tweet, User, Video


def _public_user(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "full_name": user.full_name,
        "avatar": user.avatar,
    }


def _owned_video_ids(user_id: int):
    return select(Video.id).where(Video.owner_id == user_id)


# ---------- 대시보드 ----------

def channel_stats(db: Session, user_id: int) -> dict:
    """채널 통계: 구독자 수, 총 좋아요, 영상 수, 총 조회수, 트윗 수"""

    # 영상별 좋아요 수
    likes_per_video = (
        db.query(
            Like.video_id.label("video_id"),
            func.count(Like.id).label("likes_count"),
        )
        .filter(Like.video_id.in_(_owned_video_ids(user_id)))
        .group_by(Like.video_id)
        .subquery()
    )

    # GROUP BY 없는 집계라 영상이 없어도 한 행이 나옴
    video_stats = (
        db.query(
            func.count(Video.id).label("total_videos"),
            func.coalesce(func.sum(Video.views), 0).label("total_views"),
            func.coalesce(func.sum(func.coalesce(likes_per_video.c.likes_count, 0)), 0).label("total_like"),
        )
        .select_from(Video)
        .outerjoin(likes_per_video, likes_per_video.c.video_id == Video.id)
        .filter(Video.owner_id == user_id)
        .one()
    )

    subscriber_count = db.query(func.count(Subscription.id)).filter(
        Subscription.channel_id == user_id
    ).scalar()

    tweet_count = db.query(func.count(Tweet.id)).filter(
        Tweet.owner_id == user_id
    ).scalar()

    return {
        "subscriber_count": int(subscriber_count or 0),
        "total_like": int(video_stats.total_like or 0),
        "total_videos": int(video_stats.total_videos or 0),
        "total_views": int(video_stats.total_views or 0),
        "total_tweets": int(tweet_count or 0),
    }


def channel_videos(db: Session, user_id: int) -> List[dict]:
    """내 채널 영상 목록 + 좋아요/댓글 수 (최신순)"""
    owned = _owned_video_ids(user_id)

    likes = (
        db.query(Like.video_id.label("video_id"), func.count(Like.id).label("likes_count"))
        .filter(Like.video_id.in_(owned))
        .group_by(Like.video_id)
        .subquery()
    )
    comments = (
        db.query(Comment.video_id.label("video_id"), func.count(Comment.id).label("comments_count"))
        .filter(Comment.video_id.in_(owned))
        .group_by(Comment.video_id)
        .subquery()
    )

    rows = (
        db.query(
            Video,
            func.coalesce(likes.c.likes_count, 0).label("likes_count"),
            func.coalesce(comments.c.comments_count, 0).label("comments_count"),
        )
        .outerjoin(likes, likes.c.video_id == Video.id)
        .outerjoin(comments, comments.c.video_id == Video.id)
        .filter(Video.owner_id == user_id)
        .order_by(Video.created_at.desc(), Video.id.desc())
        .all()
    )

    return [
        {
            "id": video.id,
            "video_file": video.video_file,
            "is_published": video.is_published,
            "thumbnail": video.thumbnail,
            "likes_count": int(likes_count),
            "comments_count": int(comments_count),
            "created_at": video.created_at,
            "description": video.description,
            "title": video.title,
            "views": video.views,
        }
        for video, likes_count, comments_count in rows
    ]


# ---------- 플레이리스트 ----------

def _playlist_summary_query(db: Session):
    """
    플레이리스트 + 소유자 + 공개 영상 기준 집계
    비공개 영상은 videosCount / totalViews / thumbnail 어디에도 포함되지 않음
    """
    stats = (
        db.query(
            PlaylistVideo.playlist_id.label("playlist_id"),
            func.count(Video.id).label("videos_count"),
            func.coalesce(func.sum(Video.views), 0).label("total_views"),
        )
        .join(Video, Video.id == PlaylistVideo.video_id)
        .filter(Video.is_published.is_(True))
        .group_by(PlaylistVideo.playlist_id)
        .subquery()
    )

    # 첫 번째 공개 영상의 썸네일
    first_thumbnail = (
        select(Video.thumbnail)
        .join(PlaylistVideo, PlaylistVideo.video_id == Video.id)
        .where(PlaylistVideo.playlist_id == Playlist.id, Video.is_published.is_(True))
        .order_by(PlaylistVideo.position)
        .limit(1)
        .correlate(Playlist)
        .scalar_subquery()
    )

    return (
        db.query(
            Playlist,
            User,
            func.coalesce(stats.c.videos_count, 0).label("videos_count"),
            func.coalesce(stats.c.total_views, 0).label("total_views"),
            first_thumbnail.label("thumbnail"),
        )
        .join(User, User.id == Playlist.owner_id)
        .outerjoin(stats, stats.c.playlist_id == Playlist.id)
    )


def _playlist_summary(row) -> dict:
    playlist, owner, videos_count, total_views, thumbnail = row
    return {
        "id": playlist.id,
        "name": playlist.name,
        "description": playlist.description,
        "owner": _public_user(owner),
        "thumbnail": thumbnail,
        "videos_count": int(videos_count or 0),
        "total_views": int(total_views or 0),
        "created_at": playlist.created_at,
        "updated_at": playlist.updated_at,
    }


def user_playlists(db: Session, user_id: int) -> List[dict]:
    """사용자의 플레이리스트 목록 (최신순, 영상 목록 제외)"""
    rows = (
        _playlist_summary_query(db)
        .filter(Playlist.owner_id == user_id)
        .order_by(Playlist.created_at.desc(), Playlist.id.desc())
        .all()
    )
    return [_playlist_summary(row) for row in rows]


def playlist_details(db: Session, playlist_id: int) -> Optional[dict]:
    """플레이리스트 단건 + 공개 영상 목록(플레이리스트 순서). 없으면 None"""
    row = _playlist_summary_query(db).filter(Playlist.id == playlist_id).first()
    if row is None:
        return None

    videos = (
        db.query(Video, User)
        .join(PlaylistVideo, PlaylistVideo.video_id == Video.id)
        .join(User, User.id == Video.owner_id)
        .filter(PlaylistVideo.playlist_id == playlist_id, Video.is_published.is_(True))
        .order_by(PlaylistVideo.position)
        .all()
    )

    details = _playlist_summary(row)
    details["videos"] = [
        {
            "id": video.id,
            "title": video.title,
            "description": video.description,
            "thumbnail": video.thumbnail,
            "video_file": video.video_file,
            "duration": video.duration,
            "views": video.views,
            "created_at": video.created_at,
            "owner": _public_user(owner),
        }
        for video, owner in videos
    ]
    return details


def video_playlist_membership(db: Session, user_id: int, video_id: int) -> List[dict]:
    """내 플레이리스트마다 해당 영상이 들어 있는지 여부"""
    is_present = (
        exists()
        .where(PlaylistVideo.playlist_id == Playlist.id, PlaylistVideo.video_id == video_id)
        .correlate(Playlist)
    )

    rows = (
        db.query(Playlist.id, Playlist.name, is_present.label("is_video_present"))
        .filter(Playlist.owner_id == user_id)
        .order_by(Playlist.created_at.desc(), Playlist.id.desc())
        .all()
    )
    return [
        {"id": playlist_id, "name": name, "is_video_present": bool(present)}
        for playlist_id, name, present in rows
    ]


# ---------- 구독 ----------

def channel_subscribers(db: Session, channel_id: int) -> dict:
    """채널 구독자 목록 (최근 구독순)"""
    subscribers = (
        db.query(User)
        .join(Subscription, Subscription.subscriber_id == User.id)
        .filter(Subscription.channel_id == channel_id)
        .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        .all()
    )
    return {
        "subscribers": [_public_user(user) for user in subscribers],
        "subscribers_count": len(subscribers),
    }


def subscribed_channels(db: Session, subscriber_id: int, acting_user_id: int) -> dict:
    """
    subscriber_id 가 구독 중인 채널 목록 (최근 구독순)
    - subscribersCount: 채널 전체 구독자 수
    - isSubscribed: 요청한 사용자(acting_user_id)가 그 채널을 구독 중인지
    """
    channel_counts = (
        db.query(
            Subscription.channel_id.label("channel_id"),
            func.count(Subscription.id).label("subscribers_count"),
        )
        .group_by(Subscription.channel_id)
        .subquery()
    )

    acting = aliased(Subscription)
    is_subscribed = (
        exists()
        .where(acting.channel_id == User.id, acting.subscriber_id == acting_user_id)
        .correlate(User)
    )

    rows = (
        db.query(
            User,
            func.coalesce(channel_counts.c.subscribers_count, 0).label("subscribers_count"),
            is_subscribed.label("is_subscribed"),
        )
        .join(Subscription, Subscription.channel_id == User.id)
        .outerjoin(channel_counts, channel_counts.c.channel_id == User.id)
        .filter(Subscription.subscriber_id == subscriber_id)
        .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        .all()
    )

    channels = []
    for user, subscribers_count, subscribed in rows:
        channel = _public_user(user)
        channel["subscribers_count"] = int(subscribers_count or 0)
        channel["is_subscribed"] = bool(subscribed)
        channels.append(channel)

    return {"channels": channels, "channels_count": len(channels)}
