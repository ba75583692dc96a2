# schemas.py
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, EmailStr, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """JSON 키는 camelCase, 파이썬 쪽은 snake_case"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        # ORM 모드: SQLAlchemy 객체를 바로 스키마로 변환
        from_attributes = True


class ApiResponse(CamelModel, Generic[T]):
    """모든 성공 응답의 공통 봉투"""
    status_code: int
    data: Optional[T] = None
    message: str
    success: bool


# ---------- 사용자 ----------

class UserCreate(CamelModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=100)
    avatar: Optional[str] = None
    cover_image: Optional[str] = None


class UserPublic(CamelModel):
    """다른 사용자에게 노출해도 되는 필드만"""
    id: int
    username: str
    full_name: str
    avatar: Optional[str] = None


class UserResponse(UserPublic):
    email: str
    cover_image: Optional[str] = None
    created_at: Optional[datetime] = None


# ---------- 영상 ----------

class VideoCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    video_file: str = Field(..., min_length=1)
    thumbnail: Optional[str] = None
    duration: float = Field(0, ge=0)
    is_published: bool = True


class VideoUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    thumbnail: Optional[str] = None


class VideoResponse(CamelModel):
    id: int
    owner_id: int
    video_file: str
    thumbnail: Optional[str] = None
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class VideoListResponse(CamelModel):
    total: int
    videos: List[VideoResponse]


class LikeStatus(CamelModel):
    """좋아요 상태 응답"""
    video_id: int
    likes_count: int
    is_liked: bool


# ---------- 댓글 / 트윗 ----------

class CommentCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=1000)


class CommentUpdate(CamelModel):
    content: Optional[str] = Field(None, max_length=1000)


class CommentResponse(CamelModel):
    id: int
    video_id: int
    owner_id: int
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CommentListResponse(CamelModel):
    total: int
    comments: List[CommentResponse]


class TweetCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=280)


class TweetResponse(CamelModel):
    id: int
    owner_id: int
    content: str
    created_at: Optional[datetime] = None


# ---------- 대시보드 ----------

class ChannelStats(CamelModel):
    subscriber_count: int = 0
    total_like: int = 0
    total_videos: int = 0
    total_views: int = 0
    total_tweets: int = 0


class ChannelVideo(CamelModel):
    id: int
    video_file: str
    is_published: bool
    thumbnail: Optional[str] = None
    likes_count: int = 0
    comments_count: int = 0
    created_at: Optional[datetime] = None
    description: str
    title: str
    views: int


# ---------- 플레이리스트 ----------

class PlaylistCreate(CamelModel):
    # 빈 문자열 검사는 라우터에서 직접 (공백만 있는 이름도 거부)
    name: Optional[str] = None
    description: Optional[str] = None


class PlaylistUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None


class PlaylistResponse(CamelModel):
    """변경 작업(생성/수정/영상 추가·삭제) 후 돌려주는 플레이리스트"""
    id: int
    name: str
    description: str
    owner_id: int
    videos: List[int] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PlaylistVideoItem(CamelModel):
    id: int
    title: str
    description: str
    thumbnail: Optional[str] = None
    video_file: str
    duration: float
    views: int
    created_at: Optional[datetime] = None
    owner: UserPublic


class PlaylistSummary(CamelModel):
    id: int
    name: str
    description: str
    owner: UserPublic
    thumbnail: Optional[str] = None
    videos_count: int = 0
    total_views: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PlaylistDetail(PlaylistSummary):
    videos: List[PlaylistVideoItem] = []


class PlaylistMembership(CamelModel):
    id: int
    name: str
    is_video_present: bool


# ---------- 구독 ----------

class SubscriptionStatus(CamelModel):
    channel_id: int
    subscribed: bool


class SubscriberList(CamelModel):
    subscribers: List[UserPublic] = []
    subscribers_count: int = 0


class SubscribedChannel(UserPublic):
    subscribers_count: int = 0
    is_subscribed: bool = False


class SubscribedChannelList(CamelModel):
    channels: List[SubscribedChannel] = []
    channels_count: int = 0
