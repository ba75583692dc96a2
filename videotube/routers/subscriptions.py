import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from videotube import queries
from videotube.database import get_db
from videotube.dependencies import commit_or_500, get_acting_user, get_current_user_id, parse_id
from videotube.models import Subscription, User
from videotube.responses import api_response
from videotube.schemas import ApiResponse, SubscribedChannelList, SubscriberList, SubscriptionStatus

router = APIRouter(prefix="/api/subscriptions", tags=["subscriptions"])

logger = logging.getLogger(__name__)


@router.post("/c/{channel_id}", response_model=ApiResponse[SubscriptionStatus])
def toggle_subscription(
    channel_id: str,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """
    구독 토글
    - 구독 안 했으면 → 구독 (행 생성)
    - 이미 구독 중이면 → 구독 취소 (행 삭제)
    """
    target_channel_id = parse_id(channel_id, "channel")

    if target_channel_id == current_user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot subscribe to your own channel"
        )

    channel = db.query(User).filter(User.id == target_channel_id).first()
    if not channel:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Channel not found"
        )

    existing = db.query(Subscription).filter(
        Subscription.subscriber_id == current_user_id,
        Subscription.channel_id == target_channel_id
    ).first()

    if existing:
        # 구독 취소
        db.delete(existing)
        commit_or_500(db, "Error while unsubscribing")
        subscribed = False
    else:
        # 구독
        subscriber = get_acting_user(db, current_user_id)
        db.add(Subscription(subscriber_id=subscriber.id, channel_id=target_channel_id))
        commit_or_500(db, "Error while subscribing")
        subscribed = True

    logger.info(
        f"✅ 구독 토글: subscriber_id={current_user_id}, channel_id={target_channel_id}, subscribed={subscribed}"
    )

    return api_response(
        SubscriptionStatus(channel_id=target_channel_id, subscribed=subscribed),
        "Subscription toggled successfully"
    )


@router.get("/c/{channel_id}", response_model=ApiResponse[SubscriberList])
def get_channel_subscribers(channel_id: str, db: Session = Depends(get_db)):
    """채널 구독자 목록"""
    target_channel_id = parse_id(channel_id, "channel")
    subscribers = queries.channel_subscribers(db, target_channel_id)
    return api_response(SubscriberList(**subscribers), "Subscribers fetched successfully")


@router.get("/u/{subscriber_id}", response_model=ApiResponse[SubscribedChannelList])
def get_subscribed_channels(
    subscriber_id: str,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """사용자가 구독 중인 채널 목록 (+ 내가 구독 중인지)"""
    target_subscriber_id = parse_id(subscriber_id, "subscriber")
    channels = queries.subscribed_channels(db, target_subscriber_id, current_user_id)
    return api_response(SubscribedChannelList(**channels), "Subscribed channels fetched successfully")
