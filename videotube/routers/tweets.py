import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from videotube.database import get_db
from videotube.dependencies import commit_or_500, get_acting_user, get_current_user_id, parse_id
from videotube.models import Tweet
from videotube.responses import api_response
from videotube.schemas import ApiResponse, TweetCreate, TweetResponse

router = APIRouter(prefix="/api/tweets", tags=["tweets"])

logger = logging.getLogger(__name__)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[TweetResponse])
def create_tweet(
    payload: TweetCreate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    owner = get_acting_user(db, current_user_id)

    tweet = Tweet(owner_id=owner.id, content=payload.content)
    db.add(tweet)
    commit_or_500(db, "Error while creating tweet")
    db.refresh(tweet)
    logger.info(f"✅ 트윗 작성: tweet_id={tweet.id}, owner_id={owner.id}")

    return api_response(
        TweetResponse.model_validate(tweet),
        "Tweet created successfully",
        status_code=status.HTTP_201_CREATED
    )


@router.get("/user/{user_id}", response_model=ApiResponse[List[TweetResponse]])
def get_user_tweets(user_id: str, db: Session = Depends(get_db)):
    """사용자 트윗 목록 (최신순)"""
    owner_id = parse_id(user_id, "user")
    tweets = db.query(Tweet).filter(
        Tweet.owner_id == owner_id
    ).order_by(Tweet.created_at.desc(), Tweet.id.desc()).all()

    return api_response(
        [TweetResponse.model_validate(tweet) for tweet in tweets],
        "Tweets fetched successfully"
    )
