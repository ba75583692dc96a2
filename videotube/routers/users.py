import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from videotube.database import get_db
from videotube.dependencies import commit_or_500, parse_id
from videotube.models import User
from videotube.responses import api_response
from videotube.schemas import ApiResponse, UserCreate, UserResponse

router = APIRouter(prefix="/api/users", tags=["users"])

logger = logging.getLogger(__name__)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[UserResponse])
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    """사용자(채널) 생성. 비밀번호/토큰은 인증 서비스 담당"""
    username = payload.username.strip().lower()

    existing = db.query(User).filter(
        or_(User.username == username, User.email == payload.email)
    ).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this username or email already exists"
        )

    user = User(
        username=username,
        email=payload.email,
        full_name=payload.full_name,
        avatar=payload.avatar,
        cover_image=payload.cover_image
    )
    db.add(user)
    commit_or_500(db, "Error while creating user")
    db.refresh(user)
    logger.info(f"✅ 사용자 생성: user_id={user.id}")

    return api_response(
        UserResponse.model_validate(user),
        "User created successfully",
        status_code=status.HTTP_201_CREATED
    )


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
def get_user(user_id: str, db: Session = Depends(get_db)):
    target_id = parse_id(user_id, "user")
    user = db.query(User).filter(User.id == target_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return api_response(UserResponse.model_validate(user), "User fetched successfully")
