# dependencies.py
import logging
import re
from typing import Optional

from fastapi import Header, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from videotube.models import User

logger = logging.getLogger(__name__)

# 양의 정수 PK (BIGINT 범위 안)
_ID_PATTERN = re.compile(r"[1-9][0-9]{0,17}")


def parse_id(raw: Optional[str], label: str) -> int:
    """경로로 받은 id 문자열 검증. DB 조회 전에 호출해야 함"""
    if not raw or not _ID_PATTERN.fullmatch(raw):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label} id"
        )
    return int(raw)


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> int:
    """
    현재 사용자 식별자
    - 인증 레이어(게이트웨이)가 검증 후 X-User-Id 헤더로 넘겨줌
    - 여기서는 형식만 확인하고 DB는 건드리지 않음
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized request"
        )
    if not _ID_PATTERN.fullmatch(x_user_id):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user identity"
        )
    return int(x_user_id)


def get_optional_user_id(x_user_id: Optional[str] = Header(default=None)) -> Optional[int]:
    """헤더가 없으면 익명(None), 있으면 get_current_user_id 와 같은 형식 검사"""
    if x_user_id is None:
        return None
    return get_current_user_id(x_user_id)


def get_acting_user(db: Session, user_id: int) -> User:
    """현재 사용자 소유의 행을 만들기 전에 사용자 존재 확인"""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user identity"
        )
    return user


def ensure_owner(owner_id: int, user_id: int) -> None:
    """소유자 확인 (id 값 비교)"""
    if owner_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="You do not have permission to perform this action"
        )


def commit_or_500(db: Session, failure_message: str) -> None:
    """커밋 실패 시 롤백 후 500"""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{failure_message}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=failure_message
        )
