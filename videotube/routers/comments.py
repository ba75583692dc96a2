from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
import logging
from videotube.database import get_db
from videotube.dependencies import commit_or_500, ensure_owner, get_acting_user, get_current_user_id, parse_id
from videotube.models import Comment
from videotube.responses import api_response
from videotube.routers.videos import get_video_or_404
from videotube.schemas import ApiResponse, CommentCreate, CommentListResponse, CommentResponse, CommentUpdate

# APIRouter 인스턴스 생성
router = APIRouter(prefix="/api/videos", tags=["comments"])

logger = logging.getLogger(__name__)


def _get_comment_or_404(db: Session, video_id: int, comment_id: int) -> Comment:
    # 댓글 찾기 (video_id와 comment_id를 모두 사용)
    comment = db.query(Comment).filter(Comment.id == comment_id, Comment.video_id == video_id).first()
    if not comment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Comment not found"
        )
    return comment


## 1. 댓글 목록 조회 API (GET)
@router.get("/{video_id}/comments", response_model=ApiResponse[CommentListResponse])
def read_comments(
    video_id: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """
    특정 영상(video_id)에 달린 댓글을 최신순으로 조회합니다.
    """
    target_id = parse_id(video_id, "video")
    get_video_or_404(db, target_id)

    comments = db.query(Comment).filter(
        Comment.video_id == target_id
    ).order_by(
        Comment.created_at.desc(), Comment.id.desc()
    ).offset(skip).limit(limit).all()

    # 댓글 총 개수
    total = db.query(Comment).filter(
        Comment.video_id == target_id
    ).count()

    return api_response(
        CommentListResponse(
            total=total,
            comments=[CommentResponse.model_validate(comment) for comment in comments]
        ),
        "Comments fetched successfully"
    )


## 2. 댓글 작성 API (POST)
@router.post("/{video_id}/comments", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[CommentResponse])
def create_comment(
    video_id: str,
    comment: CommentCreate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """
    특정 영상에 새로운 댓글을 작성합니다.
    """
    target_id = parse_id(video_id, "video")
    get_video_or_404(db, target_id)
    owner = get_acting_user(db, current_user_id)

    db_comment = Comment(
        video_id=target_id,
        owner_id=owner.id,
        content=comment.content
    )

    db.add(db_comment)
    commit_or_500(db, "Error while adding comment")
    db.refresh(db_comment)  # 자동 생성된 id와 created_at을 가져옴
    logger.info(f"✅ 댓글 작성: comment_id={db_comment.id}, video_id={target_id}")

    return api_response(
        CommentResponse.model_validate(db_comment),
        "Comment added successfully",
        status_code=status.HTTP_201_CREATED
    )


@router.patch("/{video_id}/comments/{comment_id}", response_model=ApiResponse[CommentResponse])
def update_comment(
    video_id: str,
    comment_id: str,
    comment_update: CommentUpdate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """댓글 수정 (작성자만)"""
    target_video_id = parse_id(video_id, "video")
    target_comment_id = parse_id(comment_id, "comment")
    comment = _get_comment_or_404(db, target_video_id, target_comment_id)

    update_data = comment_update.dict(exclude_unset=True)
    if not update_data.get("content") or not update_data["content"].strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Nothing to update"
        )

    ensure_owner(comment.owner_id, current_user_id)

    comment.content = update_data["content"]
    commit_or_500(db, "Error while updating comment")
    db.refresh(comment)
    logger.info(f"✅ 댓글 수정 완료: comment_id={target_comment_id}")

    return api_response(CommentResponse.model_validate(comment), "Comment updated successfully")


@router.delete("/{video_id}/comments/{comment_id}", response_model=ApiResponse[CommentResponse])
def delete_comment(
    video_id: str,
    comment_id: str,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """댓글 삭제 (작성자만)"""
    target_video_id = parse_id(video_id, "video")
    target_comment_id = parse_id(comment_id, "comment")
    comment = _get_comment_or_404(db, target_video_id, target_comment_id)
    ensure_owner(comment.owner_id, current_user_id)

    deleted = CommentResponse.model_validate(comment)
    db.delete(comment)
    commit_or_500(db, "Error while deleting comment")
    logger.info(f"✅ DB 삭제 완료: comment_id={target_comment_id}")

    return api_response(deleted, "Comment deleted successfully")
