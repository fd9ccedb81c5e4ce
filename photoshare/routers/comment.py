from typing import Annotated
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session
from photoshare.db.session import get_db
from photoshare.db.models.user import User
from photoshare.schemas.comment import CommentCreate, CommentOut, CommentList
from photoshare.crud import comment as crud
from photoshare.core.config import MAX_ID
from photoshare.core.security import get_current_user

router = APIRouter(tags=["Comments"])

@router.post("/posts/{post_id}/comments", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def create_comment(
    post_id: Annotated[int, Path(ge=1, le=MAX_ID)],
    comment_in: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return crud.create_comment(db, current_user.id, post_id, comment_in.content)


# Oldest first
@router.get("/posts/{post_id}/comments", response_model=CommentList)
def get_comments(post_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    comments = [CommentOut.model_validate(c) for c in crud.list_comments(db, post_id)]
    return {"comments": comments, "count": len(comments)}


@router.get("/comments/{comment_id}", response_model=CommentOut)
def get_comment(comment_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    return crud.get_comment(db, comment_id)


# Comment author or post owner only
@router.delete("/comments/{comment_id}")
def delete_comment(
    comment_id: int = Path(..., ge=1, le=MAX_ID),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    crud.delete_comment(db, current_user.id, comment_id)
    return {"msg": "Comment deleted successfully"}
