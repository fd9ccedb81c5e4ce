from fastapi import APIRouter, Depends, Path
from typing import Optional
from sqlalchemy.orm import Session
from photoshare.db.session import get_db
from photoshare.db.models.user import User
from photoshare.schemas.like import LikeStatus, LikeOut
from photoshare.crud import like as crud
from photoshare.core.config import MAX_ID
from photoshare.core.security import get_current_user, get_current_user_optional

router = APIRouter(tags=["Likes"])

@router.post("/posts/{post_id}/like", response_model=LikeStatus)
def toggle_like(
    post_id: int = Path(..., ge=1, le=MAX_ID),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return crud.toggle_like(db, current_user.id, post_id)


# Like count plus whether the caller has liked the post
@router.get("/posts/{post_id}/like", response_model=LikeStatus)
def get_like_status(
    post_id: int = Path(..., ge=1, le=MAX_ID),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional)
):
    return crud.like_status(db, current_user.id if current_user else None, post_id)


@router.get("/likes/{like_id}", response_model=LikeOut)
def get_like(like_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    return crud.get_like(db, like_id)
