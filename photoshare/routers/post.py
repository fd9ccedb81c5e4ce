from typing import Annotated
from fastapi import APIRouter, Depends, Path, Query, status
from typing import Optional
from sqlalchemy.orm import Session
from photoshare.db.models.user import User
from photoshare.db.session import get_db
from photoshare.schemas.post import PostCreate, PostUpdate, PostOutWithUserLike, PostDetail, FeedPage
from photoshare.schemas.comment import CommentOut
from photoshare.crud import post as crud
from photoshare.crud.comment import list_comments
from photoshare.crud.feed import list_feed, with_like_flags
from photoshare.core.config import MAX_ID
from photoshare.core.security import get_current_user, get_current_user_optional

router = APIRouter()


def actor_id(user: Optional[User]) -> Optional[int]:
    return user.id if user else None


@router.post("", response_model=PostOutWithUserLike, status_code=status.HTTP_201_CREATED)
def create_post(
    post_in: PostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    new_post = crud.create_post(db, current_user.id, post_in.image, post_in.caption)
    return with_like_flags(db, [new_post], current_user.id)[0]


# limit and cursor come in as raw strings: bad values are clamped, not rejected
@router.get("", response_model=FeedPage)
def get_posts(
    limit: Optional[str] = None,
    cursor: Optional[str] = None,
    user_id: Optional[int] = Query(None, ge=1, le=MAX_ID),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional)
):
    return list_feed(db, limit=limit, cursor=cursor, user_id=user_id, actor_id=actor_id(current_user))


@router.get("/{post_id}", response_model=PostDetail)
def get_post_by_id(
    post_id: int = Path(..., ge=1, le=MAX_ID),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional)
):
    post = crud.get_post(db, post_id)
    item = with_like_flags(db, [post], actor_id(current_user))[0]
    comments = [CommentOut.model_validate(c) for c in list_comments(db, post_id)]
    return PostDetail(**item.model_dump(), comments=comments)


# Edit caption
@router.patch("/{post_id}", response_model=PostOutWithUserLike)
def update_post(
    post_id: Annotated[int, Path(ge=1, le=MAX_ID)],
    post_in: PostUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    post = crud.update_post(db, current_user.id, post_id, post_in.caption)
    return with_like_flags(db, [post], current_user.id)[0]


#delete post
@router.delete("/{post_id}")
def delete_post(
    post_id: int = Path(..., ge=1, le=MAX_ID),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    crud.delete_post(db, current_user.id, post_id)
    return {"msg": "Post deleted successfully"}
