from fastapi import APIRouter, Depends, File, UploadFile, Body, status
from typing import List
from sqlalchemy.orm import Session
from photoshare.core.blob_store import BlobStore, get_blob_store, read_upload
from photoshare.core.security import get_current_user
from photoshare.crud import user as crud
from photoshare.crud.feed import with_like_flags
from photoshare.crud.like import list_liked_posts
from photoshare.db.models.user import User
from photoshare.db.session import get_db
from photoshare.schemas.post import PostOutWithUserLike
from photoshare.schemas.user import UserOut, UserUpdate, ProfileOut


router = APIRouter()


# Get user details
@router.get("/me", response_model=UserOut)
def get_user_me(current_user: User = Depends(get_current_user)):
    return current_user


# Edit username / display name
@router.put("/me", response_model=UserOut)
def update_me(
    user_update: UserUpdate = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return crud.update_profile(db, current_user, user_update.model_dump(exclude_unset=True))


#add user profile picture
@router.put("/me/avatar", response_model=UserOut)
def update_profile_picture(
    profile_picture: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    blob_store: BlobStore = Depends(get_blob_store)
):
    data = read_upload(profile_picture)
    image_url = blob_store.store(data, profile_picture.content_type, folder="profile_pics")
    return crud.update_avatar(db, current_user, image_url)


# Delete account with all posts, likes and comments
@router.delete("/me", status_code=status.HTTP_200_OK)
def delete_me(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    crud.delete_account(db, current_user)
    return {"msg": "Account deleted successfully"}


#get posts liked by the current user
@router.get("/me/liked-posts", response_model=List[PostOutWithUserLike])
def get_liked_posts(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    liked_posts = list_liked_posts(db, current_user.id)
    return with_like_flags(db, liked_posts, current_user.id)


# Public profile page data
@router.get("/{username}", response_model=ProfileOut)
def get_profile(
    username: str,
    db: Session = Depends(get_db)
):
    return crud.get_profile(db, username)
