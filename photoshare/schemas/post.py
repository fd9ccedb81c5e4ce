from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List
from photoshare.schemas.user import UserSummary
from photoshare.schemas.comment import CommentOut

class PostCreate(BaseModel):
    image: str
    caption: Optional[str] = None

class PostUpdate(BaseModel):
    caption: Optional[str] = None

class PostOut(BaseModel):
    id: int
    user_id: int
    image_url: str
    caption: Optional[str] = None
    likes_count: int = 0
    comments_count: int = 0
    created_at: datetime
    updated_at: datetime
    user: UserSummary

    class Config:
        from_attributes = True

class PostOutWithUserLike(PostOut):
    liked: bool = False

class PostDetail(PostOutWithUserLike):
    comments: List[CommentOut] = []

class FeedPage(BaseModel):
    posts: List[PostOutWithUserLike]
    next_cursor: Optional[str] = None

class UploadOut(BaseModel):
    url: str
    size: int
    type: str
