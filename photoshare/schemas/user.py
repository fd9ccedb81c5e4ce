from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional, List

USERNAME_PATTERN = r"^[A-Za-z0-9_]+$"

class UserCreate(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    password: str = Field(..., min_length=8)
    name: Optional[str] = None


class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    name: Optional[str] = None


class UserSummary(BaseModel):
    id: int
    username: str
    name: Optional[str] = None
    profile_picture: Optional[str] = None

    class Config:
        from_attributes = True


class UserOut(UserSummary):
    email: EmailStr
    created_at: datetime

    class Config:
        from_attributes = True


class ProfilePost(BaseModel):
    id: int
    image_url: str
    caption: Optional[str] = None
    likes_count: int
    comments_count: int
    created_at: datetime

    class Config:
        from_attributes = True


class ProfileOut(UserSummary):
    post_count: int
    posts: List[ProfilePost]
