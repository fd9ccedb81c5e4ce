from pydantic import BaseModel
from datetime import datetime
from typing import List
from photoshare.schemas.user import UserSummary

class CommentCreate(BaseModel):
    content: str

class CommentOut(BaseModel):
    id: int
    post_id: int
    user_id: int
    content: str
    created_at: datetime
    user: UserSummary

    class Config:
        from_attributes = True

class CommentList(BaseModel):
    comments: List[CommentOut]
    count: int
