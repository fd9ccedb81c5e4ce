from pydantic import BaseModel
from datetime import datetime

class LikeStatus(BaseModel):
    liked: bool
    like_count: int

class LikeOut(BaseModel):
    id: int
    user_id: int
    post_id: int
    created_at: datetime

    class Config:
        from_attributes = True
