from pydantic import BaseModel,EmailStr
from typing import Optional

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    username: str


class TokenData(BaseModel):
    email: Optional[EmailStr] = None
