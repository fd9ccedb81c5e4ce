from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from photoshare.schemas.user import UserCreate, UserOut
from photoshare.schemas.token import Token
from photoshare.core.security import create_access_token
from photoshare.crud import user as crud
from photoshare.db.session import get_db


router = APIRouter()


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(user_in: UserCreate, db: Session = Depends(get_db)):
    return crud.register(
        db,
        email=user_in.email,
        username=user_in.username,
        password=user_in.password,
        name=user_in.name,
    )

# OAuth2 form: the "username" field carries the email address
@router.post("/login", response_model=Token)
def login(db: Session = Depends(get_db), form_data: OAuth2PasswordRequestForm = Depends()):
    user = crud.authenticate(db, form_data.username, form_data.password)

    access_token = create_access_token({"sub": user.email})
    return Token(access_token=access_token, token_type="bearer", user_id=user.id, username=user.username)
