from passlib.context import CryptContext
from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from photoshare.core.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_DAYS, BCRYPT_ROUNDS
from photoshare.core.errors import Unauthorized
from photoshare.schemas.token import TokenData
from photoshare.db.session import get_db
from photoshare.db.models.user import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    user = resolve_actor(token, db)
    if user is None:
        raise Unauthorized("Could not validate credentials")
    return user


def get_current_user_optional(token: Optional[str] = Depends(optional_oauth2_scheme), db: Session = Depends(get_db)):
    # anonymous readers get None instead of a 401
    if not token:
        return None
    return resolve_actor(token, db)


def resolve_actor(token: str, db: Session) -> Optional[User]:
    token_data = verify_token(token)
    if token_data is None:
        return None
    return db.query(User).filter(User.email == token_data.email).first()


def hash_password(password: str):
    return pwd_context.hash(password)

def verify_token(token: str) -> Optional[TokenData]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        email: str = payload.get("sub")
        if email is None:
            return None
        return TokenData(email=email)
    except JWTError:
        return None


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
