import logging
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from photoshare.core.errors import Conflict, NotFound, Unauthorized, Internal
from photoshare.core.security import hash_password, verify_password
from photoshare.crud.post import get_user_posts, recount_post_counters
from photoshare.db.models.user import User
from photoshare.db.models.post import Post
from photoshare.db.models.like import Like
from photoshare.db.models.comment import Comment
from photoshare.schemas.user import ProfilePost


def get_user_by_username(db: Session, username: str) -> User:
    user = db.query(User).filter(User.username == username).first()
    if not user:
        raise NotFound("User not found")
    return user


def register(db: Session, email: str, username: str, password: str, name=None) -> User:
    if db.query(User).filter(User.email == email).first():
        raise Conflict("Email already registered")
    if db.query(User).filter(User.username == username).first():
        raise Conflict("Username already taken")

    new_user = User(
        email=email,
        username=username,
        name=name or None,
        password=hash_password(password),
    )
    try:
        db.add(new_user)
        db.commit()
    except IntegrityError:
        # lost a race with another registration for the same email/username
        db.rollback()
        raise Conflict("Email or username already registered")
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error while registering {email}: {str(e)}")
        raise Internal("Failed to register user")
    db.refresh(new_user)
    logging.info(f"New user registered: {new_user.username}")
    return new_user


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.password):
        raise Unauthorized("Incorrect email or password")
    return user


def get_profile(db: Session, username: str) -> dict:
    user = get_user_by_username(db, username)
    posts = get_user_posts(db, user.id)
    return {
        "id": user.id,
        "username": user.username,
        "name": user.name,
        "profile_picture": user.profile_picture,
        "post_count": len(posts),
        "posts": [ProfilePost.model_validate(post) for post in posts],
    }


def update_profile(db: Session, user: User, update_data: dict) -> User:
    new_username = update_data.get("username")
    if new_username and new_username != user.username:
        if db.query(User).filter(User.username == new_username, User.id != user.id).first():
            raise Conflict("Username already taken")
        user.username = new_username
    if "name" in update_data:
        user.name = update_data["name"] or None

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Username already taken")
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error while updating user {user.id}: {str(e)}")
        raise Internal("Failed to update profile")
    db.refresh(user)
    return user


def update_avatar(db: Session, user: User, image_url: str) -> User:
    user.profile_picture = image_url
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error while saving avatar for user {user.id}: {str(e)}")
        raise Internal("Failed to save profile picture")
    db.refresh(user)
    return user


def delete_account(db: Session, user: User):
    """Remove a user and everything that hangs off it in one transaction.

    Likes and comments the user left on other people's posts go too, and the
    counters of those posts are recomputed before the commit.
    """
    user_id = user.id
    own_posts = select(Post.id).where(Post.user_id == user_id)
    try:
        touched = {pid for (pid,) in db.query(Like.post_id).filter(Like.user_id == user_id).all()}
        touched |= {pid for (pid,) in db.query(Comment.post_id).filter(Comment.user_id == user_id).all()}

        db.query(Comment).filter(
            or_(Comment.user_id == user_id, Comment.post_id.in_(own_posts))
        ).delete(synchronize_session=False)
        db.query(Like).filter(
            or_(Like.user_id == user_id, Like.post_id.in_(own_posts))
        ).delete(synchronize_session=False)
        db.query(Post).filter(Post.user_id == user_id).delete(synchronize_session=False)

        recount_post_counters(db, touched)
        db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error while deleting user {user_id}: {str(e)}")
        raise Internal("Failed to delete account")
    db.expunge(user)
    logging.info(f"User {user_id} deleted their account")
