import logging
from typing import Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
from photoshare.core.errors import NotFound, Internal
from photoshare.core.permissions import require_actor
from photoshare.crud.post import get_post, post_exists, bump_counter
from photoshare.db.models.like import Like
from photoshare.db.models.post import Post


def get_like(db: Session, like_id: int) -> Like:
    like = db.query(Like).filter(Like.id == like_id).first()
    if not like:
        raise NotFound("Like not found")
    return like


def get_user_like(db: Session, user_id: int, post_id: int) -> Optional[Like]:
    return db.query(Like).filter(
        Like.user_id == user_id,
        Like.post_id == post_id
    ).first()


def count_likes(db: Session, post_id: int) -> int:
    return db.query(func.count(Like.id)).filter(Like.post_id == post_id).scalar()


def like_post(db: Session, user_id: int, post_id: int) -> bool:
    """Insert the (user, post) like row.

    Returns False when the row already existed. The unique constraint on
    (user_id, post_id) decides races between concurrent requests: the loser
    rolls back, so the counter is bumped exactly once.
    """
    try:
        db.add(Like(user_id=user_id, post_id=post_id))
        db.flush()
        bump_counter(db, post_id, Post.likes_count, 1)
        db.commit()
        return True
    except IntegrityError:
        db.rollback()
        # foreign key failure: the post was deleted under us
        if not post_exists(db, post_id):
            raise NotFound("Post not found")
        logging.info(f"Duplicate like by user {user_id} on post {post_id} ignored")
        return False
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error while liking post {post_id}: {str(e)}")
        raise Internal("Failed to like post")


def unlike_post(db: Session, user_id: int, post_id: int) -> bool:
    """Delete the (user, post) like row. Returns False if there was none."""
    try:
        removed = db.query(Like).filter(
            Like.user_id == user_id,
            Like.post_id == post_id
        ).delete(synchronize_session=False)
        if removed:
            bump_counter(db, post_id, Post.likes_count, -1)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error while unliking post {post_id}: {str(e)}")
        raise Internal("Failed to unlike post")
    return bool(removed)


def toggle_like(db: Session, actor_id: Optional[int], post_id: int) -> dict:
    require_actor(actor_id)
    get_post(db, post_id)

    if get_user_like(db, actor_id, post_id):
        unlike_post(db, actor_id, post_id)
        liked = False
    else:
        # a lost race still leaves the actor's like in place
        like_post(db, actor_id, post_id)
        liked = True

    return {"liked": liked, "like_count": count_likes(db, post_id)}


def like_status(db: Session, actor_id: Optional[int], post_id: int) -> dict:
    get_post(db, post_id)
    liked = False
    if actor_id is not None:
        liked = get_user_like(db, actor_id, post_id) is not None
    return {"liked": liked, "like_count": count_likes(db, post_id)}


def liked_post_ids(db: Session, actor_id: Optional[int], post_ids) -> set:
    if actor_id is None or not post_ids:
        return set()
    rows = db.query(Like.post_id).filter(
        Like.user_id == actor_id,
        Like.post_id.in_(list(post_ids))
    ).all()
    return {post_id for (post_id,) in rows}


def list_liked_posts(db: Session, actor_id: int):
    return db.query(Post)\
        .options(joinedload(Post.user))\
        .join(Like, Post.id == Like.post_id)\
        .filter(Like.user_id == actor_id)\
        .order_by(Like.created_at.desc(), Like.id.desc())\
        .all()
