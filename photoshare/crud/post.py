import logging
from typing import Optional
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
from photoshare.core.errors import NotFound, InvalidArgument, Internal
from photoshare.core.permissions import require_actor, ensure_can_mutate_post
from photoshare.db.models.post import Post
from photoshare.db.models.like import Like
from photoshare.db.models.comment import Comment


def get_post(db: Session, post_id: int) -> Post:
    post = db.query(Post).options(joinedload(Post.user)).filter(Post.id == post_id).first()
    if not post:
        raise NotFound("Post not found")
    return post


def post_exists(db: Session, post_id: int) -> bool:
    return db.query(Post.id).filter(Post.id == post_id).first() is not None


def bump_counter(db: Session, post_id: int, column, delta: int):
    # single UPDATE so concurrent writers never lose an increment
    db.query(Post).filter(Post.id == post_id).update({column: column + delta}, synchronize_session=False)


def recount_post_counters(db: Session, post_ids):
    if not post_ids:
        return
    likes = select(func.count(Like.id)).where(Like.post_id == Post.id).scalar_subquery()
    comments = select(func.count(Comment.id)).where(Comment.post_id == Post.id).scalar_subquery()
    db.query(Post).filter(Post.id.in_(list(post_ids))).update(
        {Post.likes_count: likes, Post.comments_count: comments},
        synchronize_session=False,
    )


def create_post(db: Session, actor_id: Optional[int], image_url: str, caption: Optional[str] = None) -> Post:
    require_actor(actor_id)
    if not image_url or not image_url.strip():
        raise InvalidArgument("Image is required")

    # captions are stored as given; only an empty caption becomes null
    new_post = Post(user_id=actor_id, image_url=image_url, caption=caption or None)
    try:
        db.add(new_post)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error while creating post: {str(e)}")
        raise Internal("Failed to create post")
    return get_post(db, new_post.id)


def update_post(db: Session, actor_id: Optional[int], post_id: int, caption: Optional[str]) -> Post:
    post = get_post(db, post_id)
    ensure_can_mutate_post(actor_id, post, "edit")

    post.caption = caption or None
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error while updating post {post_id}: {str(e)}")
        raise Internal("Failed to update post")
    db.refresh(post)
    return post


def delete_post(db: Session, actor_id: Optional[int], post_id: int):
    """Delete a post together with its comments and likes in one transaction."""
    post = get_post(db, post_id)
    ensure_can_mutate_post(actor_id, post, "delete")

    try:
        db.query(Comment).filter(Comment.post_id == post.id).delete(synchronize_session=False)
        db.query(Like).filter(Like.post_id == post.id).delete(synchronize_session=False)
        db.delete(post)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error while deleting post {post_id}: {str(e)}")
        raise Internal("Failed to delete post")
    logging.info(f"Post {post_id} deleted by user {actor_id}")


def get_user_posts(db: Session, user_id: int):
    return db.query(Post)\
        .filter(Post.user_id == user_id)\
        .order_by(Post.created_at.desc(), Post.id.desc())\
        .all()
