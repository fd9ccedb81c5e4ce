import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
from photoshare.core.errors import NotFound, InvalidArgument, Internal
from photoshare.core.permissions import require_actor, ensure_can_delete_comment
from photoshare.crud.post import get_post, post_exists, bump_counter
from photoshare.db.models.comment import Comment
from photoshare.db.models.post import Post


def clean_content(raw_content) -> str:
    if not isinstance(raw_content, str):
        raise InvalidArgument("Comment content is required")
    content = raw_content.strip()
    if not content:
        raise InvalidArgument("Comment cannot be empty")
    return content


def get_comment(db: Session, comment_id: int) -> Comment:
    comment = db.query(Comment)\
        .options(joinedload(Comment.user))\
        .filter(Comment.id == comment_id)\
        .first()
    if not comment:
        raise NotFound("Comment not found")
    return comment


def create_comment(db: Session, actor_id: Optional[int], post_id: int, raw_content) -> Comment:
    require_actor(actor_id)
    # rejected before any query runs
    content = clean_content(raw_content)
    get_post(db, post_id)

    comment = Comment(user_id=actor_id, post_id=post_id, content=content)
    try:
        db.add(comment)
        db.flush()
        bump_counter(db, post_id, Post.comments_count, 1)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not post_exists(db, post_id):
            raise NotFound("Post not found")
        logging.error(f"Integrity error while commenting on post {post_id}: {str(e)}")
        raise Internal("Failed to create comment")
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error while commenting on post {post_id}: {str(e)}")
        raise Internal("Failed to create comment")
    return get_comment(db, comment.id)


def list_comments(db: Session, post_id: int):
    """Comments on a post, oldest first; id breaks timestamp ties."""
    get_post(db, post_id)
    return db.query(Comment)\
        .options(joinedload(Comment.user))\
        .filter(Comment.post_id == post_id)\
        .order_by(Comment.created_at.asc(), Comment.id.asc())\
        .all()


def delete_comment(db: Session, actor_id: Optional[int], comment_id: int):
    require_actor(actor_id)
    comment = db.query(Comment)\
        .options(joinedload(Comment.post))\
        .filter(Comment.id == comment_id)\
        .first()
    if not comment:
        raise NotFound("Comment not found")
    ensure_can_delete_comment(actor_id, comment, comment.post.user_id)

    post_id = comment.post_id
    try:
        removed = db.query(Comment).filter(Comment.id == comment_id).delete(synchronize_session=False)
        if removed:
            bump_counter(db, post_id, Post.comments_count, -1)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error while deleting comment {comment_id}: {str(e)}")
        raise Internal("Failed to delete comment")
