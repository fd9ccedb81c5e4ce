"""Cursor pagination over the post feed.

Posts are ordered newest first by ``(created_at, id)``. A cursor is an opaque
token holding the ``(created_at, id)`` of the last post on a page, and the
next page starts strictly after it in that order. Posts created after the
first page was fetched sort ahead of every cursor, so they show up on a
refresh from the top and never shift a page that is being continued.
"""
import base64
import json
from binascii import Error as Base64Error
from datetime import datetime
from typing import Optional
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, joinedload
from photoshare.core.config import FEED_DEFAULT_LIMIT, FEED_MAX_LIMIT, MAX_ID
from photoshare.core.errors import InvalidArgument
from photoshare.crud.like import liked_post_ids
from photoshare.db.models.post import Post
from photoshare.schemas.post import PostOut, PostOutWithUserLike


def clamp_limit(raw_limit) -> int:
    # malformed limits are clamped, never rejected
    if raw_limit is None or raw_limit == "":
        return FEED_DEFAULT_LIMIT
    try:
        limit = int(raw_limit)
    except (TypeError, ValueError):
        return FEED_DEFAULT_LIMIT
    return max(1, min(limit, FEED_MAX_LIMIT))


def encode_cursor(post: Post) -> str:
    payload = json.dumps({"created_at": post.created_at.isoformat(), "id": post.id})
    return base64.urlsafe_b64encode(payload.encode()).decode().rstrip("=")


def decode_cursor(cursor: str):
    try:
        padded = cursor + "=" * (-len(cursor) % 4)
        payload = json.loads(base64.urlsafe_b64decode(padded.encode()))
        created_at = datetime.fromisoformat(payload["created_at"])
        last_id = int(payload["id"])
    except (Base64Error, UnicodeDecodeError, ValueError, KeyError, TypeError):
        raise InvalidArgument("Invalid cursor")
    if not 1 <= last_id <= MAX_ID:
        raise InvalidArgument("Invalid cursor")
    return created_at, last_id


def with_like_flags(db: Session, posts, actor_id: Optional[int]):
    liked_ids = liked_post_ids(db, actor_id, [post.id for post in posts])
    return [
        PostOutWithUserLike(**PostOut.model_validate(post).model_dump(), liked=post.id in liked_ids)
        for post in posts
    ]


def list_feed(
    db: Session,
    limit=None,
    cursor: Optional[str] = None,
    user_id: Optional[int] = None,
    actor_id: Optional[int] = None,
) -> dict:
    limit = clamp_limit(limit)

    query = db.query(Post).options(joinedload(Post.user))
    if user_id is not None:
        query = query.filter(Post.user_id == user_id)
    if cursor:
        created_at, last_id = decode_cursor(cursor)
        query = query.filter(
            or_(
                Post.created_at < created_at,
                and_(Post.created_at == created_at, Post.id < last_id),
            )
        )

    posts = query.order_by(Post.created_at.desc(), Post.id.desc()).limit(limit).all()

    # a short page means the end of the feed
    next_cursor = encode_cursor(posts[-1]) if len(posts) == limit else None

    return {
        "posts": with_like_flags(db, posts, actor_id),
        "next_cursor": next_cursor,
    }
