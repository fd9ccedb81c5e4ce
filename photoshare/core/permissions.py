"""Authorization rules for posts, likes and comments.

Reads (feed, posts, likes, comments) are public and need no check. Every
function here is pure: it only looks at the actor id and the entity it is
handed. Callers resolve the entity first so that a missing row is reported
as ``NotFound`` before any permission check runs. A row that exists but
belongs to someone else is always reported as ``Forbidden``.
"""
from typing import Optional
from photoshare.core.errors import Forbidden, Unauthorized


def can_mutate_post(actor_id: Optional[int], post) -> bool:
    return actor_id is not None and post.user_id == actor_id


def can_delete_comment(actor_id: Optional[int], comment, post_owner_id: int) -> bool:
    """Comment authors and the owner of the commented post may delete."""
    if actor_id is None:
        return False
    return comment.user_id == actor_id or post_owner_id == actor_id


def require_actor(actor_id: Optional[int]) -> int:
    if actor_id is None:
        raise Unauthorized()
    return actor_id


def ensure_can_mutate_post(actor_id: Optional[int], post, action="modify"):
    require_actor(actor_id)
    if not can_mutate_post(actor_id, post):
        raise Forbidden(f"Not authorized to {action} this post")


def ensure_can_delete_comment(actor_id: Optional[int], comment, post_owner_id: int):
    require_actor(actor_id)
    if not can_delete_comment(actor_id, comment, post_owner_id):
        raise Forbidden("Not authorized to delete this comment")
