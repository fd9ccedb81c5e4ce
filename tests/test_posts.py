import pytest

from photoshare.core.errors import Forbidden, InvalidArgument, NotFound, Unauthorized
from photoshare.crud import comment as comment_crud
from photoshare.crud import like as like_crud
from photoshare.crud import post as post_crud
from photoshare.db.models.comment import Comment
from photoshare.db.models.like import Like


def test_create_post_keeps_caption_as_given(db, make_user):
    owner = make_user("owner")
    post = post_crud.create_post(db, owner.id, "/uploads/a.jpg", "  spaced caption")
    assert post.caption == "  spaced caption"
    assert post.user_id == owner.id
    assert post.likes_count == 0
    assert post.comments_count == 0


def test_create_post_requires_media_and_actor(db, make_user):
    owner = make_user("owner")
    with pytest.raises(InvalidArgument):
        post_crud.create_post(db, owner.id, "")
    with pytest.raises(Unauthorized):
        post_crud.create_post(db, None, "/uploads/a.jpg")


def test_owner_updates_caption_only(db, make_user):
    owner = make_user("owner")
    post = post_crud.create_post(db, owner.id, "/uploads/a.jpg", "old")

    updated = post_crud.update_post(db, owner.id, post.id, "new")
    assert updated.caption == "new"
    assert updated.image_url == "/uploads/a.jpg"

    cleared = post_crud.update_post(db, owner.id, post.id, None)
    assert cleared.caption is None


def test_non_owner_cannot_update_or_delete(db, make_user):
    owner = make_user("owner")
    stranger = make_user("stranger")
    post = post_crud.create_post(db, owner.id, "/uploads/a.jpg", "mine")

    with pytest.raises(Forbidden):
        post_crud.update_post(db, stranger.id, post.id, "hijacked")
    with pytest.raises(Forbidden):
        post_crud.delete_post(db, stranger.id, post.id)

    db.expire_all()
    assert post_crud.get_post(db, post.id).caption == "mine"


def test_missing_post_is_not_found(db, make_user):
    owner = make_user("owner")
    with pytest.raises(NotFound):
        post_crud.update_post(db, owner.id, 404, "x")
    with pytest.raises(NotFound):
        post_crud.delete_post(db, owner.id, 404)


def test_delete_cascades_to_likes_and_comments(db, make_user):
    owner = make_user("owner")
    fans = [make_user(f"fan{i}") for i in range(3)]
    post = post_crud.create_post(db, owner.id, "/uploads/a.jpg")
    keep = post_crud.create_post(db, owner.id, "/uploads/b.jpg")

    for fan in fans:
        like_crud.toggle_like(db, fan.id, post.id)
        comment_crud.create_comment(db, fan.id, post.id, f"from {fan.username}")
    comment_crud.create_comment(db, fans[0].id, keep.id, "stays")
    like_ids = [like.id for like in db.query(Like).filter(Like.post_id == post.id).all()]
    comment_ids = [c.id for c in db.query(Comment).filter(Comment.post_id == post.id).all()]
    assert len(like_ids) == 3 and len(comment_ids) == 3

    post_id = post.id
    post_crud.delete_post(db, owner.id, post_id)

    with pytest.raises(NotFound):
        post_crud.get_post(db, post_id)
    for like_id in like_ids:
        with pytest.raises(NotFound):
            like_crud.get_like(db, like_id)
    for comment_id in comment_ids:
        with pytest.raises(NotFound):
            comment_crud.get_comment(db, comment_id)
    assert [c.content for c in comment_crud.list_comments(db, keep.id)] == ["stays"]


def test_end_to_end_scenario(client, auth_headers):
    alice = auth_headers("alice")
    bob = auth_headers("bob")

    response = client.post("/api/posts", json={"image": "/uploads/p.jpg", "caption": "hello"}, headers=alice)
    assert response.status_code == 201
    post_id = response.json()["id"]

    assert client.post(f"/api/posts/{post_id}/like", headers=bob).json() == {"liked": True, "like_count": 1}
    assert client.get(f"/api/posts/{post_id}/like", headers=bob).json()["liked"] is True
    assert client.get(f"/api/posts/{post_id}/like", headers=alice).json()["liked"] is False

    comment = client.post(f"/api/posts/{post_id}/comments", json={"content": "nice!"}, headers=bob).json()
    listing = client.get(f"/api/posts/{post_id}/comments").json()
    assert [c["content"] for c in listing["comments"]] == ["nice!"]

    # keep a like around so there is something to cascade; ids start at 1 in a fresh database
    client.post(f"/api/posts/{post_id}/like", headers=alice)
    bob_like_id, alice_like_id = 1, 2
    assert client.get(f"/api/likes/{alice_like_id}").json()["post_id"] == post_id
    detail = client.get(f"/api/posts/{post_id}", headers=alice).json()
    assert detail["liked"] is True
    assert detail["likes_count"] == 2
    assert [c["content"] for c in detail["comments"]] == ["nice!"]

    assert client.post(f"/api/posts/{post_id}/like", headers=bob).json() == {"liked": False, "like_count": 1}
    assert client.get(f"/api/likes/{bob_like_id}").status_code == 404

    assert client.delete(f"/api/posts/{post_id}", headers=bob).status_code == 403
    assert client.delete(f"/api/posts/{post_id}", headers=alice).status_code == 200

    assert client.get(f"/api/posts/{post_id}").status_code == 404
    assert client.get(f"/api/likes/{alice_like_id}").status_code == 404
    assert client.get(f"/api/comments/{comment['id']}").status_code == 404
    assert client.get(f"/api/posts/{post_id}/comments").status_code == 404


def test_update_api(client, auth_headers):
    alice = auth_headers("alice")
    bob = auth_headers("bob")
    post_id = client.post("/api/posts", json={"image": "/uploads/p.jpg", "caption": "hello"}, headers=alice).json()["id"]

    response = client.patch(f"/api/posts/{post_id}", json={"caption": "edited"}, headers=bob)
    assert response.status_code == 403
    assert response.json()["detail"] == "Not authorized to edit this post"

    response = client.patch(f"/api/posts/{post_id}", json={"caption": "edited"}, headers=alice)
    assert response.status_code == 200
    assert response.json()["caption"] == "edited"
    assert response.json()["image_url"] == "/uploads/p.jpg"

    assert client.post("/api/posts", json={"image": ""}, headers=alice).status_code == 400
    assert client.post("/api/posts", json={"image": "/uploads/p.jpg"}).status_code == 401


@pytest.mark.parametrize("path", [
    "/api/posts/99999999999999999999999",
    "/api/posts/99999999999999999999999/like",
    "/api/posts/99999999999999999999999/comments",
    "/api/likes/99999999999999999999999",
    "/api/comments/99999999999999999999999",
    "/api/posts/0",
])
def test_out_of_range_ids_are_rejected(client, path):
    assert client.get(path).status_code == 422


def test_largest_id_is_not_found(client):
    assert client.get(f"/api/posts/{2**63 - 1}").status_code == 404
