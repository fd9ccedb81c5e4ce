import inspect
import io
import os

import pytest
from fastapi import UploadFile

from photoshare.api.v1.user import update_profile_picture
from photoshare.core.blob_store import BlobStore, LocalBlobStore, read_upload, validate_image
from photoshare.routers.upload import upload_image
from photoshare.core.config import MAX_UPLOAD_SIZE
from photoshare.core.errors import InvalidArgument, PayloadTooLarge

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.mark.parametrize("content_type", ["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"])
def test_allowed_types(content_type):
    validate_image(PNG, content_type)


def test_rejects_bad_type_empty_and_oversized():
    with pytest.raises(InvalidArgument):
        validate_image(PNG, "application/pdf")
    with pytest.raises(InvalidArgument):
        validate_image(b"", "image/png")
    with pytest.raises(PayloadTooLarge):
        validate_image(b"\x00" * (MAX_UPLOAD_SIZE + 1), "image/png")


def test_local_store_writes_file(upload_dir):
    store = LocalBlobStore(upload_dir)
    path = store.store(PNG, "image/png")

    assert path.startswith("/uploads/post_images/")
    assert path.endswith(".png")
    with open(os.path.join(upload_dir, "post_images", os.path.basename(path)), "rb") as fh:
        assert fh.read() == PNG


def test_upload_api(client, auth_headers, upload_dir):
    headers = auth_headers("alice")

    response = client.post("/api/upload", files={"file": ("a.png", PNG, "image/png")}, headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["size"] == len(PNG)
    assert body["type"] == "image/png"

    post = client.post("/api/posts", json={"image": body["url"]}, headers=headers).json()
    assert post["image_url"] == body["url"]

    response = client.post("/api/upload", files={"file": ("a.txt", b"hello", "text/plain")}, headers=headers)
    assert response.status_code == 400

    big = b"\x00" * (MAX_UPLOAD_SIZE + 1)
    response = client.post("/api/upload", files={"file": ("big.png", big, "image/png")}, headers=headers)
    assert response.status_code == 413

    assert client.post("/api/upload", files={"file": ("a.png", PNG, "image/png")}).status_code == 401


def test_avatar_api(client, auth_headers):
    headers = auth_headers("alice")
    response = client.put("/api/users/me/avatar", files={"profile_picture": ("me.jpg", PNG, "image/jpeg")}, headers=headers)
    assert response.status_code == 200
    assert response.json()["profile_picture"].startswith("/uploads/profile_pics/")


def test_read_upload_rejects_declared_size_before_reading():
    body = io.BytesIO(PNG)
    upload = UploadFile(file=body, size=MAX_UPLOAD_SIZE + 1)
    with pytest.raises(PayloadTooLarge):
        read_upload(upload)
    assert body.tell() == 0


def test_read_upload_stops_past_the_cap():
    upload = UploadFile(file=io.BytesIO(b"\x00" * (MAX_UPLOAD_SIZE * 2)))
    data = read_upload(upload)
    assert len(data) == MAX_UPLOAD_SIZE + 1
    with pytest.raises(PayloadTooLarge):
        validate_image(data, "image/png")


def test_upload_handlers_run_in_threadpool():
    # FastAPI runs plain def handlers in its threadpool
    assert not inspect.iscoroutinefunction(upload_image)
    assert not inspect.iscoroutinefunction(update_profile_picture)


def test_blob_store_is_abstract():
    with pytest.raises(TypeError):
        BlobStore()
