import logging
import os
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from photoshare.api.v1 import auth, user
from photoshare.core.config import DATABASE_URL, LOG_LEVEL, UPLOAD_DIR, UPLOAD_URL_PREFIX
from photoshare.core.errors import register_exception_handlers
from photoshare.db.base import Base
from photoshare.db.session import engine, create_database_if_missing
from photoshare.db.models import user as user_model, post as post_model, like as like_model, comment as comment_model  # noqa: F401
from photoshare.routers import post
from photoshare.routers import like
from photoshare.routers import comment
from photoshare.routers import upload

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

create_database_if_missing(DATABASE_URL)
Base.metadata.create_all(bind=engine)

app = FastAPI(title="Photoshare API")
register_exception_handlers(app)

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(user.router, prefix="/api/users", tags=["Users"])
app.include_router(post.router, prefix="/api/posts", tags=["Posts"])
app.include_router(like.router, prefix="/api")
app.include_router(comment.router, prefix="/api")
app.include_router(upload.router, prefix="/api/upload", tags=["Upload"])

# Local uploads (used when Cloudinary is not configured)
os.makedirs(UPLOAD_DIR, exist_ok=True)
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=UPLOAD_DIR), name="uploads")
