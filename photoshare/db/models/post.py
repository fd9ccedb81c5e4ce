from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Index
from sqlalchemy.orm import relationship
from photoshare.db.base import Base, utcnow

class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = Column(String, nullable=False)
    caption = Column(Text, nullable=True)
    likes_count = Column(Integer, default=0, server_default="0", nullable=False)
    comments_count = Column(Integer, default=0, server_default="0", nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="posts")
    likes = relationship("Like", back_populates="post", cascade="all, delete-orphan", passive_deletes=True)
    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan", passive_deletes=True)

    # feed order: newest first, id breaks timestamp ties
    __table_args__ = (Index("ix_posts_created_at_id", "created_at", "id"), {"sqlite_autoincrement": True})
