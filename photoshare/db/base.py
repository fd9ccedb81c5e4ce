from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow():
    # Naive UTC so SQLite and PostgreSQL compare timestamps the same way
    return datetime.now(timezone.utc).replace(tzinfo=None)
