import logging
import psycopg2
from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from photoshare.core.config import DATABASE_URL


def create_database_if_missing(url=DATABASE_URL):
    # Try to create the DB if it doesn't exist
    db_url = make_url(url)
    if not db_url.drivername.startswith("postgresql"):
        return
    try:
        conn = psycopg2.connect(
            dbname="postgres",
            user=db_url.username,
            password=db_url.password,
            host=db_url.host,
            port=db_url.port,
        )
        conn.autocommit = True
        cur = conn.cursor()
        cur.execute(f'CREATE DATABASE "{db_url.database}"')
        cur.close()
        conn.close()
    except psycopg2.errors.DuplicateDatabase:
        pass
    except psycopg2.Error as e:
        logging.warning(f"Could not create database {db_url.database}: {e}")


def enable_sqlite_foreign_keys(engine):
    # SQLite ignores ON DELETE CASCADE unless the pragma is set per connection
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url=DATABASE_URL, **kwargs):
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    engine = create_engine(url, **kwargs)
    enable_sqlite_foreign_keys(engine)
    return engine


# Setup SQLAlchemy engine
engine = build_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
