# backoffice/data/database.py
from sqlalchemy import JSON, create_engine, event
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import sessionmaker, declarative_base

from backoffice.utils.settings import DATABASE_URL


def make_engine(url: str):
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True, future=True)

    # sesje z różnych wątków (TestClient, celery eager)
    sqlite_engine = create_engine(
        url,
        future=True,
        connect_args={"check_same_thread": False, "timeout": 15},
    )

    @event.listens_for(sqlite_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# dokument JSON w kolumnie "data" (JSONB na postgresie)
Document = JSON().with_variant(JSONB(), "postgresql")
