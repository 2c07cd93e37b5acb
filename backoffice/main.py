# backoffice/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from backoffice.api import create_app
from backoffice.data.database import Base, engine
from backoffice.data.seed import seed
from backoffice.utils.logging import get_logger

# import wszystkich modeli przed create_all
import backoffice.data.models  # noqa: F401

logger = get_logger(__name__)


def init_db():
    logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    seed()
    logger.info("Database ready")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield
    logger.info("Back office shutting down")


app = create_app(lifespan=lifespan)

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
