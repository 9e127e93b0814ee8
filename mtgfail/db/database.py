"""
Document store wiring.

One async engine per process, shared by the API and the sync job through
`get_document_store`.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from mtgfail.config import settings
from mtgfail.db.document_store import DocumentStore, SqlDocumentStore
from mtgfail.models.db import Base

logger = logging.getLogger(__name__)

engine: AsyncEngine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def get_document_store() -> DocumentStore:
    """Card document store on the configured database, a FastAPI dependency."""
    return SqlDocumentStore(async_session_factory)


async def init_db() -> None:
    """Create the documents table if it does not exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Document store ready at %s", engine.url.render_as_string(hide_password=True))
