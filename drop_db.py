"""Drop all tables (and the vector collection when enabled). Destructive: dev use only."""

import asyncio

from sqlalchemy import text

from app.core.config import get_settings
from app.db.base import Base
from app.db.session import engine
from app.db.vector_store import create_qdrant_client
from app.models import BMIRecord  # noqa: F401


async def drop_tables():
    settings = get_settings()
    print("Dropping all tables...")
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE IF EXISTS alembic_version"))
        await conn.run_sync(Base.metadata.drop_all)
    print("Tables dropped.")
    await engine.dispose()

    if settings.vector_store_enabled:
        client = create_qdrant_client(settings.qdrant_url, settings.qdrant_api_key)
        try:
            if await client.collection_exists(settings.qdrant_collection):
                await client.delete_collection(settings.qdrant_collection)
                print(f"Collection '{settings.qdrant_collection}' deleted.")
        finally:
            await client.close()


if __name__ == "__main__":
    asyncio.run(drop_tables())
