"""Print BMI row count and vector collection status for the configured environment."""

import asyncio

from sqlalchemy import text

from app.core.config import get_settings
from app.db.session import async_session_maker, engine
from app.db.vector_store import create_qdrant_client


async def check_data():
    settings = get_settings()
    async with async_session_maker() as session:
        try:
            result = await session.execute(text("SELECT count(*) FROM bmi_records"))
            count = result.scalar()
            print(f"Table 'bmi_records' row count: {count}")
            if count:
                sample = await session.execute(
                    text("SELECT id, height, weight, value FROM bmi_records ORDER BY id LIMIT 1")
                )
                print(f"  First row: {tuple(sample.one())}")
        except Exception as e:
            print(f"Error querying bmi_records: {e}")

    if not settings.vector_store_enabled:
        print("Vector store disabled (VECTOR_STORE_ENABLED=false)")
    else:
        client = create_qdrant_client(settings.qdrant_url, settings.qdrant_api_key)
        try:
            if await client.collection_exists(settings.qdrant_collection):
                info = await client.count(settings.qdrant_collection)
                print(f"Collection '{settings.qdrant_collection}' point count: {info.count}")
            else:
                print(f"Collection '{settings.qdrant_collection}' does not exist")
        except Exception as e:
            print(f"Error querying vector store: {e}")
        finally:
            await client.close()

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(check_data())
