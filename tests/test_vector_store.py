"""QdrantBMIStore against the in-process Qdrant client."""

import pytest

from app.core.exceptions import StorageError
from app.db.vector_store import QdrantBMIStore, create_qdrant_client


async def test_create_collection_is_idempotent(qdrant_store):
    await qdrant_store.create_collection()

    info = await qdrant_store.client.get_collection(qdrant_store.collection_name)
    assert info.config.params.vectors.size == 3


async def test_upsert_then_nearest_neighbors(qdrant_store):
    await qdrant_store.upsert(1, [1.70, 70.0, 24.22], {"category": "a", "risk": "b", "created_at": "x"})
    await qdrant_store.upsert(2, [1.60, 45.0, 17.58], {"category": "c", "risk": "d", "created_at": "y"})

    matches = await qdrant_store.nearest_neighbors([1.70, 70.0, 24.22])

    assert [m.id for m in matches] == [1, 2]
    assert matches[0].score == pytest.approx(1.0, abs=1e-4)
    assert matches[0].score >= matches[1].score
    assert matches[0].payload == {"category": "a", "risk": "b", "created_at": "x"}


async def test_upsert_replaces_existing_point(qdrant_store):
    await qdrant_store.upsert(7, [1.70, 70.0, 24.22], {"category": "old"})
    await qdrant_store.upsert(7, [1.70, 70.0, 24.22], {"category": "new"})

    matches = await qdrant_store.nearest_neighbors([1.70, 70.0, 24.22])

    assert len(matches) == 1
    assert matches[0].payload["category"] == "new"


async def test_nearest_neighbors_limit(qdrant_store):
    for i in range(1, 13):
        await qdrant_store.upsert(i, [1.5 + i / 100, 50.0 + i, 20.0 + i / 10], {})

    matches = await qdrant_store.nearest_neighbors([1.6, 60.0, 21.0])

    assert len(matches) == 10


async def test_missing_collection_raises_storage_error():
    client = create_qdrant_client(":memory:")
    store = QdrantBMIStore(client, "does_not_exist")
    try:
        with pytest.raises(StorageError, match="failed to upsert point"):
            await store.upsert(1, [1.0, 1.0, 1.0], {})
        with pytest.raises(StorageError, match="failed to query points"):
            await store.nearest_neighbors([1.0, 1.0, 1.0])
        with pytest.raises(StorageError, match="vector store unavailable") as exc_info:
            await store.collection_info()
        assert exc_info.value.detail
    finally:
        await client.close()


async def test_collection_info(qdrant_store):
    await qdrant_store.upsert(1, [1.70, 70.0, 24.22], {})
    await qdrant_store.upsert(2, [1.60, 45.0, 17.58], {})

    info = await qdrant_store.collection_info()

    assert info["name"] == "bmi_records_test"
    assert info["points_count"] == 2
    assert info["vector_size"] == 3
    assert info["distance"] == "Cosine"
