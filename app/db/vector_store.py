"""Qdrant-backed vector store for BMI embeddings.

Each BMI record is stored as a point whose id is the relational row id and
whose vector is ``[height, weight, value]`` (cosine distance). The payload
carries the derived category/risk and the creation timestamp.
"""

from __future__ import annotations

import logging
from typing import Any

from qdrant_client import AsyncQdrantClient, models

from app.core.constants import QUERY_RESULT_LIMIT, VECTOR_SIZE
from app.core.exceptions import StorageError
from app.schemas.bmi import ScoredMatch

logger = logging.getLogger(__name__)


class QdrantBMIStore:
    def __init__(self, client: AsyncQdrantClient, collection_name: str) -> None:
        self.client = client
        self.collection_name = collection_name

    async def create_collection(self) -> None:
        """Create the collection unless it already exists."""
        try:
            if await self.client.collection_exists(self.collection_name):
                return
            await self.client.create_collection(
                collection_name=self.collection_name,
                vectors_config=models.VectorParams(size=VECTOR_SIZE, distance=models.Distance.COSINE),
            )
        except Exception as e:
            raise StorageError("failed to create collection", detail=str(e)) from e
        logger.info("Created vector collection %s", self.collection_name)

    async def upsert(self, point_id: int, vector: list[float], payload: dict[str, Any]) -> None:
        point = models.PointStruct(id=point_id, vector=vector, payload=payload)
        try:
            await self.client.upsert(collection_name=self.collection_name, points=[point])
        except Exception as e:
            raise StorageError("failed to upsert point", detail=str(e)) from e

    async def nearest_neighbors(
        self,
        query_vector: list[float],
        limit: int = QUERY_RESULT_LIMIT,
        include_payload: bool = True,
    ) -> list[ScoredMatch]:
        try:
            response = await self.client.query_points(
                collection_name=self.collection_name,
                query=query_vector,
                limit=limit,
                with_payload=include_payload,
            )
        except Exception as e:
            raise StorageError("failed to query points", detail=str(e)) from e
        return [
            ScoredMatch(id=int(p.id), score=p.score, payload=dict(p.payload or {}))
            for p in response.points
        ]

    async def collection_info(self) -> dict[str, Any]:
        """Name, status, point count and vector params of the collection.

        Used by the readiness check: raises StorageError if Qdrant is
        unreachable or the collection is gone.
        """
        try:
            info = await self.client.get_collection(self.collection_name)
        except Exception as e:
            raise StorageError("vector store unavailable", detail=str(e)) from e
        vectors = info.config.params.vectors
        return {
            "name": self.collection_name,
            "status": info.status.value,
            "points_count": info.points_count or 0,
            "vector_size": vectors.size,
            "distance": vectors.distance.value,
        }


def create_qdrant_client(url: str, api_key: str | None = None) -> AsyncQdrantClient:
    """Build the async client. ``url=":memory:"`` gives an in-process store."""
    if url == ":memory:":
        return AsyncQdrantClient(location=":memory:")
    return AsyncQdrantClient(url=url, api_key=api_key or None)
