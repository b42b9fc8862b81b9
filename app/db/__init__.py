"""Database package: engine, session, stores."""

from app.db.bmi_store import SQLBMIStore
from app.db.session import async_session_maker, get_db
from app.db.vector_store import QdrantBMIStore, create_qdrant_client

__all__ = [
    "QdrantBMIStore",
    "SQLBMIStore",
    "async_session_maker",
    "create_qdrant_client",
    "get_db",
]
