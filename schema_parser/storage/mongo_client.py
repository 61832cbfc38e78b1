# ==============================================
# MongoClient
# ==============================================
#
# PURPOSE:
#   Manages the MongoDB connection used to pull documents whose schema
#   we want to infer. Read-only: sample or find, nothing is written.
#
# CLASS: MongoClient
# ------------------
#   Stateful: holds connection to MongoDB.
#
#   Constructor:
#   ------------
#   - __init__(host, port, database, user=None, password=None)
#
#   Methods:
#   --------
#   - connect() -> None
#       Establish connection and ping the server.
#
#   - disconnect() -> None
#       Close connection.
#
#   - sample(collection_name: str, size: int) -> list[dict]
#       Random documents via the server's $sample stage.
#
#   - find(collection_name: str, query: dict | None, limit: int) -> list[dict]
#       Documents matching a filter (limit 0 = no limit).
#
#   Context Manager:
#   ----------------
#   - __enter__ / __exit__ for `with MongoClient(...) as db:` usage.
#
# ==============================================

import logging
from typing import Any, Dict, List, Optional

from pymongo import MongoClient as PyMongoClient
from pymongo.errors import ConnectionFailure, OperationFailure

logger = logging.getLogger(__name__)


class MongoClient:
    def __init__(self, host, port, database, user=None, password=None):
        # Store connection params. Don't connect yet.
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self.client = None  # Will hold the actual MongoDB client connection

    def connect(self):
        # Establish connection to MongoDB.
        if self.user and self.password:
            uri = f"mongodb://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"
        else:
            uri = f"mongodb://{self.host}:{self.port}/{self.database}"
        try:
            self.client = PyMongoClient(uri)
            # Test connection
            self.client.admin.command('ping')
            logger.info("Connected to MongoDB at %s:%s", self.host, self.port)
        except ConnectionFailure as e:
            logger.error("Could not connect to MongoDB: %s", e)
            raise
        except OperationFailure as e:
            logger.error("Authentication failed: %s", e)
            raise

    def disconnect(self):
        # Close connection.
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB.")
            self.client = None

    def sample(self, collection_name: str, size: int) -> List[Dict[str, Any]]:
        """
        Pull random documents from a collection.

        Args:
            collection_name: Collection to read
            size: Number of documents to ask $sample for

        Returns:
            The sampled documents (fewer if the collection is smaller)
        """
        collection = self._collection(collection_name)
        documents = list(collection.aggregate([{"$sample": {"size": size}}]))
        logger.info("Sampled %d documents from '%s'", len(documents), collection_name)
        return documents

    def find(
        self,
        collection_name: str,
        query: Optional[Dict[str, Any]] = None,
        limit: int = 0
    ) -> List[Dict[str, Any]]:
        # Query documents matching filter.
        collection = self._collection(collection_name)
        return list(collection.find(query or {}, limit=limit))

    def _collection(self, collection_name: str):
        if not self.client:
            raise RuntimeError("Not connected to MongoDB.")
        return self.client[self.database][collection_name]

    def __enter__(self):
        # For `with MongoClient(...) as db:` usage.
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
