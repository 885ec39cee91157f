"""MongoDB implementation of RegistryStore using motor (async driver)."""

import logging
from typing import Any, Mapping, Optional

from bson.errors import InvalidDocument
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pydantic import ValidationError
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, OperationFailure, PyMongoError

from blacklist_registry.exceptions import (
    DuplicatePosition,
    EntryNotFound,
    FieldError,
    SchemaViolation,
    StoreUnavailable,
)
from blacklist_registry.models import Entry
from blacklist_registry.storage.base import ensure_unique_ordered

logger = logging.getLogger(__name__)

POSITION_INDEX = "position_unique"

# Raised by BSON encoding, outside the PyMongoError hierarchy.
ENCODING_ERRORS = (OverflowError, InvalidDocument)


class MongoRegistryStore:
    """MongoDB implementation of RegistryStore.

    Documents are stored in their persisted shape ``{position, name, status}``;
    Mongo's own ``_id`` is never exposed. A unique index on ``position`` makes
    a single append atomic with respect to position uniqueness.

    Args:
        uri: MongoDB connection URI
        database: Database name
        collection: Collection name (default: "blacklist")
        timeout_ms: Server selection timeout in milliseconds

    Example:
        ```python
        store = MongoRegistryStore(uri="mongodb://localhost:27017", database="blacklist")
        await store.startup()
        await store.append(Entry(position=5, name="", status="redacted"))
        entries = await store.list_all()
        await store.shutdown()
        ```
    """

    def __init__(
        self,
        uri: str,
        database: str,
        collection: str = "blacklist",
        timeout_ms: int = 5000,
    ) -> None:
        self.uri = uri
        self.database_name = database
        self.collection_name = collection
        self.timeout_ms = timeout_ms
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None

    async def startup(self) -> None:
        """Connect, ping, and ensure the unique index on ``position``.

        If the index cannot be built because stored data already repeats a
        position, startup continues; reads will raise ``DuplicatePosition``.

        Raises:
            StoreUnavailable: If unable to connect to MongoDB
        """
        try:
            self._client = AsyncIOMotorClient(self.uri, serverSelectionTimeoutMS=self.timeout_ms)
            self._db = self._client[self.database_name]
            await self._client.admin.command("ping")
            logger.info(f"Connected to MongoDB database '{self.database_name}'")
        except PyMongoError as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise StoreUnavailable(f"Unable to connect to MongoDB at {self.uri}") from e

        try:
            await self._db[self.collection_name].create_index(
                [("position", ASCENDING)], unique=True, name=POSITION_INDEX
            )
            logger.info(f"Ensured unique position index on {self.collection_name}")
        except OperationFailure as e:
            logger.error(f"Could not create unique position index on {self.collection_name}: {e}")
        except PyMongoError as e:
            raise StoreUnavailable(f"Failed to prepare collection {self.collection_name}") from e

    async def shutdown(self) -> None:
        """Close the MongoDB connection. Safe to call multiple times."""
        if self._client:
            self._client.close()
            self._client = None
            self._db = None
            logger.info("Closed MongoDB connection")

    @property
    def collection(self) -> AsyncIOMotorCollection:
        if self._db is None:
            raise RuntimeError("Storage not initialized. Call startup() first.")
        return self._db[self.collection_name]

    def _to_model(self, doc: Mapping[str, Any]) -> Entry:
        """Convert a MongoDB document to an Entry.

        Raises:
            StoreUnavailable: If the document does not decode into an Entry
        """
        data = dict(doc)
        data.pop("_id", None)
        try:
            return Entry.model_validate(data)
        except ValidationError as e:
            # Only the position is logged; the name may belong to a redacted entry.
            logger.error(f"Undecodable registry document at position {data.get('position')!r}: {e}")
            raise StoreUnavailable("Registry store returned a malformed document") from e

    async def append(self, entry: Entry) -> Entry:
        try:
            await self.collection.insert_one(entry.to_document())
        except DuplicateKeyError as e:
            raise DuplicatePosition(entry.position) from e
        except ENCODING_ERRORS as e:
            logger.warning(f"Entry at position {entry.position} cannot be encoded: {e}")
            raise SchemaViolation(
                [FieldError("/position", "cannot be stored as a 64-bit integer")]
            ) from e
        except PyMongoError as e:
            logger.error(f"Failed to append entry at position {entry.position}: {e}")
            raise StoreUnavailable(f"Failed to append entry at position {entry.position}") from e
        logger.debug(f"Appended entry at position {entry.position}")
        return entry

    async def list_all(self) -> list[Entry]:
        try:
            cursor = self.collection.find({}, {"_id": 0}).sort("position", ASCENDING)
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Failed to list registry entries: {e}")
            raise StoreUnavailable("Failed to list registry entries") from e

        entries = [self._to_model(doc) for doc in docs]
        try:
            return ensure_unique_ordered(entries)
        except DuplicatePosition:
            logger.error("Registry collection holds a duplicate position")
            raise
        except ValueError as e:
            raise StoreUnavailable(f"Registry store returned entries out of order: {e}") from e

    async def get(self, position: int) -> Optional[Entry]:
        """Return the entry at ``position``; None also for positions BSON cannot encode."""
        try:
            doc = await self.collection.find_one({"position": position}, {"_id": 0})
        except ENCODING_ERRORS:
            logger.debug(f"Lookup for unencodable position {position}")
            return None
        except PyMongoError as e:
            raise StoreUnavailable(f"Failed to read entry at position {position}") from e
        return self._to_model(doc) if doc else None

    async def update(self, position: int, patch: Mapping[str, Any]) -> Entry:
        try:
            doc = await self.collection.find_one_and_update(
                {"position": position},
                {"$set": dict(patch)},
                projection={"_id": 0},
                return_document=ReturnDocument.AFTER,
            )
        except ENCODING_ERRORS as e:
            raise EntryNotFound(position) from e
        except PyMongoError as e:
            logger.error(f"Failed to update entry at position {position}: {e}")
            raise StoreUnavailable(f"Failed to update entry at position {position}") from e
        if doc is None:
            raise EntryNotFound(position)
        return self._to_model(doc)
