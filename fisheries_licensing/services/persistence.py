# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Persistence backends for the entity store.

A backend offers get, put and delete by entity id. The store writes through
to it on every mutation and reads through it when an id is not cached.
"""

import os
import logging
from typing import Any, Dict, Optional
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError, PyMongoError

from ..models.base import BaseEntity
from ..models.entities import ENTITY_TYPES

logger = logging.getLogger(__name__)


def entity_from_document(document: Dict[str, Any]) -> BaseEntity:
    """Rebuild an entity from a stored document."""
    document = dict(document)
    entity_type = document.pop("entity_type", None)
    model = ENTITY_TYPES.get(entity_type)
    if model is None:
        raise ValueError(f"Unknown entity type in document: {entity_type}")

    if "_id" in document:
        document["id"] = str(document.pop("_id"))

    return model.model_validate(document)


class InMemoryBackend:
    """Backend keeping serialized documents in a dict."""

    def __init__(self):
        self.documents: Dict[str, Dict[str, Any]] = {}

    def get(self, entity_id: str) -> Optional[BaseEntity]:
        document = self.documents.get(entity_id)
        return entity_from_document(document) if document else None

    def put(self, entity: BaseEntity) -> None:
        self.documents[entity.id] = entity.to_document()

    def delete(self, entity_id: str) -> bool:
        return self.documents.pop(entity_id, None) is not None


class MongoPersistenceBackend:
    """MongoDB backend storing every entity type in one collection."""

    def __init__(
        self,
        connection_string: str = None,
        database_name: str = None,
        collection_name: str = None,
        collection: Optional[Collection] = None
    ):
        """Initialize MongoDB backend; the client connects lazily."""
        self.connection_string = connection_string or os.getenv(
            'MONGODB_URI',
            'mongodb://localhost:27017/fisheries_licensing'
        )
        self.database_name = database_name or os.getenv('MONGODB_DATABASE', 'fisheries_licensing')
        self.collection_name = collection_name or os.getenv('MONGODB_COLLECTION', 'entities')
        self.server_selection_timeout_ms = int(os.getenv('MONGODB_SERVER_SELECTION_TIMEOUT_MS', '5000'))
        self._client: Optional[MongoClient] = None
        self._collection = collection

        logger.info(f"MongoDB backend initialized for {self.database_name}.{self.collection_name}")

    @property
    def client(self) -> MongoClient:
        """Get MongoDB client, connecting on first use."""
        if self._client is None:
            try:
                self._client = MongoClient(
                    self.connection_string,
                    serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                    retryWrites=True,
                    retryReads=True
                )
                # Test connection
                self._client.admin.command('ping')
                logger.info("MongoDB connection established successfully")
            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                logger.error(f"Failed to connect to MongoDB: {e}")
                raise

        return self._client

    @property
    def collection(self) -> Collection:
        if self._collection is None:
            self._collection = self.client[self.database_name][self.collection_name]
        return self._collection

    def close_connection(self) -> None:
        """Close MongoDB connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._collection = None
            logger.info("MongoDB connection closed")

    def get(self, entity_id: str) -> Optional[BaseEntity]:
        """Load an entity by id."""
        try:
            document = self.collection.find_one({"_id": entity_id})
        except PyMongoError as e:
            logger.error(f"Failed to load entity {entity_id}: {e}")
            raise

        if document is None:
            logger.debug(f"Entity {entity_id} not found in {self.collection_name}")
            return None

        return entity_from_document(document)

    def put(self, entity: BaseEntity) -> None:
        """Insert or replace an entity document."""
        document = entity.to_document()
        document["_id"] = document.pop("id")

        try:
            self.collection.replace_one({"_id": entity.id}, document, upsert=True)
            logger.debug(f"Stored {entity.entity_type} {entity.id}")
        except PyMongoError as e:
            logger.error(f"Failed to store {entity.entity_type} {entity.id}: {e}")
            raise

    def delete(self, entity_id: str) -> bool:
        """Delete an entity document; False if nothing was removed."""
        try:
            result = self.collection.delete_one({"_id": entity_id})
        except PyMongoError as e:
            logger.error(f"Failed to delete entity {entity_id}: {e}")
            raise

        if result.deleted_count > 0:
            logger.info(f"Deleted entity {entity_id} from {self.collection_name}")
            return True

        logger.warning(f"No document deleted for {entity_id}")
        return False


def create_backend(settings) -> Optional[Any]:
    """Build the configured backend; None keeps the store memory-only."""
    if settings.mongodb_uri:
        return MongoPersistenceBackend(
            settings.mongodb_uri,
            settings.mongodb_database,
            settings.mongodb_collection
        )
    return None
