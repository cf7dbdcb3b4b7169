"""
Showcase API: Record Service
===============================

What:  The five store operations behind every collection's CRUD routes.
How:   A RecordService is bound to one collection name and forwards each call
       straight to the matching MongoDB operation. No validation, no
       business rules, no ordering guarantees beyond what the store gives.
Who:   Instantiated once per collection by the CRUD router factory.

Operation mapping:
    create   → insert_one(fields)
    list_all → find().to_list()
    get      → find_one({_id})
    update   → update_one({_id}, {"$set": fields})
    delete   → delete_one({_id})

Identifiers:
    Path ids are parsed with bson.ObjectId. A malformed id raises
    bson.errors.InvalidId, whose message ends up in the failure envelope.

Serialization:
    Records come back from the driver with ObjectId values (at least `_id`).
    `serialize_record` turns those into hex strings so the documents can be
    returned as plain JSON.
"""

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from fastapi.encoders import jsonable_encoder

from showcase.database import Store
from showcase.schemas.envelope import CreateResult, DeleteResult, UpdateResult

logger = logging.getLogger(__name__)


def parse_object_id(record_id: str) -> ObjectId:
    """Raises bson.errors.InvalidId for anything but a 24-char hex string."""
    return ObjectId(record_id)


def serialize_record(record: Any) -> Any:
    """Make a driver result JSON-ready, rendering every ObjectId as hex."""
    return jsonable_encoder(record, custom_encoder={ObjectId: str})


class RecordService:
    """
    CRUD operations bound to one collection.

    The service holds no connection of its own; each call receives the
    shared Store, so the same instance works for every request.
    """

    def __init__(self, collection_name: str):
        self.collection_name = collection_name

    async def create(self, store: Store, fields: Dict[str, Any]) -> CreateResult:
        """
        Insert a new record holding exactly the submitted fields.

        The driver adds `_id` to the dict it is given, so a copy is inserted
        to keep the caller's payload untouched.
        """
        document = dict(fields)
        result = await store.collection(self.collection_name).insert_one(document)
        logger.info("Inserted %s/%s", self.collection_name, result.inserted_id)
        return CreateResult(inserted_id=str(result.inserted_id))

    async def list_all(self, store: Store) -> List[Dict[str, Any]]:
        cursor = store.collection(self.collection_name).find()
        records = await cursor.to_list()
        return serialize_record(records)

    async def get(self, store: Store, record_id: str) -> Optional[Dict[str, Any]]:
        """Return the record, or None when no record has this id."""
        record = await store.collection(self.collection_name).find_one(
            {"_id": parse_object_id(record_id)}
        )
        if record is None:
            return None
        return serialize_record(record)

    async def update(
        self, store: Store, record_id: str, fields: Dict[str, Any]
    ) -> UpdateResult:
        """
        Merge the submitted fields into the record; other fields are untouched.

        An empty field set is passed through as-is; the server rejects an
        empty $set and that error is reported to the caller.
        """
        result = await store.collection(self.collection_name).update_one(
            {"_id": parse_object_id(record_id)},
            {"$set": fields},
        )
        logger.info(
            "Updated %s/%s (modified=%d)",
            self.collection_name,
            record_id,
            result.modified_count,
        )
        return UpdateResult(modified_count=result.modified_count)

    async def delete(self, store: Store, record_id: str) -> DeleteResult:
        result = await store.collection(self.collection_name).delete_one(
            {"_id": parse_object_id(record_id)}
        )
        logger.info(
            "Deleted %s/%s (deleted=%d)",
            self.collection_name,
            record_id,
            result.deleted_count,
        )
        return DeleteResult(deleted_count=result.deleted_count)
