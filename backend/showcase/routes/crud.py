"""
Showcase API: Generic CRUD Router Factory
============================================

What:  Builds the five record routes for one collection.
How:   `create_crud_router("clients")` returns an APIRouter mounted at
       /api/clients whose handlers close over a RecordService for that
       collection. main.py calls it once per collection.
Who:   Every collection endpoint (subsidiaries, proprietor, certifications,
       clients, gallery).

Routes (per collection):
    POST   /api/<name>        create, optional `image` file  → {success, insertedId}
    GET    /api/<name>        all records, store order       → [record, ...]
    GET    /api/<name>/{id}   one record                     → record | null
    PUT    /api/<name>/{id}   merge fields, optional `image` → {success, modifiedCount}
    DELETE /api/<name>/{id}   remove                         → {success, deletedCount}

Request bodies:
    multipart/form-data, application/x-www-form-urlencoded, or a JSON object.
    Every field is stored verbatim. A field sent more than once becomes a
    list. At most one file, under `image`; it is saved first and its URL is
    stored as `imageUrl`.

Failure policy:
    Every handler catches any exception and answers HTTP 200 with
    {"success": false, "error": "<message>"}. Status codes never signal errors.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from showcase.database import Store, get_store
from showcase.exceptions import UploadError
from showcase.middleware.request_id import request_id_var
from showcase.schemas.envelope import CreateResult, DeleteResult, Failure, UpdateResult
from showcase.services.file_service import IMAGE_FIELD, FileIntake, get_file_intake
from showcase.services.record_service import RecordService

logger = logging.getLogger(__name__)

# Collections exposed under /api/<name>
COLLECTIONS = ("subsidiaries", "proprietor", "certifications", "clients", "gallery")


async def read_submission(request: Request) -> Tuple[Dict[str, Any], Optional[UploadFile]]:
    """
    Split a write request into its plain fields and its optional image.

    Returns:
        (fields, upload) where upload is None when no file was sent.

    Raises:
        UploadError: a file under any field but `image`, or a second file.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        body = await request.body()
        if not body:
            return {}, None
        return await request.json(), None

    if not (
        content_type.startswith("multipart/form-data")
        or content_type.startswith("application/x-www-form-urlencoded")
    ):
        return {}, None

    form = await request.form()
    fields: Dict[str, Any] = {}
    upload: Optional[UploadFile] = None

    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if key != IMAGE_FIELD or upload is not None:
                raise UploadError(field=key)
            upload = value
            continue
        if key in fields:
            existing = fields[key]
            fields[key] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            fields[key] = value

    return fields, upload


async def _attach_image(
    fields: Dict[str, Any], upload: Optional[UploadFile], file_intake: FileIntake
) -> Dict[str, Any]:
    if upload is not None:
        fields["imageUrl"] = await file_intake.store(upload)
    return fields


def _failure(collection: str, action: str, exc: Exception) -> Failure:
    logger.warning(
        "[%s] %s %s failed: %s",
        request_id_var.get(""),
        action,
        collection,
        str(exc),
    )
    return Failure.from_exception(exc)


def create_crud_router(collection_name: str) -> APIRouter:
    """
    Build the CRUD router for one collection.

    Args:
        collection_name: MongoDB collection, also the URL segment under /api

    Returns:
        APIRouter with prefix /api/<collection_name>, ready for include_router.
    """
    router = APIRouter(prefix=f"/api/{collection_name}", tags=[collection_name])
    service = RecordService(collection_name)

    @router.post(
        "",
        response_model=None,
        responses={200: {"description": "Created, or failure envelope", "model": CreateResult}},
        summary=f"Create a {collection_name} record",
    )
    async def create_record(
        request: Request,
        store: Store = Depends(get_store),
        file_intake: FileIntake = Depends(get_file_intake),
    ):
        try:
            fields, upload = await read_submission(request)
            fields = await _attach_image(fields, upload, file_intake)
            return await service.create(store, fields)
        except Exception as e:
            return _failure(collection_name, "create", e)

    @router.get(
        "",
        response_model=None,
        summary=f"List all {collection_name} records",
    )
    async def list_records(store: Store = Depends(get_store)):
        try:
            return await service.list_all(store)
        except Exception as e:
            return _failure(collection_name, "list", e)

    @router.get(
        "/{record_id}",
        response_model=None,
        summary=f"Get one {collection_name} record",
        description="Returns the record, or null when no record has this id.",
    )
    async def get_record(record_id: str, store: Store = Depends(get_store)):
        try:
            return await service.get(store, record_id)
        except Exception as e:
            return _failure(collection_name, "get", e)

    @router.put(
        "/{record_id}",
        response_model=None,
        responses={200: {"description": "Updated, or failure envelope", "model": UpdateResult}},
        summary=f"Update a {collection_name} record",
    )
    async def update_record(
        record_id: str,
        request: Request,
        store: Store = Depends(get_store),
        file_intake: FileIntake = Depends(get_file_intake),
    ):
        try:
            fields, upload = await read_submission(request)
            fields = await _attach_image(fields, upload, file_intake)
            return await service.update(store, record_id, fields)
        except Exception as e:
            return _failure(collection_name, "update", e)

    @router.delete(
        "/{record_id}",
        response_model=None,
        responses={200: {"description": "Deleted, or failure envelope", "model": DeleteResult}},
        summary=f"Delete a {collection_name} record",
    )
    async def delete_record(record_id: str, store: Store = Depends(get_store)):
        try:
            return await service.delete(store, record_id)
        except Exception as e:
            return _failure(collection_name, "delete", e)

    return router
