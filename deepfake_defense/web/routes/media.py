"""
Media catalog endpoints, mounted at ``/api/media``.

Default records come from the bundled datasets; custom records are added,
edited and removed through ``/api/media/custom``. Everything is held in
memory by the shared MediaLibrary.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import ValidationError

from models import CustomMediaCreate, MediaImport, MediaType
from deepfake_defense.services.media_provider import MediaLibrary
from deepfake_defense.web.validation import error_message, parse_body, read_json

logger = logging.getLogger("deepfake_defense.web.media")

router = APIRouter(prefix="/api/media", tags=["media"])

MISSING_FIELDS = "Missing required fields: type, content"
INVALID_TYPE = "Invalid media type. Must be image, quote, or video"
INVALID_IS_FAKE = "isFake field is required and must be a boolean"
NOT_FOUND = "Custom media not found"


def _library(request: Request) -> MediaLibrary:
    return request.app.state.library


# =============================================================================
# Catalog
# =============================================================================

@router.get("")
async def list_media(
    request: Request,
    type: Optional[MediaType] = None,
    category: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=0),
):
    library = _library(request)
    media = library.list_media(type, category, limit or None)
    return {"media": media, "total": len(media), "stats": library.counts()}


@router.get("/random")
async def random_media(
    request: Request,
    type: Optional[MediaType] = None,
    is_fake: Optional[bool] = Query(None, alias="isFake"),
):
    picked = _library(request).random_record(type, is_fake)
    if picked is None:
        raise HTTPException(status_code=404, detail="No media found matching criteria")
    record, fake = picked
    return {"media": record.to_json(), "isFake": fake}


@router.get("/type/{media_type}")
async def media_by_type(
    request: Request,
    media_type: str,
    is_fake: Optional[bool] = Query(None, alias="isFake"),
):
    """Records of one type. An unknown type simply matches nothing."""
    try:
        records = _library(request).by_type(MediaType(media_type), is_fake)
    except ValueError:
        records = []
    return {"media": [r.to_json() for r in records], "total": len(records), "type": media_type}


@router.get("/categories")
async def categories(request: Request):
    found = _library(request).categories()
    return {"categories": found, "total": len(found)}


@router.get("/stats")
async def media_stats(request: Request):
    return _library(request).stats()


# =============================================================================
# Custom media
# =============================================================================

@router.post("/custom", status_code=201)
async def add_custom_media(request: Request):
    data = await read_json(request)
    create = parse_body(
        CustomMediaCreate, data,
        required=('type', 'content'),
        missing_message=MISSING_FIELDS,
        field_messages={'type': INVALID_TYPE, 'isFake': INVALID_IS_FAKE},
    )
    record = _library(request).add_custom(create)
    return {
        "message": "Custom media added successfully",
        "media": record.to_json(),
        "isFake": create.is_fake,
    }


@router.get("/custom")
async def list_custom_media(
    request: Request,
    is_fake: Optional[bool] = Query(None, alias="isFake"),
):
    library = _library(request)
    records = library.list_custom(is_fake)
    return {
        "customMedia": [r.to_json() for r in records],
        "total": len(records),
        "stats": {"real": len(library.custom_real), "fake": len(library.custom_fake)},
    }


@router.put("/custom/{media_id}")
async def update_custom_media(request: Request, media_id: str):
    updates = await read_json(request)
    if not isinstance(updates, dict):
        raise HTTPException(status_code=400, detail="Update body must be a JSON object")
    try:
        record = _library(request).update_custom(media_id, updates)
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail=error_message(e, updates, (), "Invalid media update", {'type': INVALID_TYPE}),
        )
    if record is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return {"message": "Custom media updated successfully", "media": record.to_json()}


@router.delete("/custom/{media_id}")
async def delete_custom_media(request: Request, media_id: str):
    deleted = _library(request).delete_custom(media_id)
    if deleted is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    record, _ = deleted
    logger.info(f"Deleted custom media {media_id}")
    return {"message": "Custom media deleted successfully", "deletedMedia": record.to_json()}


# =============================================================================
# Export / import
# =============================================================================

@router.get("/export")
async def export_media(request: Request):
    return _library(request).export()


@router.post("/import")
async def import_media(request: Request):
    """Replace whichever of real, fake and custom the body provides."""
    data = await read_json(request)
    payload = parse_body(MediaImport, data, (), "Invalid import data")
    counts = _library(request).import_data(payload)
    return {"message": "Media data imported successfully", "stats": counts}
