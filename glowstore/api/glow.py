"""
Glow persistence API.
Translates HTTP requests into store calls and store results into responses.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from ..core.schema import ErrorKind
from ..core.store import get_glow, upsert_glow, delete_glow
from .schemas import (
    SaveGlowRequest,
    GlowGetResponse,
    GlowSaveResponse,
    GlowDeleteResponse,
    GlowHealthResponse,
    ErrorResponse
)

router = APIRouter()

INVALID_ID_MESSAGE = "Invalid object ID format. Expected UUID."
INVALID_DATA_MESSAGE = "Invalid data format. Expected 'metadata;values' with pipe-delimited numbers."
NOT_FOUND_MESSAGE = "No glow data found for this object."
INTERNAL_ERROR_MESSAGE = "Internal server error."

ERROR_RESPONSES = {
    ErrorKind.INVALID_IDENTIFIER: (400, INVALID_ID_MESSAGE),
    ErrorKind.INVALID_DATA_FORMAT: (400, INVALID_DATA_MESSAGE),
    ErrorKind.NOT_FOUND: (404, NOT_FOUND_MESSAGE),
    ErrorKind.CONFLICT: (500, INTERNAL_ERROR_MESSAGE),
    ErrorKind.STORAGE_UNAVAILABLE: (500, INTERNAL_ERROR_MESSAGE),
}

_error_docs = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def error_response(kind: ErrorKind) -> JSONResponse:
    status_code, message = ERROR_RESPONSES[kind]
    return JSONResponse(status_code=status_code, content={"error": message})


# Defined before /{object_id} so "health" is not taken for an object id
@router.get("/health", response_model=GlowHealthResponse)
def glow_health():
    """Liveness probe. Does not touch storage."""
    return GlowHealthResponse(status="healthy", timestamp=datetime.now(timezone.utc))


@router.get("/{object_id}", response_model=GlowGetResponse, responses=_error_docs)
def get_glow_endpoint(object_id: str):
    """Retrieve glow data for an object by UUID."""
    result = get_glow(object_id)
    if not result.ok:
        return error_response(result.error)

    record = result.value
    return GlowGetResponse(
        object_id=record.object_id,
        data=record.data,
        updated_at=record.updated_at
    )


@router.post("/{object_id}", response_model=GlowSaveResponse, responses=_error_docs)
def save_glow_endpoint(object_id: str, request: Optional[SaveGlowRequest] = Body(default=None)):
    """Save or update glow data for an object by UUID.

    Body: {"data": "4|6|8;0.5|0.3|0.0|..."}
    """
    data = request.data if request is not None else None
    result = upsert_glow(object_id, data)
    if not result.ok:
        return error_response(result.error)

    outcome = result.value
    return GlowSaveResponse(
        object_id=outcome.object_id,
        message="Glow data saved successfully.",
        updated_at=outcome.updated_at
    )


@router.delete("/{object_id}", response_model=GlowDeleteResponse, responses=_error_docs)
def delete_glow_endpoint(object_id: str):
    """Delete glow data for an object by UUID."""
    result = delete_glow(object_id)
    if not result.ok:
        return error_response(result.error)

    return GlowDeleteResponse(message="Glow data deleted successfully.")
