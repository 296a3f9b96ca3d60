"""
Request and response models for the glow API.
Wire names are camelCase (objectId, updatedAt) to match the in-world scripts.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SaveGlowRequest(BaseModel):
    # Optional here so a missing or null value reaches the store's format check
    data: Optional[str] = None


class GlowGetResponse(CamelModel):
    object_id: str
    data: str
    updated_at: datetime


class GlowSaveResponse(CamelModel):
    object_id: str
    message: str
    updated_at: datetime


class GlowDeleteResponse(BaseModel):
    message: str


class GlowHealthResponse(BaseModel):
    status: str
    timestamp: datetime


class HealthResponse(CamelModel):
    status: str
    version: str
    db_health: bool


class ErrorResponse(BaseModel):
    error: str
