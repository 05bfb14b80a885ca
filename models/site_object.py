# models/site_object.py

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, field_validator

from models.enums import ObjectStatus


# -------------------------------------------------------------------
# CREATE MODEL (incoming from client)
# -------------------------------------------------------------------
class SiteObjectCreate(BaseModel):
    title: str
    address: Optional[str] = None

    @field_validator("title")
    def title_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("title is required")
        return v.strip()


# -------------------------------------------------------------------
# UPDATE MODEL (partial update)
# -------------------------------------------------------------------
class SiteObjectUpdate(BaseModel):
    title: Optional[str] = None
    address: Optional[str] = None
    status: Optional[ObjectStatus] = None


# -------------------------------------------------------------------
# READ MODEL (storage → API response)
# -------------------------------------------------------------------
class SiteObject(BaseModel):
    """A construction site; every other resource is anchored to one."""

    id: int
    owner_actor_id: int
    title: Optional[str] = None
    address: Optional[str] = None
    status: ObjectStatus = ObjectStatus.active
    created_at: Optional[datetime] = None

    @field_validator("created_at", mode="before")
    def normalize_timestamps(cls, v):
        if isinstance(v, str) and v.endswith("Z"):
            return v.replace("Z", "+00:00")
        return v
