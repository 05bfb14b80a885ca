# models/assignment.py

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, field_validator

from models.enums import ScopedRole


class AssignmentCreate(BaseModel):
    actor_id: int
    role: ScopedRole

    @field_validator("role", mode="before")
    def normalize_role(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


class Assignment(BaseModel):
    """
    Scoped-role binding of one actor to one Object.
    Unique on (actor_id, object_id).
    """
    actor_id: int
    object_id: int
    scoped_role: ScopedRole
    assigned_at: Optional[datetime] = None

    @field_validator("assigned_at", mode="before")
    def normalize_timestamps(cls, v):
        if isinstance(v, str) and v.endswith("Z"):
            return v.replace("Z", "+00:00")
        return v
