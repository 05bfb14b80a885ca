# models/actor.py

from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator

from models.enums import GlobalRole


# ===============================================================
# ACTOR: an already-authenticated identity
# ===============================================================

class Actor(BaseModel):
    """
    Mirrors a row of the `actors` table.
    The global role is assigned at account creation and never
    changes because the actor happens to own an Object.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    global_role: GlobalRole

    email: Optional[str] = None
    name: Optional[str] = None
    auth_user_id: Optional[str] = None

    @field_validator("global_role", mode="before")
    def normalize_role(cls, v):
        return GlobalRole.parse(v)

    @property
    def is_admin(self) -> bool:
        return self.global_role == GlobalRole.admin
