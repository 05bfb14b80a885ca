# core/decision.py

from dataclasses import dataclass, field
from typing import Any, Optional

from models.enums import DenyReason, RelationshipKind, ScopedRole


@dataclass(frozen=True)
class Relationship:
    """Actor ↔ anchor Object relationship computed for one request."""

    kind: RelationshipKind
    scoped_role: Optional[ScopedRole] = None

    @property
    def is_owner(self) -> bool:
        return self.kind == RelationshipKind.owner

    @property
    def is_admin(self) -> bool:
        return self.kind == RelationshipKind.admin


ADMIN = Relationship(RelationshipKind.admin)
OWNER = Relationship(RelationshipKind.owner)
NONE = Relationship(RelationshipKind.none)


def assigned(scoped_role: ScopedRole) -> Relationship:
    return Relationship(RelationshipKind.assigned, ScopedRole(scoped_role))


@dataclass(frozen=True)
class Decision:
    """
    Allow/Deny verdict. Denials are values, never exceptions;
    `value` carries the payload of registry operations on success.
    """

    allowed: bool
    reason: Optional[DenyReason] = None
    detail: str = ""
    object_id: Optional[int] = None
    relationship: Optional[Relationship] = None
    record: Optional[dict] = field(default=None, compare=False, repr=False)
    value: Any = field(default=None, compare=False)

    @classmethod
    def allow(cls, **kwargs) -> "Decision":
        return cls(allowed=True, **kwargs)

    @classmethod
    def deny(cls, reason: DenyReason, detail: str = "", **kwargs) -> "Decision":
        return cls(allowed=False, reason=reason, detail=detail, **kwargs)

    @property
    def denied(self) -> bool:
        return not self.allowed
