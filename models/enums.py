from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# GLOBAL ROLE
# -----------------------------------------------------
class GlobalRole(BaseStrEnum):
    """Account-level role, fixed at signup."""

    owner = "OWNER"
    designer = "DESIGNER"
    builder = "BUILDER"
    admin = "ADMIN"

    @classmethod
    def parse(cls, value) -> "GlobalRole":
        """Accepts enum members, canonical names and the legacy CUSTOMER alias."""
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().upper()
        if normalized == "CUSTOMER":
            return cls.owner
        return cls(normalized)


# -----------------------------------------------------
# SCOPED ROLE
# -----------------------------------------------------
class ScopedRole(BaseStrEnum):
    """Role an actor holds on one specific Object."""

    designer = "DESIGNER"
    builder = "BUILDER"


# -----------------------------------------------------
# ACTION
# -----------------------------------------------------
class Action(BaseStrEnum):
    create = "create"
    read = "read"
    update = "update"
    delete = "delete"


# -----------------------------------------------------
# RESOURCE TYPE
# -----------------------------------------------------
class ResourceType(BaseStrEnum):
    object = "object"
    project = "project"
    stage = "stage"
    photo = "photo"
    video = "video"
    bim_model = "bim_model"
    document = "document"
    folder = "folder"
    comment = "comment"
    model_comment = "model_comment"
    assignment = "assignment"


# -----------------------------------------------------
# DENY REASON
# -----------------------------------------------------
class DenyReason(BaseStrEnum):
    """Machine-distinguishable reason attached to every denial."""

    unauthenticated = "unauthenticated"
    not_found = "not_found"
    no_access = "no_access"
    not_permitted = "not_permitted"
    role_mismatch = "role_mismatch"
    conflict = "conflict"


# -----------------------------------------------------
# OBJECT STATUS
# -----------------------------------------------------
class ObjectStatus(BaseStrEnum):
    active = "ACTIVE"
    archived = "ARCHIVED"


# -----------------------------------------------------
# RELATIONSHIP KIND
# -----------------------------------------------------
class RelationshipKind(BaseStrEnum):
    """How an actor relates to the anchor Object of a request."""

    admin = "admin"
    owner = "owner"
    assigned = "assigned"
    none = "none"
