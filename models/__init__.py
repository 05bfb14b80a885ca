# -------------------------
# Enums
# -------------------------
from .enums import (
    Action,
    DenyReason,
    GlobalRole,
    ObjectStatus,
    RelationshipKind,
    ResourceType,
    ScopedRole,
)

# -------------------------
# Actor / Object / Assignment
# -------------------------
from .actor import Actor
from .site_object import SiteObject, SiteObjectCreate, SiteObjectUpdate
from .assignment import Assignment, AssignmentCreate

# -------------------------
# Nested resource payloads
# -------------------------
from .resources import (
    CommentCreate,
    FolderCreate,
    FolderUpdate,
    MediaCreate,
    MediaMove,
    ProjectCreate,
    ProjectUpdate,
    StageCreate,
    StageUpdate,
    VisibilityUpdate,
)

__all__ = [
    # enums
    "Action",
    "DenyReason",
    "GlobalRole",
    "ObjectStatus",
    "RelationshipKind",
    "ResourceType",
    "ScopedRole",

    # actors & objects
    "Actor",
    "SiteObject",
    "SiteObjectCreate",
    "SiteObjectUpdate",
    "Assignment",
    "AssignmentCreate",

    # nested resources
    "CommentCreate",
    "FolderCreate",
    "FolderUpdate",
    "MediaCreate",
    "MediaMove",
    "ProjectCreate",
    "ProjectUpdate",
    "StageCreate",
    "StageUpdate",
    "VisibilityUpdate",
]
