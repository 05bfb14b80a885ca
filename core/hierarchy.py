# core/hierarchy.py

"""
Hierarchy resolver: nested resource reference → anchor Object.

Each resource type declares an ordered list of parent links. The
resolver follows the first link whose column is populated, so a
direct `object_id` always wins over an indirect route through a
project. Any missing row or link anywhere in the chain yields None;
there is no partial result.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional, Tuple

from core.config import settings
from core.logging_config import logger
from core.store import ResourceStore
from models.enums import ResourceType
from models.site_object import SiteObject


@dataclass(frozen=True)
class ParentLink:
    field: str
    parent_type: ResourceType


@dataclass(frozen=True)
class ResourceLayout:
    table: str
    parents: Tuple[ParentLink, ...] = ()
    author_field: Optional[str] = None
    has_visibility: bool = False


RESOURCE_LAYOUTS = MappingProxyType({
    ResourceType.object: ResourceLayout("objects", author_field="owner_actor_id"),
    ResourceType.project: ResourceLayout(
        "projects",
        parents=(ParentLink("object_id", ResourceType.object),),
    ),
    ResourceType.stage: ResourceLayout(
        "project_stages",
        parents=(ParentLink("project_id", ResourceType.project),),
    ),
    ResourceType.photo: ResourceLayout(
        "photos",
        parents=(ParentLink("object_id", ResourceType.object),),
        author_field="uploaded_by",
        has_visibility=True,
    ),
    ResourceType.video: ResourceLayout(
        "videos",
        parents=(ParentLink("object_id", ResourceType.object),),
        author_field="uploaded_by",
        has_visibility=True,
    ),
    # project_id / stage_id on a model are informational only
    ResourceType.bim_model: ResourceLayout(
        "bim_models",
        parents=(ParentLink("object_id", ResourceType.object),),
        author_field="uploaded_by",
        has_visibility=True,
    ),
    ResourceType.document: ResourceLayout(
        "documents",
        parents=(
            ParentLink("object_id", ResourceType.object),
            ParentLink("project_id", ResourceType.project),
        ),
        author_field="uploaded_by",
        has_visibility=True,
    ),
    ResourceType.folder: ResourceLayout(
        "photo_folders",
        parents=(ParentLink("object_id", ResourceType.object),),
    ),
    ResourceType.comment: ResourceLayout(
        "photo_comments",
        parents=(ParentLink("photo_id", ResourceType.photo),),
        author_field="author_id",
        has_visibility=True,
    ),
    ResourceType.model_comment: ResourceLayout(
        "model_comments",
        parents=(ParentLink("model_id", ResourceType.bim_model),),
        author_field="author_id",
        has_visibility=True,
    ),
})


# -----------------------------------------------------
# Container of each type: what a create / list request names.
# None means unscoped (anyone authenticated may create).
# -----------------------------------------------------
CONTAINER_TYPES = MappingProxyType({
    ResourceType.object: None,
    ResourceType.project: ResourceType.object,
    ResourceType.stage: ResourceType.project,
    ResourceType.photo: ResourceType.object,
    ResourceType.video: ResourceType.object,
    ResourceType.bim_model: ResourceType.object,
    ResourceType.document: ResourceType.object,
    ResourceType.folder: ResourceType.object,
    ResourceType.comment: ResourceType.photo,
    ResourceType.model_comment: ResourceType.bim_model,
    ResourceType.assignment: ResourceType.object,
})


def layout_for(resource_type: ResourceType) -> ResourceLayout:
    return RESOURCE_LAYOUTS[ResourceType(resource_type)]


@dataclass(frozen=True)
class Resolution:
    """Outcome of a successful walk: the requested row and its anchor Object."""
    resource_type: ResourceType
    record: dict
    anchor: SiteObject

    @property
    def object_id(self) -> int:
        return self.anchor.id


class HierarchyResolver:

    def __init__(self, store: ResourceStore, max_hops: Optional[int] = None):
        self.store = store
        self.max_hops = settings.MAX_HIERARCHY_HOPS if max_hops is None else max_hops

    def resolve(self, resource_type: ResourceType, resource_id: int) -> Optional[Resolution]:
        """
        Walk parent links from (resource_type, resource_id) to its Object.
        Storage failures propagate as StorageError.
        """
        if resource_id is None:
            return None

        resource_type = ResourceType(resource_type)
        # Assignments are keyed by (actor, object); callers pass the object id
        if resource_type == ResourceType.assignment:
            current_type = ResourceType.object
        else:
            current_type = resource_type
        current_id = resource_id
        origin = None

        for hops in range(self.max_hops + 1):
            layout = RESOURCE_LAYOUTS[current_type]
            row = self.store.get_record(layout.table, current_id)
            if row is None:
                logger.debug(f"Hierarchy: {current_type} {current_id} missing after {hops} hop(s)")
                return None
            if origin is None:
                origin = row

            if current_type == ResourceType.object:
                return Resolution(resource_type=resource_type, record=origin, anchor=SiteObject(**row))

            link = next((p for p in layout.parents if row.get(p.field) is not None), None)
            if link is None:
                logger.warning(f"Hierarchy: {current_type} {current_id} has no parent link set")
                return None
            current_type, current_id = link.parent_type, row[link.field]

        logger.warning(
            f"Hierarchy: {resource_type} {resource_id} exceeds {self.max_hops} hop(s); treating as not found"
        )
        return None

    def resolve_anchor_object(self, resource_type: ResourceType, resource_id: int) -> Optional[int]:
        resolution = self.resolve(resource_type, resource_id)
        return resolution.object_id if resolution else None
