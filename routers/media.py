# routers/media.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.authorization import FOLDERED_TYPES, AccessPolicy
from core.errors import raise_for_decision
from core.hierarchy import layout_for
from core.store import ResourceStore
from core.visibility import default_visibility, visible_records
from dependencies.access import get_access_policy, get_store
from dependencies.auth import get_current_actor
from models.actor import Actor
from models.enums import Action, BaseStrEnum, ResourceType
from models.resources import MediaCreate, MediaMove, VisibilityUpdate

router = APIRouter(tags=["Media"])

"""
MEDIA ROUTER (photos, videos, BIM models, documents)

Only metadata is handled here; file bytes live in external storage.

Rules:
- Owners only ever see records flagged visible_to_owner
- New uploads by the owner default to visible, everyone else's to hidden
- Any actor related to the object may toggle visibility or move a
  photo/video between folders; neither needs write access to the record
"""


class MediaKind(BaseStrEnum):
    photos = "photos"
    videos = "videos"
    models = "models"
    documents = "documents"


MEDIA_TYPES = {
    MediaKind.photos: ResourceType.photo,
    MediaKind.videos: ResourceType.video,
    MediaKind.models: ResourceType.bim_model,
    MediaKind.documents: ResourceType.document,
}


def _ensure_same_object(policy: AccessPolicy, resource_type: ResourceType, resource_id: Optional[int], object_id: int):
    """Folder/stage/project references must live under the same object."""
    if resource_id is None:
        return
    anchor = policy.resolver.resolve_anchor_object(resource_type, resource_id)
    if anchor != object_id:
        raise HTTPException(
            status_code=400,
            detail=f"{resource_type} {resource_id} does not belong to object {object_id}",
        )


# -----------------------------------------------------
# LIST MEDIA OF AN OBJECT
# -----------------------------------------------------
@router.get("/objects/{object_id}/media/{kind}", summary="List photos / videos / models / documents")
def list_media(
    object_id: int,
    kind: MediaKind,
    folder_id: Optional[int] = Query(None),
    stage_id: Optional[int] = Query(None),
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    resource_type = MEDIA_TYPES[kind]
    decision = raise_for_decision(policy.authorize_list(actor, resource_type, object_id))

    filters = {"object_id": object_id}
    if folder_id is not None:
        filters["folder_id"] = folder_id
    if stage_id is not None:
        filters["stage_id"] = stage_id

    rows = store.list_records(layout_for(resource_type).table, filters)
    return {str(kind): visible_records(decision, resource_type, rows)}


# -----------------------------------------------------
# REGISTER AN UPLOAD
# -----------------------------------------------------
@router.post("/objects/{object_id}/media/{kind}", status_code=201, summary="Register an uploaded file")
def create_media(
    object_id: int,
    kind: MediaKind,
    payload: MediaCreate,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    resource_type = MEDIA_TYPES[kind]
    decision = raise_for_decision(policy.authorize(actor, Action.create, resource_type, object_id))

    _ensure_same_object(policy, ResourceType.folder, payload.folder_id, object_id)
    _ensure_same_object(policy, ResourceType.stage, payload.stage_id, object_id)
    _ensure_same_object(policy, ResourceType.project, payload.project_id, object_id)

    data = payload.model_dump(exclude={"visible_to_owner"}, exclude_none=True)
    data.update({
        "object_id": object_id,
        "uploaded_by": actor.id,
        "visible_to_owner": default_visibility(decision.relationship, payload.visible_to_owner),
    })

    record = store.insert_record(layout_for(resource_type).table, data)
    return {"record": record}


# -----------------------------------------------------
# TOGGLE VISIBILITY FOR THE OWNER
# -----------------------------------------------------
@router.put("/media/{kind}/{record_id}/visibility", summary="Show or hide a record from the owner")
def update_media_visibility(
    kind: MediaKind,
    record_id: int,
    payload: VisibilityUpdate,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    resource_type = MEDIA_TYPES[kind]
    raise_for_decision(policy.authorize_visibility(actor, resource_type, record_id))

    record = store.update_record(
        layout_for(resource_type).table,
        record_id,
        {"visible_to_owner": payload.visible_to_owner},
    )
    if record is None:
        raise HTTPException(status_code=404, detail=f"{resource_type} not found")
    return {"record": record}


# -----------------------------------------------------
# MOVE A PHOTO / VIDEO BETWEEN FOLDERS
# -----------------------------------------------------
@router.put("/media/{kind}/{record_id}/move", summary="Move a photo or video into a folder")
def move_media(
    kind: MediaKind,
    record_id: int,
    payload: MediaMove,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    resource_type = MEDIA_TYPES[kind]
    if resource_type not in FOLDERED_TYPES:
        raise HTTPException(status_code=400, detail=f"{resource_type} records are not kept in folders")

    decision = raise_for_decision(policy.authorize_move(actor, resource_type, record_id))

    # folder_id=None moves the record back to "All"
    if payload.folder_id is not None:
        object_id = decision.object_id
        if object_id is None:
            object_id = policy.resolver.resolve_anchor_object(resource_type, record_id)
        folder = store.get_record(layout_for(ResourceType.folder).table, payload.folder_id)
        if folder is None or folder.get("object_id") != object_id:
            raise HTTPException(status_code=404, detail="Folder not found")

    record = store.update_record(
        layout_for(resource_type).table,
        record_id,
        {"folder_id": payload.folder_id},
    )
    if record is None:
        raise HTTPException(status_code=404, detail=f"{resource_type} not found")
    return {"record": record}


# -----------------------------------------------------
# DELETE
# -----------------------------------------------------
@router.delete("/media/{kind}/{record_id}", summary="Delete a media record")
def delete_media(
    kind: MediaKind,
    record_id: int,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    resource_type = MEDIA_TYPES[kind]
    raise_for_decision(policy.authorize(actor, Action.delete, resource_type, record_id))

    if not store.delete_record(layout_for(resource_type).table, record_id):
        raise HTTPException(status_code=404, detail=f"{resource_type} not found")
    return {"success": True}
