# routers/folders.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from core.authorization import FOLDERED_TYPES, AccessPolicy
from core.decision import Decision
from core.errors import raise_for_decision
from core.hierarchy import layout_for
from core.store import ResourceStore
from dependencies.access import get_access_policy, get_store
from dependencies.auth import get_current_actor
from models.actor import Actor
from models.enums import Action, DenyReason, ResourceType
from models.resources import FolderCreate, FolderUpdate

router = APIRouter(tags=["Folders"])

"""
PHOTO FOLDERS ROUTER

Rules:
- Anyone related to the object may list, create, rename or delete folders
- Folder names are unique within an object
- Deleting a folder keeps its photos and videos; they fall back to "All"
"""

FOLDERS = layout_for(ResourceType.folder).table


def _name_conflict(store: ResourceStore, object_id: int, name: str, exclude_id: Optional[int] = None) -> Decision:
    for folder in store.list_records(FOLDERS, {"object_id": object_id, "name": name}):
        if folder["id"] != exclude_id:
            return Decision.deny(
                DenyReason.conflict,
                "Folder with this name already exists",
                object_id=object_id,
                record=folder,
            )
    return Decision.allow(object_id=object_id)


def _load_folder(decision: Decision, store: ResourceStore, folder_id: int) -> dict:
    if decision.record is not None:
        return decision.record

    # Admin decisions skip resolution
    folder = store.get_record(FOLDERS, folder_id)
    if folder is None:
        raise HTTPException(status_code=404, detail="Folder not found")
    return folder


# -----------------------------------------------------
# LIST FOLDERS OF AN OBJECT
# -----------------------------------------------------
@router.get("/objects/{object_id}/folders", summary="List photo folders of an object")
def list_folders(
    object_id: int,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    raise_for_decision(policy.authorize_list(actor, ResourceType.folder, object_id))

    rows = store.list_records(FOLDERS, {"object_id": object_id})
    rows.sort(key=lambda r: (r.get("order_index") or 0, r["id"]))
    return {"folders": rows}


# -----------------------------------------------------
# CREATE FOLDER
# -----------------------------------------------------
@router.post("/objects/{object_id}/folders", status_code=201, summary="Create a photo folder")
def create_folder(
    object_id: int,
    payload: FolderCreate,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    raise_for_decision(policy.authorize(actor, Action.create, ResourceType.folder, object_id))
    raise_for_decision(_name_conflict(store, object_id, payload.name))

    folder = store.insert_record(FOLDERS, {
        **payload.model_dump(),
        "object_id": object_id,
        "created_by": actor.id,
    })
    return {"folder": folder}


# -----------------------------------------------------
# RENAME / REORDER FOLDER
# -----------------------------------------------------
@router.put("/folders/{folder_id}", summary="Rename or reorder a photo folder")
def update_folder(
    folder_id: int,
    payload: FolderUpdate,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    decision = raise_for_decision(policy.authorize(actor, Action.update, ResourceType.folder, folder_id))
    folder = _load_folder(decision, store, folder_id)

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    if "name" in changes:
        raise_for_decision(_name_conflict(store, folder["object_id"], changes["name"], exclude_id=folder_id))

    updated = store.update_record(FOLDERS, folder_id, changes)
    if updated is None:
        raise HTTPException(status_code=404, detail="Folder not found")
    return {"folder": updated}


# -----------------------------------------------------
# DELETE FOLDER: contents move back to "All"
# -----------------------------------------------------
@router.delete("/folders/{folder_id}", summary="Delete a photo folder")
def delete_folder(
    folder_id: int,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    decision = raise_for_decision(policy.authorize(actor, Action.delete, ResourceType.folder, folder_id))
    _load_folder(decision, store, folder_id)

    for resource_type in sorted(FOLDERED_TYPES):
        table = layout_for(resource_type).table
        for record in store.list_records(table, {"folder_id": folder_id}):
            store.update_record(table, record["id"], {"folder_id": None})

    if not store.delete_record(FOLDERS, folder_id):
        raise HTTPException(status_code=404, detail="Folder not found")
    return {"success": True}
