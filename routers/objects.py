# routers/objects.py

from fastapi import APIRouter, Depends, HTTPException

from core.authorization import AccessPolicy
from core.errors import raise_for_decision
from core.hierarchy import layout_for
from core.registry import AssignmentRegistry
from core.store import ResourceStore
from dependencies.access import get_access_policy, get_registry, get_store
from dependencies.auth import get_current_actor
from models.actor import Actor
from models.enums import Action, ResourceType
from models.site_object import SiteObjectCreate, SiteObjectUpdate

router = APIRouter(
    prefix="/objects",
    tags=["Objects"],
)

"""
OBJECTS ROUTER

Rules:
- Any authenticated actor may CREATE an object and becomes its owner
- LIST returns owned + assigned objects (admins: all)
- READ / UPDATE / DELETE go through the access policy
"""

ASSIGNMENTS_TABLE = "object_assignments"


# -----------------------------------------------------
# LIST OBJECTS
# -----------------------------------------------------
@router.get("", summary="List objects visible to the current actor")
def list_objects(
    actor: Actor = Depends(get_current_actor),
    store: ResourceStore = Depends(get_store),
):
    table = layout_for(ResourceType.object).table

    if actor.is_admin:
        return {"objects": store.list_records(table)}

    owned = store.list_records(table, {"owner_actor_id": actor.id})
    seen = {row["id"] for row in owned}

    assigned = []
    for binding in store.list_records(ASSIGNMENTS_TABLE, {"actor_id": actor.id}):
        if binding["object_id"] in seen:
            continue
        # Same rule as AccessPolicy.relationship: mismatched bindings grant nothing
        if binding.get("scoped_role") != actor.global_role.value:
            continue
        row = store.get_record(table, binding["object_id"])
        if row:
            seen.add(row["id"])
            assigned.append(row)

    return {"objects": owned + assigned}


# -----------------------------------------------------
# CREATE OBJECT
# -----------------------------------------------------
@router.post("", status_code=201, summary="Create an object (caller becomes owner)")
def create_object(
    payload: SiteObjectCreate,
    actor: Actor = Depends(get_current_actor),
    registry: AssignmentRegistry = Depends(get_registry),
):
    decision = raise_for_decision(registry.create_object(actor, payload.model_dump()))
    return {"object": decision.value}


# -----------------------------------------------------
# GET OBJECT
# -----------------------------------------------------
@router.get("/{object_id}", summary="Get an object")
def get_object(
    object_id: int,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    raise_for_decision(policy.authorize(actor, Action.read, ResourceType.object, object_id))

    site_object = store.get_object(object_id)
    if site_object is None:
        raise HTTPException(status_code=404, detail="Object not found")
    return {"object": site_object}


# -----------------------------------------------------
# UPDATE OBJECT: owner or assigned designer
# -----------------------------------------------------
@router.put("/{object_id}", summary="Update an object")
def update_object(
    object_id: int,
    payload: SiteObjectUpdate,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    raise_for_decision(policy.authorize(actor, Action.update, ResourceType.object, object_id))

    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated = store.update_object(object_id, changes)
    if updated is None:
        raise HTTPException(status_code=404, detail="Object not found")
    return {"object": updated}


# -----------------------------------------------------
# DELETE OBJECT: owner or admin; storage cascades
# -----------------------------------------------------
@router.delete("/{object_id}", summary="Delete an object and everything under it")
def delete_object(
    object_id: int,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    raise_for_decision(policy.authorize(actor, Action.delete, ResourceType.object, object_id))

    if not store.delete_object(object_id):
        raise HTTPException(status_code=404, detail="Object not found")
    return {"success": True}
