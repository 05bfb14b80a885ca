# routers/assignments.py

from fastapi import APIRouter, Depends, Query

from core.authorization import AccessPolicy
from core.errors import raise_for_decision
from core.registry import AssignmentRegistry
from dependencies.access import get_access_policy, get_registry
from dependencies.auth import get_current_actor
from models.actor import Actor
from models.assignment import AssignmentCreate
from models.enums import ResourceType

router = APIRouter(
    prefix="/objects/{object_id}/assignments",
    tags=["Assignments"],
)


# -----------------------------------------------------
# LIST ASSIGNMENTS: anyone related to the object
# -----------------------------------------------------
@router.get("", summary="List actors assigned to an object")
def list_assignments(
    object_id: int,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    registry: AssignmentRegistry = Depends(get_registry),
):
    raise_for_decision(policy.authorize_list(actor, ResourceType.assignment, object_id))
    return {"assignments": registry.list_assignments(object_id)}


# -----------------------------------------------------
# ASSIGN (upsert): owner, admin, or assigned designer → builder
# -----------------------------------------------------
@router.post("", status_code=201, summary="Assign an actor to an object")
def assign_actor(
    object_id: int,
    payload: AssignmentCreate,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    registry: AssignmentRegistry = Depends(get_registry),
):
    raise_for_decision(policy.authorize_assignment(actor, object_id, payload.role))

    decision = raise_for_decision(
        registry.upsert_assignment(object_id, payload.actor_id, payload.role)
    )
    return {"assignment": decision.value}


# -----------------------------------------------------
# REMOVE: owner, admin, or the assigned actor themself
# -----------------------------------------------------
@router.delete("", summary="Remove an actor from an object")
def remove_assignment(
    object_id: int,
    actor_id: int = Query(..., description="Actor whose assignment is removed"),
    actor: Actor = Depends(get_current_actor),
    registry: AssignmentRegistry = Depends(get_registry),
):
    raise_for_decision(registry.remove_assignment(object_id, actor_id, actor))
    return {"success": True}
