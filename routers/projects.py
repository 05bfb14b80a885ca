# routers/projects.py

from fastapi import APIRouter, Depends, HTTPException

from core.authorization import AccessPolicy
from core.errors import raise_for_decision
from core.hierarchy import layout_for
from core.store import ResourceStore
from core.visibility import visible_records
from dependencies.access import get_access_policy, get_store
from dependencies.auth import get_current_actor
from models.actor import Actor
from models.enums import Action, ResourceType
from models.resources import ProjectCreate, ProjectUpdate, StageCreate, StageUpdate

router = APIRouter(tags=["Projects"])

"""
PROJECTS & STAGES ROUTER

Rules:
- Projects and stages are created by the object owner (designer role)
  or an assigned designer
- Builders may only change a stage's status
"""

PROJECTS = layout_for(ResourceType.project).table
STAGES = layout_for(ResourceType.stage).table


# =====================================================
# PROJECTS
# =====================================================
@router.get("/objects/{object_id}/projects", summary="List projects of an object")
def list_projects(
    object_id: int,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    decision = raise_for_decision(policy.authorize_list(actor, ResourceType.project, object_id))
    rows = store.list_records(PROJECTS, {"object_id": object_id})
    return {"projects": visible_records(decision, ResourceType.project, rows)}


@router.post("/objects/{object_id}/projects", status_code=201, summary="Create a project")
def create_project(
    object_id: int,
    payload: ProjectCreate,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    raise_for_decision(policy.authorize(actor, Action.create, ResourceType.project, object_id))

    project = store.insert_record(PROJECTS, {
        **payload.model_dump(),
        "object_id": object_id,
        "status": "PLANNING",
    })
    return {"project": project}


@router.get("/projects/{project_id}", summary="Get a project")
def get_project(
    project_id: int,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    decision = raise_for_decision(policy.authorize(actor, Action.read, ResourceType.project, project_id))
    if decision.record is not None:
        return {"project": decision.record}

    # Admin decisions skip resolution, so the row was never loaded
    project = store.get_record(PROJECTS, project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return {"project": project}


@router.put("/projects/{project_id}", summary="Update a project")
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    raise_for_decision(policy.authorize(actor, Action.update, ResourceType.project, project_id))

    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    project = store.update_record(PROJECTS, project_id, changes)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return {"project": project}


@router.delete("/projects/{project_id}", summary="Delete a project")
def delete_project(
    project_id: int,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    raise_for_decision(policy.authorize(actor, Action.delete, ResourceType.project, project_id))

    if not store.delete_record(PROJECTS, project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    return {"success": True}


# =====================================================
# STAGES
# =====================================================
@router.get("/projects/{project_id}/stages", summary="List stages of a project")
def list_stages(
    project_id: int,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    decision = raise_for_decision(policy.authorize_list(actor, ResourceType.stage, project_id))
    rows = store.list_records(STAGES, {"project_id": project_id})
    rows = sorted(rows, key=lambda r: r.get("order_index") or 0)
    return {"stages": visible_records(decision, ResourceType.stage, rows)}


@router.post("/projects/{project_id}/stages", status_code=201, summary="Create a stage")
def create_stage(
    project_id: int,
    payload: StageCreate,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    raise_for_decision(policy.authorize(actor, Action.create, ResourceType.stage, project_id))

    stage = store.insert_record(STAGES, {
        **payload.model_dump(),
        "project_id": project_id,
        "status": "PLANNED",
    })
    return {"stage": stage}


@router.put("/stages/{stage_id}", summary="Update a stage (builders: status only)")
def update_stage(
    stage_id: int,
    payload: StageUpdate,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    raise_for_decision(policy.authorize(actor, Action.update, ResourceType.stage, stage_id))

    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    raise_for_decision(policy.check_update_fields(actor, ResourceType.stage, changes.keys()))

    stage = store.update_record(STAGES, stage_id, changes)
    if stage is None:
        raise HTTPException(status_code=404, detail="Stage not found")
    return {"stage": stage}


@router.delete("/stages/{stage_id}", summary="Delete a stage")
def delete_stage(
    stage_id: int,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    raise_for_decision(policy.authorize(actor, Action.delete, ResourceType.stage, stage_id))

    if not store.delete_record(STAGES, stage_id):
        raise HTTPException(status_code=404, detail="Stage not found")
    return {"success": True}
