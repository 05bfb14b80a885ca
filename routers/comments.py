# routers/comments.py

from fastapi import APIRouter, Depends, HTTPException

from core.authorization import AccessPolicy
from core.errors import raise_for_decision
from core.hierarchy import layout_for
from core.store import ResourceStore
from core.visibility import default_visibility, visible_records
from dependencies.access import get_access_policy, get_store
from dependencies.auth import get_current_actor
from models.actor import Actor
from models.enums import Action, ResourceType
from models.resources import CommentCreate, VisibilityUpdate

router = APIRouter(tags=["Comments"])

"""
COMMENTS ROUTER (photo pins and BIM model comments)

Rules:
- Anyone related to the object may LIST and CREATE comments
- Only the author (or an admin) may change visibility or DELETE,
  unlike media where any related actor may toggle visibility
"""

PARENT_FIELD = {
    ResourceType.comment: "photo_id",
    ResourceType.model_comment: "model_id",
}


def _list(resource_type, parent_id, actor, policy, store):
    decision = raise_for_decision(policy.authorize_list(actor, resource_type, parent_id))
    rows = store.list_records(layout_for(resource_type).table, {PARENT_FIELD[resource_type]: parent_id})
    return {"comments": visible_records(decision, resource_type, rows)}


def _create(resource_type, parent_id, payload: CommentCreate, actor, policy, store):
    decision = raise_for_decision(policy.authorize(actor, Action.create, resource_type, parent_id))

    data = {
        PARENT_FIELD[resource_type]: parent_id,
        "author_id": actor.id,
        "content": payload.content,
        "visible_to_owner": default_visibility(decision.relationship, payload.visible_to_owner),
        "is_admin_comment": actor.is_admin,
    }
    if resource_type == ResourceType.comment:
        data.update({"x": payload.x, "y": payload.y})

    return {"comment": store.insert_record(layout_for(resource_type).table, data)}


def _set_visibility(resource_type, comment_id, payload: VisibilityUpdate, actor, policy, store):
    raise_for_decision(policy.authorize_visibility(actor, resource_type, comment_id))

    comment = store.update_record(
        layout_for(resource_type).table,
        comment_id,
        {"visible_to_owner": payload.visible_to_owner},
    )
    if comment is None:
        raise HTTPException(status_code=404, detail="Comment not found")
    return {"comment": comment}


def _delete(resource_type, comment_id, actor, policy, store):
    raise_for_decision(policy.authorize(actor, Action.delete, resource_type, comment_id))

    if not store.delete_record(layout_for(resource_type).table, comment_id):
        raise HTTPException(status_code=404, detail="Comment not found")
    return {"success": True}


# =====================================================
# PHOTO COMMENTS
# =====================================================
@router.get("/photos/{photo_id}/comments", summary="List comments on a photo")
def list_photo_comments(
    photo_id: int,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    return _list(ResourceType.comment, photo_id, actor, policy, store)


@router.post("/photos/{photo_id}/comments", status_code=201, summary="Comment on a photo")
def create_photo_comment(
    photo_id: int,
    payload: CommentCreate,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    return _create(ResourceType.comment, photo_id, payload, actor, policy, store)


@router.put("/comments/{comment_id}/visibility", summary="Show or hide a photo comment from the owner")
def update_photo_comment_visibility(
    comment_id: int,
    payload: VisibilityUpdate,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    return _set_visibility(ResourceType.comment, comment_id, payload, actor, policy, store)


@router.delete("/comments/{comment_id}", summary="Delete a photo comment")
def delete_photo_comment(
    comment_id: int,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    return _delete(ResourceType.comment, comment_id, actor, policy, store)


# =====================================================
# BIM MODEL COMMENTS
# =====================================================
@router.get("/models/{model_id}/comments", summary="List comments on a BIM model")
def list_model_comments(
    model_id: int,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    return _list(ResourceType.model_comment, model_id, actor, policy, store)


@router.post("/models/{model_id}/comments", status_code=201, summary="Comment on a BIM model")
def create_model_comment(
    model_id: int,
    payload: CommentCreate,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    return _create(ResourceType.model_comment, model_id, payload, actor, policy, store)


@router.put("/model-comments/{comment_id}/visibility", summary="Show or hide a model comment from the owner")
def update_model_comment_visibility(
    comment_id: int,
    payload: VisibilityUpdate,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    return _set_visibility(ResourceType.model_comment, comment_id, payload, actor, policy, store)


@router.delete("/model-comments/{comment_id}", summary="Delete a model comment")
def delete_model_comment(
    comment_id: int,
    actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_access_policy),
    store: ResourceStore = Depends(get_store),
):
    return _delete(ResourceType.model_comment, comment_id, actor, policy, store)
