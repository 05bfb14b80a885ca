# core/registry.py

"""
Ownership & assignment registry.

Binds actors to Objects: one owner per Object, at most one scoped-role
assignment per (actor, Object) pair. Outcomes are Decision values; only
StorageError escapes.
"""

from typing import List, Optional

from core.decision import Decision
from core.logging_config import logger
from core.store import ResourceStore
from models.actor import Actor
from models.assignment import Assignment
from models.enums import DenyReason, ScopedRole
from models.site_object import SiteObject


class AssignmentRegistry:

    def __init__(self, store: ResourceStore):
        self.store = store

    # -----------------------------------------------------
    # Ownership
    # -----------------------------------------------------
    def get_object_owner(self, object_id: int) -> Optional[int]:
        """Owner actor id, or None when the Object does not exist."""
        site_object = self.store.get_object(object_id)
        return site_object.owner_actor_id if site_object else None

    def create_object(self, actor: Optional[Actor], data: dict) -> Decision:
        """
        Any authenticated actor may create an Object and becomes its
        owner. Their global role is left untouched.
        """
        if actor is None:
            return Decision.deny(DenyReason.unauthenticated, "Not authenticated")

        site_object = self.store.create_object(actor.id, data)
        logger.info(f"Object {site_object.id} created by actor {actor.id} ({actor.global_role})")
        return Decision.allow(object_id=site_object.id, value=site_object)

    # -----------------------------------------------------
    # Assignments
    # -----------------------------------------------------
    def get_assignment(self, actor_id: int, object_id: int) -> Optional[Assignment]:
        return self.store.get_assignment(actor_id, object_id)

    def list_assignments(self, object_id: int) -> List[Assignment]:
        return self.store.list_assignments(object_id)

    def upsert_assignment(self, object_id: int, target_actor_id: int, scoped_role) -> Decision:
        """
        Bind `target_actor_id` to `object_id` as `scoped_role`, replacing
        any existing binding for the pair. Caller authorization is done
        beforehand through AccessPolicy.authorize_assignment().
        """
        try:
            role = ScopedRole(str(scoped_role).upper())
        except ValueError:
            return Decision.deny(
                DenyReason.role_mismatch,
                "Only DESIGNER or BUILDER can be assigned",
                object_id=object_id,
            )

        site_object = self.store.get_object(object_id)
        if site_object is None:
            return Decision.deny(DenyReason.not_found, f"object {object_id} not found", object_id=object_id)

        target = self.store.get_actor(target_actor_id)
        if target is None:
            return Decision.deny(DenyReason.not_found, f"actor {target_actor_id} not found", object_id=object_id)

        if target.global_role.value != role.value:
            return Decision.deny(
                DenyReason.role_mismatch,
                f"Actor {target_actor_id} has role {target.global_role}, cannot be assigned as {role}",
                object_id=object_id,
            )

        assignment = self.store.upsert_assignment(target_actor_id, object_id, role)
        logger.info(f"Assigned actor {target_actor_id} to object {object_id} as {role}")
        return Decision.allow(object_id=object_id, value=assignment)

    def remove_assignment(self, object_id: int, target_actor_id: int, requesting_actor: Optional[Actor]) -> Decision:
        """
        Remove a binding. Allowed for the Object owner, an ADMIN, or the
        assigned actor removing themself.
        """
        if requesting_actor is None:
            return Decision.deny(DenyReason.unauthenticated, "Not authenticated")

        site_object = self.store.get_object(object_id)
        if site_object is None:
            return Decision.deny(DenyReason.not_found, f"object {object_id} not found", object_id=object_id)

        existing = self.store.get_assignment(target_actor_id, object_id)
        if existing is None:
            return Decision.deny(DenyReason.not_found, "Assignment not found", object_id=object_id)

        is_owner = site_object.owner_actor_id == requesting_actor.id
        is_self = requesting_actor.id == target_actor_id
        if not (requesting_actor.is_admin or is_owner or is_self):
            logger.info(
                f"Actor {requesting_actor.id} refused removal of actor {target_actor_id} from object {object_id}"
            )
            return Decision.deny(
                DenyReason.not_permitted,
                "Not allowed to remove this assignment",
                object_id=object_id,
            )

        if not self.store.delete_assignment(target_actor_id, object_id):
            # Removed concurrently between the lookup and the delete
            return Decision.deny(DenyReason.not_found, "Assignment not found", object_id=object_id)

        logger.info(f"Removed actor {target_actor_id} from object {object_id} (by actor {requesting_actor.id})")
        return Decision.allow(object_id=object_id, value=existing)
