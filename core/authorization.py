# core/authorization.py

"""
Authorization decision function.

Single entry point for every "may this actor do X to Y" question.
The admin bypass is evaluated at the top of each public method,
before any lookup; the matrix itself has no ADMIN row.

Order of evaluation for authorize():
    1. no actor                         → Deny(unauthenticated)
    2. ADMIN                            → Allow
    3. resolve anchor Object            → Deny(not_found) on any gap
    4. relationship (owner / assigned / none)
    5. no relationship                  → Deny(no_access)
    6. authorship-scoped actions        → Allow iff author
    7. policy matrix                    → Deny(not_permitted) if absent
    8. per-resource refinements
    9. Allow
"""

from typing import Iterable, Optional

from core.decision import ADMIN, NONE, OWNER, Decision, Relationship, assigned
from core.hierarchy import CONTAINER_TYPES, RESOURCE_LAYOUTS, HierarchyResolver, Resolution, layout_for
from core.logging_config import logger
from core.permissions import (
    ROLE_PERMISSIONS,
    UPDATE_FIELD_LIMITS,
    is_author_only,
)
from core.store import ResourceStore
from models.actor import Actor
from models.enums import (
    Action,
    DenyReason,
    GlobalRole,
    RelationshipKind,
    ResourceType,
    ScopedRole,
)
from models.site_object import SiteObject


# Creating these requires being the owner or an assigned DESIGNER
DESIGNER_CREATED = frozenset({ResourceType.project, ResourceType.stage})

# Organising actions open to every related actor
VISIBILITY_TYPES = frozenset(rt for rt, layout in RESOURCE_LAYOUTS.items() if layout.has_visibility)
FOLDERED_TYPES = frozenset({ResourceType.photo, ResourceType.video})


class AccessPolicy:

    def __init__(self, store: ResourceStore, resolver: Optional[HierarchyResolver] = None, matrix=None):
        self.store = store
        self.resolver = resolver or HierarchyResolver(store)
        self.matrix = ROLE_PERMISSIONS if matrix is None else matrix

    # -----------------------------------------------------
    # Relationship
    # -----------------------------------------------------
    def relationship(self, actor: Actor, site_object: SiteObject) -> Relationship:
        if actor.is_admin:
            return ADMIN
        if site_object.owner_actor_id == actor.id:
            return OWNER

        binding = self.store.get_assignment(actor.id, site_object.id)
        # A binding that disagrees with the global role is ignored;
        # an OWNER-role actor can never be "assigned".
        if binding and binding.scoped_role.value == actor.global_role.value:
            return assigned(binding.scoped_role)
        return NONE

    def _matrix_allows(self, actor: Actor, relation: Relationship, resource_type, action) -> bool:
        roles = {actor.global_role}
        if relation.is_owner:
            roles.add(GlobalRole.owner)
        for role in roles:
            if action in self.matrix.get(role, {}).get(resource_type, frozenset()):
                return True
        return False

    # -----------------------------------------------------
    # Public API
    # -----------------------------------------------------
    def authorize(
        self,
        actor: Optional[Actor],
        action: Action,
        resource_type: ResourceType,
        resource_id: Optional[int],
    ) -> Decision:
        """
        Decide whether `actor` may perform `action` on a resource.

        For `create`, `resource_id` names the container the new record
        will live in (an Object for projects and media, a Project for
        stages, a Photo for comments, ...). For `assignment`,
        `resource_id` is always the Object id.
        """
        action = Action(action)
        resource_type = ResourceType(resource_type)

        if actor is None:
            decision = Decision.deny(DenyReason.unauthenticated, "Not authenticated")
            return self._log(decision, None, action, resource_type, resource_id)

        if actor.is_admin:
            return self._log(Decision.allow(relationship=ADMIN), actor, action, resource_type, resource_id)

        target_type = resource_type
        if action == Action.create and resource_type != ResourceType.assignment:
            target_type = CONTAINER_TYPES[resource_type]
            if target_type is None:
                # Object creation is unscoped
                return self._log(Decision.allow(relationship=NONE), actor, action, resource_type, resource_id)

        resolution = self.resolver.resolve(target_type, resource_id)
        if resolution is None:
            decision = Decision.deny(DenyReason.not_found, f"{target_type} {resource_id} not found")
            return self._log(decision, actor, action, resource_type, resource_id)

        decision = self._decide(actor, action, resource_type, resolution)
        return self._log(decision, actor, action, resource_type, resource_id)

    def authorize_list(self, actor: Optional[Actor], resource_type: ResourceType, container_id: int) -> Decision:
        """
        Read check for a collection of `resource_type` records inside
        `container_id`. The returned decision feeds filter_visible().
        """
        resource_type = ResourceType(resource_type)
        container_type = CONTAINER_TYPES[resource_type]

        if actor is None:
            decision = Decision.deny(DenyReason.unauthenticated, "Not authenticated")
            return self._log(decision, None, Action.read, resource_type, container_id)
        if actor.is_admin:
            return self._log(Decision.allow(relationship=ADMIN), actor, Action.read, resource_type, container_id)
        if container_type is None:
            # Object listings are scoped by the caller's query, not by an anchor
            return Decision.allow(relationship=NONE)

        resolution = self.resolver.resolve(container_type, container_id)
        if resolution is None:
            decision = Decision.deny(DenyReason.not_found, f"{container_type} {container_id} not found")
            return self._log(decision, actor, Action.read, resource_type, container_id)

        relation = self.relationship(actor, resolution.anchor)
        decision = self._check(actor, relation, Action.read, resource_type, resolution)
        return self._log(decision, actor, Action.read, resource_type, container_id)

    def authorize_assignment(self, actor: Optional[Actor], object_id: int, scoped_role) -> Decision:
        """
        May `actor` bind someone to `object_id` with `scoped_role`?
        The owner may assign either role; an assigned DESIGNER may only
        assign BUILDERs. Target role consistency is the registry's job.
        """
        decision = self.authorize(actor, Action.create, ResourceType.assignment, object_id)
        if decision.denied or decision.relationship.is_admin or decision.relationship.is_owner:
            return decision

        try:
            role = ScopedRole(str(scoped_role).upper())
        except ValueError:
            return Decision.deny(DenyReason.role_mismatch, "Only DESIGNER or BUILDER can be assigned",
                                 object_id=decision.object_id, relationship=decision.relationship)

        if decision.relationship.scoped_role == ScopedRole.designer and role == ScopedRole.builder:
            return decision
        return Decision.deny(
            DenyReason.not_permitted,
            "Assigned designers may only assign builders",
            object_id=decision.object_id,
            relationship=decision.relationship,
        )

    def authorize_visibility(self, actor: Optional[Actor], resource_type: ResourceType, resource_id: int) -> Decision:
        """
        May `actor` show or hide this record from the owner?

        Separate from write access: any actor related to the object may
        toggle flagged media. Comment flags stay with their author.
        """
        resource_type = ResourceType(resource_type)
        if is_author_only(resource_type, Action.update):
            return self.authorize(actor, Action.update, resource_type, resource_id)
        return self._authorize_related(actor, Action.update, resource_type, resource_id, VISIBILITY_TYPES)

    def authorize_move(self, actor: Optional[Actor], resource_type: ResourceType, resource_id: int) -> Decision:
        """May `actor` file this photo/video into another folder of its object?"""
        return self._authorize_related(actor, Action.update, ResourceType(resource_type), resource_id, FOLDERED_TYPES)

    def check_update_fields(self, actor: Actor, resource_type: ResourceType, fields: Iterable[str]) -> Decision:
        """Field-level limit applied after an allowed `update`."""
        if actor.is_admin:
            return Decision.allow()
        limits = UPDATE_FIELD_LIMITS.get(ResourceType(resource_type), {})
        allowed_fields = limits.get(actor.global_role)
        if allowed_fields is None:
            return Decision.allow()

        rejected = sorted(set(fields) - allowed_fields)
        if rejected:
            return Decision.deny(
                DenyReason.not_permitted,
                f"{actor.global_role} may only change {', '.join(sorted(allowed_fields))} on {resource_type}",
            )
        return Decision.allow()

    # -----------------------------------------------------
    # Internals
    # -----------------------------------------------------
    def _authorize_related(self, actor, action, resource_type, resource_id, eligible: frozenset) -> Decision:
        """Allow any Owner/Assigned relationship on `eligible` types; the matrix is not consulted."""
        if actor is None:
            decision = Decision.deny(DenyReason.unauthenticated, "Not authenticated")
            return self._log(decision, None, action, resource_type, resource_id)
        if actor.is_admin:
            return self._log(Decision.allow(relationship=ADMIN), actor, action, resource_type, resource_id)

        if resource_type not in eligible:
            decision = Decision.deny(DenyReason.not_permitted, f"Not supported for {resource_type}")
            return self._log(decision, actor, action, resource_type, resource_id)

        resolution = self.resolver.resolve(resource_type, resource_id)
        if resolution is None:
            decision = Decision.deny(DenyReason.not_found, f"{resource_type} {resource_id} not found")
            return self._log(decision, actor, action, resource_type, resource_id)

        relation = self.relationship(actor, resolution.anchor)
        context = {
            "object_id": resolution.object_id,
            "relationship": relation,
            "record": resolution.record,
        }
        if relation.kind == RelationshipKind.none:
            decision = Decision.deny(DenyReason.no_access, f"No access to object {resolution.object_id}", **context)
        else:
            decision = Decision.allow(**context)
        return self._log(decision, actor, action, resource_type, resource_id)

    def _decide(self, actor: Actor, action: Action, resource_type: ResourceType, resolution: Resolution) -> Decision:
        relation = self.relationship(actor, resolution.anchor)
        return self._check(actor, relation, action, resource_type, resolution)

    def _check(self, actor, relation: Relationship, action, resource_type, resolution: Resolution) -> Decision:
        context = {
            "object_id": resolution.object_id,
            "relationship": relation,
            "record": resolution.record,
        }

        if relation.kind == RelationshipKind.none:
            return Decision.deny(DenyReason.no_access, f"No access to object {resolution.object_id}", **context)

        if action != Action.create and is_author_only(resource_type, action):
            author_id = resolution.record.get(layout_for(resource_type).author_field)
            if author_id is not None and author_id == actor.id:
                return Decision.allow(**context)
            return Decision.deny(DenyReason.not_permitted, f"Only the author may {action} this {resource_type}", **context)

        if not self._matrix_allows(actor, relation, resource_type, action):
            return Decision.deny(
                DenyReason.not_permitted,
                f"{actor.global_role} may not {action} {resource_type}",
                **context,
            )

        if action == Action.create and resource_type in DESIGNER_CREATED:
            is_assigned_designer = (
                relation.kind == RelationshipKind.assigned and relation.scoped_role == ScopedRole.designer
            )
            if not (relation.is_owner or is_assigned_designer):
                return Decision.deny(
                    DenyReason.not_permitted,
                    f"Only the owner or an assigned designer may create a {resource_type}",
                    **context,
                )

        return Decision.allow(**context)

    @staticmethod
    def _log(decision: Decision, actor, action, resource_type, resource_id) -> Decision:
        who = f"actor {actor.id} ({actor.global_role})" if actor else "anonymous"
        if decision.allowed:
            logger.debug(f"ALLOW {who} {action} {resource_type} {resource_id}")
        else:
            logger.info(f"DENY {who} {action} {resource_type} {resource_id}: {decision.reason} ({decision.detail})")
        return decision
