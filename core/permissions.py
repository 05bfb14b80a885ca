# core/permissions.py

from types import MappingProxyType

from models.enums import Action, GlobalRole, ResourceType

C, R, U, D = Action.create, Action.read, Action.update, Action.delete


# ============================================
# CENTRALIZED ROLE → RESOURCE → ACTIONS MAP
# ============================================
# Baseline capability only. The decision function narrows it
# with the actor's relationship to the anchor Object.
# ADMIN is deliberately absent: it is checked before this table.
_ROLE_PERMISSIONS = {

    # =====================================================
    # OWNER ("customer"): reads the site, manages own uploads
    # =====================================================
    GlobalRole.owner: {
        ResourceType.object: {R, U, D},
        ResourceType.project: {R},
        ResourceType.stage: {R},
        ResourceType.document: {C, R, U, D},
        ResourceType.photo: {C, R, D},
        ResourceType.video: {C, R, D},
        ResourceType.bim_model: {R},
        ResourceType.folder: {C, R, U, D},
        ResourceType.comment: {C, R},
        ResourceType.model_comment: {C, R},
        ResourceType.assignment: {C, R, D},
    },

    # =====================================================
    # DESIGNER: projects, stages, design documentation
    # =====================================================
    GlobalRole.designer: {
        ResourceType.object: {R, U},
        ResourceType.project: {C, R, U, D},
        ResourceType.stage: {C, R, U, D},
        ResourceType.document: {C, R, U},
        ResourceType.photo: {R},
        ResourceType.video: {C, R},
        ResourceType.bim_model: {C, R, U},
        ResourceType.folder: {C, R, U, D},
        ResourceType.comment: {C, R},
        ResourceType.model_comment: {C, R},
        ResourceType.assignment: {C, R},
    },

    # =====================================================
    # BUILDER: site photos/videos, stage status
    # =====================================================
    GlobalRole.builder: {
        ResourceType.object: {R},
        ResourceType.project: {R},
        ResourceType.stage: {R, U},
        ResourceType.document: {R},
        ResourceType.photo: {C, R, U, D},
        ResourceType.video: {C, R, U, D},
        ResourceType.bim_model: {R},
        ResourceType.folder: {C, R, U, D},
        ResourceType.comment: {C, R},
        ResourceType.model_comment: {C, R},
        ResourceType.assignment: {R},
    },
}


def _freeze(table: dict) -> MappingProxyType:
    return MappingProxyType({
        role: MappingProxyType({
            resource: frozenset(actions) for resource, actions in resources.items()
        })
        for role, resources in table.items()
    })


ROLE_PERMISSIONS = _freeze(_ROLE_PERMISSIONS)


# ============================================
# AUTHORSHIP-SCOPED ACTIONS
# ============================================
# Never granted by the matrix; only the authoring actor (or ADMIN).
AUTHOR_ONLY_ACTIONS = MappingProxyType({
    ResourceType.comment: frozenset({U, D}),
    ResourceType.model_comment: frozenset({U, D}),
    ResourceType.bim_model: frozenset({D}),
})


# ============================================
# FIELD-LEVEL UPDATE LIMITS
# ============================================
# Roles listed here may only touch the given fields on update.
UPDATE_FIELD_LIMITS = MappingProxyType({
    ResourceType.stage: MappingProxyType({
        GlobalRole.builder: frozenset({"status"}),
    }),
})


def allowed_actions(role: GlobalRole, resource_type: ResourceType) -> frozenset:
    """Baseline actions for a role on a resource type (ADMIN gets everything)."""
    if role == GlobalRole.admin:
        return frozenset(Action)
    return ROLE_PERMISSIONS.get(role, MappingProxyType({})).get(resource_type, frozenset())


def role_allows(role: GlobalRole, resource_type: ResourceType, action: Action) -> bool:
    return action in allowed_actions(role, resource_type)


def is_author_only(resource_type: ResourceType, action: Action) -> bool:
    return action in AUTHOR_ONLY_ACTIONS.get(resource_type, frozenset())
