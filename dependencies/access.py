from fastapi import Depends

from core.authorization import AccessPolicy
from core.registry import AssignmentRegistry
from core.store import ResourceStore
from core.supabase_store import SupabaseStore


# ============================================================
# Storage + policy providers (override these in tests)
# ============================================================
def get_store() -> ResourceStore:
    return SupabaseStore()


def get_access_policy(store: ResourceStore = Depends(get_store)) -> AccessPolicy:
    return AccessPolicy(store)


def get_registry(store: ResourceStore = Depends(get_store)) -> AssignmentRegistry:
    return AssignmentRegistry(store)
