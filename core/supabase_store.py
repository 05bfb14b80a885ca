# core/supabase_store.py

from typing import Callable, List, Optional

from core.errors import StorageError, extract_supabase_error
from core.logging_config import logger
from core.store import ResourceStore
from core.supabase_client import get_supabase_client
from core.utils import sanitize
from models.actor import Actor
from models.assignment import Assignment
from models.enums import ScopedRole
from models.site_object import SiteObject


ACTORS_TABLE = "actors"
OBJECTS_TABLE = "objects"
ASSIGNMENTS_TABLE = "object_assignments"


class SupabaseStore(ResourceStore):
    """
    ResourceStore over the Supabase (PostgREST) client.

    Every query goes through _execute so that any client failure
    surfaces as StorageError instead of an ad-hoc exception type.
    """

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = get_supabase_client()
        if self._client is None:
            raise StorageError("Supabase client", "not configured")
        return self._client

    def _execute(self, operation: str, build: Callable):
        try:
            return build(self.client).execute()
        except StorageError:
            raise
        except Exception as e:
            detail = extract_supabase_error(e)
            logger.error(f"{operation}: {detail}")
            raise StorageError(operation, detail) from e

    @staticmethod
    def _first(result) -> Optional[dict]:
        rows = result.data or []
        return rows[0] if rows else None

    # -----------------------------------------------------
    # Actors
    # -----------------------------------------------------
    def get_actor(self, actor_id: int) -> Optional[Actor]:
        result = self._execute(
            f"Failed to fetch actor {actor_id}",
            lambda c: c.table(ACTORS_TABLE).select("*").eq("id", actor_id).limit(1),
        )
        row = self._first(result)
        return Actor(**row) if row else None

    def get_actor_by_auth_id(self, auth_user_id: str) -> Optional[Actor]:
        result = self._execute(
            "Failed to fetch actor by auth id",
            lambda c: c.table(ACTORS_TABLE).select("*").eq("auth_user_id", auth_user_id).limit(1),
        )
        row = self._first(result)
        return Actor(**row) if row else None

    # -----------------------------------------------------
    # Objects
    # -----------------------------------------------------
    def get_object(self, object_id: int) -> Optional[SiteObject]:
        row = self.get_record(OBJECTS_TABLE, object_id)
        return SiteObject(**row) if row else None

    def create_object(self, owner_actor_id: int, data: dict) -> SiteObject:
        row = self.insert_record(OBJECTS_TABLE, {**data, "owner_actor_id": owner_actor_id})
        return SiteObject(**row)

    def update_object(self, object_id: int, data: dict) -> Optional[SiteObject]:
        row = self.update_record(OBJECTS_TABLE, object_id, data)
        return SiteObject(**row) if row else None

    def delete_object(self, object_id: int) -> bool:
        return self.delete_record(OBJECTS_TABLE, object_id)

    # -----------------------------------------------------
    # Generic records
    # -----------------------------------------------------
    def get_record(self, table: str, record_id: int) -> Optional[dict]:
        result = self._execute(
            f"Failed to fetch from {table}",
            lambda c: c.table(table).select("*").eq("id", record_id).limit(1),
        )
        return self._first(result)

    def list_records(self, table: str, filters: Optional[dict] = None) -> List[dict]:
        def build(c):
            query = c.table(table).select("*")
            for key, val in (filters or {}).items():
                query = query.eq(key, val)
            return query.order("id", desc=True)

        result = self._execute(f"Failed to list {table}", build)
        return result.data or []

    def insert_record(self, table: str, data: dict) -> dict:
        cleaned = sanitize(data)
        result = self._execute(
            f"Failed to insert into {table}",
            lambda c: c.table(table).insert(cleaned, returning="representation"),
        )
        row = self._first(result)
        if row is None:
            raise StorageError(f"Failed to insert into {table}", "no row returned")
        return row

    def update_record(self, table: str, record_id: int, data: dict) -> Optional[dict]:
        cleaned = sanitize(data)
        result = self._execute(
            f"Failed to update {table}",
            lambda c: c.table(table).update(cleaned, returning="representation").eq("id", record_id),
        )
        return self._first(result)

    def delete_record(self, table: str, record_id: int) -> bool:
        result = self._execute(
            f"Failed to delete from {table}",
            lambda c: c.table(table).delete().eq("id", record_id),
        )
        return bool(result.data)

    # -----------------------------------------------------
    # Assignments
    # -----------------------------------------------------
    def get_assignment(self, actor_id: int, object_id: int) -> Optional[Assignment]:
        result = self._execute(
            "Failed to fetch assignment",
            lambda c: (
                c.table(ASSIGNMENTS_TABLE)
                .select("*")
                .eq("actor_id", actor_id)
                .eq("object_id", object_id)
                .limit(1)
            ),
        )
        row = self._first(result)
        return Assignment(**row) if row else None

    def list_assignments(self, object_id: int) -> List[Assignment]:
        result = self._execute(
            "Failed to list assignments",
            lambda c: (
                c.table(ASSIGNMENTS_TABLE)
                .select("*")
                .eq("object_id", object_id)
                .order("assigned_at", desc=True)
            ),
        )
        return [Assignment(**row) for row in (result.data or [])]

    def upsert_assignment(self, actor_id: int, object_id: int, scoped_role: ScopedRole) -> Assignment:
        payload = {
            "actor_id": actor_id,
            "object_id": object_id,
            "scoped_role": str(scoped_role),
        }
        # on_conflict makes Postgres serialize racing upserts on the pair
        result = self._execute(
            "Failed to upsert assignment",
            lambda c: c.table(ASSIGNMENTS_TABLE).upsert(payload, on_conflict="actor_id,object_id"),
        )
        row = self._first(result)
        if row is None:
            raise StorageError("Failed to upsert assignment", "no row returned")
        return Assignment(**row)

    def delete_assignment(self, actor_id: int, object_id: int) -> bool:
        result = self._execute(
            "Failed to delete assignment",
            lambda c: (
                c.table(ASSIGNMENTS_TABLE)
                .delete()
                .eq("actor_id", actor_id)
                .eq("object_id", object_id)
            ),
        )
        return bool(result.data)
