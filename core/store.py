# core/store.py

"""
Storage collaborator contract.

The authorization core only ever talks to storage through this
interface. Implementations raise core.errors.StorageError for any
connectivity or query failure; "not found" is always a None / empty
return, never an exception.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from models.actor import Actor
from models.assignment import Assignment
from models.enums import ScopedRole
from models.site_object import SiteObject


class ResourceStore(ABC):

    # -----------------------------------------------------
    # Actors
    # -----------------------------------------------------
    @abstractmethod
    def get_actor(self, actor_id: int) -> Optional[Actor]:
        ...

    @abstractmethod
    def get_actor_by_auth_id(self, auth_user_id: str) -> Optional[Actor]:
        ...

    # -----------------------------------------------------
    # Objects
    # -----------------------------------------------------
    @abstractmethod
    def get_object(self, object_id: int) -> Optional[SiteObject]:
        ...

    @abstractmethod
    def create_object(self, owner_actor_id: int, data: dict) -> SiteObject:
        ...

    @abstractmethod
    def update_object(self, object_id: int, data: dict) -> Optional[SiteObject]:
        ...

    @abstractmethod
    def delete_object(self, object_id: int) -> bool:
        """Nested resources are removed by the storage layer's cascade."""

    # -----------------------------------------------------
    # Generic nested records (keyed by table name)
    # -----------------------------------------------------
    @abstractmethod
    def get_record(self, table: str, record_id: int) -> Optional[dict]:
        ...

    @abstractmethod
    def list_records(self, table: str, filters: Optional[dict] = None) -> List[dict]:
        ...

    @abstractmethod
    def insert_record(self, table: str, data: dict) -> dict:
        ...

    @abstractmethod
    def update_record(self, table: str, record_id: int, data: dict) -> Optional[dict]:
        ...

    @abstractmethod
    def delete_record(self, table: str, record_id: int) -> bool:
        ...

    # -----------------------------------------------------
    # Assignments
    # -----------------------------------------------------
    @abstractmethod
    def get_assignment(self, actor_id: int, object_id: int) -> Optional[Assignment]:
        ...

    @abstractmethod
    def list_assignments(self, object_id: int) -> List[Assignment]:
        ...

    @abstractmethod
    def upsert_assignment(self, actor_id: int, object_id: int, scoped_role: ScopedRole) -> Assignment:
        """Must be backed by the (actor_id, object_id) unique constraint."""

    @abstractmethod
    def delete_assignment(self, actor_id: int, object_id: int) -> bool:
        ...
