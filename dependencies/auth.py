from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from core.errors import StorageError, handle_storage_error
from core.logging_config import logger
from core.store import ResourceStore
from core.supabase_client import get_supabase_client
from dependencies.access import get_store
from models.actor import Actor


bearer_scheme = HTTPBearer(auto_error=False)


# ============================================================
# AUTH DECODING (Supabase: validates JWT, then maps to an actor row)
# ============================================================
def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    store: ResourceStore = Depends(get_store),
) -> Actor:

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None or not credentials.credentials:
        raise unauthorized

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        auth_resp = client.auth.get_user(credentials.credentials)
        if not auth_resp or not auth_resp.user:
            raise unauthorized
        auth_user = auth_resp.user
    except HTTPException:
        raise
    except Exception:
        raise unauthorized

    # ---------------------------------------------------------
    # Map the Auth UID to the actor record (integer id + role)
    # ---------------------------------------------------------
    try:
        actor = store.get_actor_by_auth_id(auth_user.id)
    except StorageError as e:
        raise handle_storage_error(e, "Failed to load actor")

    if actor is None:
        logger.warning(f"Authenticated user {auth_user.id} has no actor record")
        raise unauthorized

    return actor
