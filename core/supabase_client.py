# core/supabase_client.py

from typing import Optional

from supabase import create_client, Client
from core.config import settings
from core.logging_config import logger


# Tables the health check probes; the authorization core cannot answer without them
HEALTH_TABLES = ["actors", "objects", "object_assignments", "projects"]


def supabase_configured() -> bool:
    return bool(settings.SUPABASE_URL and settings.SUPABASE_SERVICE_ROLE_KEY)


# ============================================================
# Client factory (service role: bypasses row-level security,
# so every query must already be authorized by AccessPolicy)
# ============================================================
def get_supabase_client() -> Optional[Client]:
    """
    Build a service-role client, or None when credentials are missing
    or the client cannot be created. Callers decide how fatal that is.
    """
    if not supabase_configured():
        logger.error(
            "Supabase not configured "
            f"(URL: {'SET' if settings.SUPABASE_URL else 'MISSING'}, "
            f"SERVICE ROLE KEY: {'SET' if settings.SUPABASE_SERVICE_ROLE_KEY else 'MISSING'})"
        )
        return None

    try:
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    except Exception as e:
        logger.error(f"Supabase Init Error: {e}", exc_info=True)
        return None


# ============================================================
# Health probe
# ============================================================
def _probe_table(client, table: str) -> dict:
    try:
        res = client.table(table).select("id").limit(1).execute()
        return {"status": "ok", "rows_found": len(res.data or [])}
    except Exception as err:
        logger.warning(f"Health probe failed on {table}: {err}")
        return {"status": "error", "detail": str(err)}


def ping_supabase(client=None) -> dict:
    """
    One-row probe of each table in HEALTH_TABLES.
    Status is `ok`, `degraded` (some tables failed), `not_configured`
    or `error` (client could not be built).
    """
    if client is None:
        if not supabase_configured():
            return {"service": "Supabase", "status": "not_configured"}
        client = get_supabase_client()
        if client is None:
            return {"service": "Supabase", "status": "error", "detail": "client init failed"}

    tables = {t: _probe_table(client, t) for t in HEALTH_TABLES}
    healthy = all(r["status"] == "ok" for r in tables.values())
    return {
        "service": "Supabase",
        "status": "ok" if healthy else "degraded",
        "tables": tables,
    }
