# core/errors.py

from fastapi import HTTPException

from models.enums import DenyReason


# -----------------------------------------------------
# Deny reason → HTTP status
# Callers must use this table for every resource type.
# -----------------------------------------------------
HTTP_STATUS_BY_REASON = {
    DenyReason.unauthenticated: 401,
    DenyReason.no_access: 403,
    DenyReason.not_permitted: 403,
    DenyReason.role_mismatch: 403,
    DenyReason.not_found: 404,
    DenyReason.conflict: 400,
}


class StorageError(Exception):
    """
    Storage or connectivity failure while resolving an authorization
    question. The only condition that escapes the core as an exception.
    """

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation}: {detail}" if detail else operation)


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1: Supabase Auth / GoTrue errors
    if hasattr(error, "message"):
        try:
            return str(error.message)
        except Exception:
            pass

    # Case 2: Supabase errors with args (common)
    if hasattr(error, "args") and error.args:
        try:
            return str(error.args[0])
        except Exception:
            pass

    # Case 3: Plain string fallback
    try:
        return str(error)
    except Exception:
        return "Unknown Supabase error"


def decision_to_http(decision) -> HTTPException:
    """
    Translate a denied Decision into an HTTPException.
    Returns (doesn't raise) so caller can customize or re-raise.
    """
    status_code = HTTP_STATUS_BY_REASON.get(decision.reason, 403)
    detail = decision.detail or str(decision.reason)
    return HTTPException(status_code=status_code, detail=detail)


def raise_for_decision(decision):
    """Raise the mapped HTTPException if the decision is a denial."""
    if not decision.allowed:
        raise decision_to_http(decision)
    return decision


def handle_storage_error(error: Exception, operation: str = "Database operation") -> HTTPException:
    """
    Handle storage errors with consistent formatting.
    Returns HTTPException (doesn't raise) so caller can customize or re-raise.
    """
    from core.logging_config import logger

    if isinstance(error, StorageError):
        error_detail = error.detail or error.operation
    else:
        error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    error_lower = error_detail.lower()
    if "duplicate" in error_lower or "unique" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Record already exists")
    return HTTPException(status_code=500, detail=f"{operation} failed")
