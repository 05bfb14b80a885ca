# core/config_validator.py

from typing import List
from core.config import settings
from core.logging_config import logger


def validate_required_config() -> List[str]:
    """
    Validate that all required environment variables are set.
    Returns list of missing required variables.
    """
    missing = []

    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")

    return missing


def validate_config_on_startup():
    """Log configuration problems; never aborts startup."""
    missing = validate_required_config()
    if missing:
        logger.error(f"Missing required configuration: {', '.join(missing)}")
        logger.error("Storage-backed endpoints will answer 500 until these are set.")
    else:
        logger.info("Required configuration present")

    if settings.MAX_HIERARCHY_HOPS < 1:
        logger.warning(
            f"MAX_HIERARCHY_HOPS={settings.MAX_HIERARCHY_HOPS} resolves nothing; every nested lookup will be NotFound"
        )

    return missing
