import logging

from supabase import AsyncClient, acreate_client

from studio.config import Settings
from studio.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


async def create_supabase(settings: Settings) -> AsyncClient:
    """Service-role client; bypasses RLS so the API can write any row."""
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ConfigurationError("Supabase URL and Service Key are required")
    client = await acreate_client(settings.supabase_url, settings.supabase_service_key)
    logger.info(f"Supabase client created for {settings.supabase_url}")
    return client
