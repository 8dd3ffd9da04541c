import logging

from studio.config import Settings
from studio.database.supabase_client import create_supabase
from studio.storage.base import Storage
from studio.storage.memory import MemoryStorage
from studio.storage.remote import SupabaseStorage

logger = logging.getLogger(__name__)

__all__ = ["Storage", "MemoryStorage", "SupabaseStorage", "open_storage"]


async def open_storage(settings: Settings) -> Storage:
    """Pick the backend named by USE_SUPABASE. Called once per application."""
    if settings.use_supabase:
        client = await create_supabase(settings)
        return SupabaseStorage(client)
    if settings.is_production:
        logger.warning("USE_SUPABASE is off in production; data will not survive a restart")
    return MemoryStorage()
