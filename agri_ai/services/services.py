import logging
from typing import Optional
from supabase import create_client, Client

from agri_ai.config import SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY
from agri_ai.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Initialize Supabase
supabase_client: Optional[Client] = None
if SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY:
    try:
        supabase_client = create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)
        logger.info("Supabase initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize Supabase: {e}")


def get_supabase_client() -> Client:
    if supabase_client is None:
        raise ConfigurationError("Supabase credentials not configured")
    return supabase_client
