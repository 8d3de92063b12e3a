"""
Dependency injection and service container for FastAPI application.
"""
import hmac
from typing import Optional
from functools import lru_cache

from fastapi import Header, HTTPException

from ..supabase_sync.supabase_client import SupabaseClient
from ..credentials.store import CredentialStore
from ..main import MailboxSync
from ..utils.logger import setup_logger
from .config import settings


# Global service instances
_supabase_client: Optional[SupabaseClient] = None
_logger = None


def get_logger():
    """Get application logger instance."""
    global _logger
    if _logger is None:
        _logger = setup_logger("fastapi_app", settings.log_level)
    return _logger


def get_supabase_client() -> SupabaseClient:
    """Get Supabase client instance."""
    global _supabase_client
    if _supabase_client is None:
        _supabase_client = SupabaseClient()
    return _supabase_client


@lru_cache(maxsize=1)
def get_credential_store() -> CredentialStore:
    """Get credential store instance with caching."""
    return CredentialStore(get_supabase_client())


@lru_cache(maxsize=1)
def get_mailbox_sync() -> MailboxSync:
    """Get mailbox sync orchestrator with caching."""
    return MailboxSync(
        settings.log_level,
        supabase_client=get_supabase_client(),
        credential_store=get_credential_store(),
    )


def verify_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    """Require ``Bearer <CRON_SECRET>`` on sync triggers when a secret is configured."""
    if settings.cron_secret and not hmac.compare_digest(
        (authorization or "").encode(), f"Bearer {settings.cron_secret}".encode()
    ):
        raise HTTPException(status_code=401, detail={"message": "Unauthorized"})
