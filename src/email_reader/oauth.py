"""
Google OAuth consent flow used to obtain per-purpose refresh tokens.
"""
import json
from typing import Optional

from google_auth_oauthlib.flow import Flow

from ..credentials.store import CredentialStore
from ..utils.models import SyncPurpose
from ..utils.logger import get_logger
from config.settings import gmail_config

logger = get_logger("gmail_oauth")


def _build_flow() -> Flow:
    if not gmail_config.is_configured():
        raise RuntimeError("Missing Google Client ID or Secret")
    return Flow.from_client_config(
        gmail_config.client_config(),
        scopes=gmail_config.scopes,
        redirect_uri=gmail_config.redirect_uri,
        autogenerate_code_verifier=False,
    )


def build_auth_url(purpose: SyncPurpose) -> str:
    """Consent URL that asks for offline access so a refresh token is issued."""
    flow = _build_flow()
    url, _ = flow.authorization_url(
        access_type="offline",
        prompt="consent",
        state=json.dumps({"type": purpose.value}),
    )
    logger.info("Generated Gmail auth URL", purpose=purpose.value, redirect_uri=gmail_config.redirect_uri)
    return url


def purpose_from_state(state: Optional[str]) -> SyncPurpose:
    """Read the purpose back out of the OAuth state parameter."""
    if not state:
        return SyncPurpose.TRANSACTIONS
    try:
        return SyncPurpose.from_value(json.loads(state).get("type"))
    except (ValueError, AttributeError):
        logger.warning("Failed to parse state param", state=state)
        return SyncPurpose.TRANSACTIONS


def exchange_code(code: str, purpose: SyncPurpose, credential_store: CredentialStore) -> bool:
    """
    Exchange an authorization code and store the refresh token.

    Returns:
        True if a refresh token was issued and stored. Google omits it when
        the account already granted access without a forced consent prompt.
    """
    flow = _build_flow()
    flow.fetch_token(code=code)
    refresh_token = flow.credentials.refresh_token
    if not refresh_token:
        logger.warning("No refresh token received", purpose=purpose.value)
        return False
    credential_store.save_refresh_token(purpose, refresh_token)
    return True
