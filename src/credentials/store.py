"""
Per-purpose storage of Gmail refresh tokens.
"""
import base64
import hashlib
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from ..supabase_sync.supabase_client import SupabaseClient
from ..utils.models import SyncPurpose
from ..utils.logger import get_logger
from config.settings import app_config, supabase_config


class CredentialStore:
    """Refresh tokens keyed by sync purpose, encrypted at rest in Supabase."""

    def __init__(self, supabase_client: Optional[SupabaseClient] = None):
        self.logger = get_logger("credential_store")
        self.supabase = supabase_client or SupabaseClient()
        self.fernet = self._build_fernet()

    def _build_fernet(self) -> Fernet:
        secret = app_config.encryption_secret or supabase_config.get_auth_key()
        if not secret:
            raise RuntimeError("ENCRYPTION_SECRET or a Supabase key is required to store credentials")
        key = self._derive_key(secret, app_config.encryption_salt)
        return Fernet(key)

    def _derive_key(self, secret: str, salt: str) -> bytes:
        raw = hashlib.pbkdf2_hmac("sha256", secret.encode(), salt.encode(), 390000, dklen=32)
        return base64.urlsafe_b64encode(raw)

    def get_refresh_token(self, purpose: SyncPurpose) -> Optional[str]:
        """Return the decrypted refresh token, or None if none is usable."""
        stored = self.supabase.get_setting(purpose.setting_key)
        if not stored:
            return None
        try:
            return self.fernet.decrypt(stored.encode()).decode()
        except InvalidToken:
            self.logger.warning("Stored refresh token could not be decrypted", purpose=purpose.value)
            return None

    def save_refresh_token(self, purpose: SyncPurpose, refresh_token: str) -> None:
        encrypted = self.fernet.encrypt(refresh_token.encode()).decode()
        self.supabase.upsert_setting(purpose.setting_key, encrypted)
        self.logger.info("Saved refresh token", purpose=purpose.value, key=purpose.setting_key)

    def invalidate(self, purpose: SyncPurpose) -> None:
        """Purge a rejected token so the next sync asks for re-authorization."""
        self.supabase.delete_setting(purpose.setting_key)
        self.logger.warning("Invalidated refresh token", purpose=purpose.value)

    def clear_all(self) -> int:
        for purpose in SyncPurpose:
            self.invalidate(purpose)
        return len(SyncPurpose)
