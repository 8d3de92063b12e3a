"""
Exceptions raised by the mailbox sync.
"""
from typing import Optional

from .models import SyncPurpose
from config.settings import api_config


class AuthorizationRequiredError(Exception):
    """The stored Gmail credential for a purpose is missing or was rejected."""

    def __init__(self, purpose: SyncPurpose, reason: Optional[str] = None):
        self.purpose = purpose
        self.reason = reason or f"Gmail refresh token not found for {purpose.value}"
        self.auth_url = api_config.auth_path(purpose.value)
        super().__init__(f"{self.reason}. Please re-authorize at: {self.auth_url}")
