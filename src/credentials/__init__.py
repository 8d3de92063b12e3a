"""
Credential storage for Gmail access.
"""

from .store import CredentialStore

__all__ = ["CredentialStore"]
