"""
Gmail API client for reading bank alerts and booking vouchers.
"""
from typing import List, Optional

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from ..credentials.store import CredentialStore
from ..utils.errors import AuthorizationRequiredError
from ..utils.models import RawMessage, SyncPurpose
from ..utils.logger import get_logger
from config.settings import gmail_config


class GmailClient:
    """Read-only Gmail API client bound to the credential of one sync purpose."""

    def __init__(self, purpose: SyncPurpose, credential_store: CredentialStore):
        self.logger = get_logger("gmail_client")
        self.purpose = purpose
        self.credential_store = credential_store
        self.service = None

    def connect(self):
        """
        Exchange the stored refresh token for an access token and build the
        Gmail service.

        Raises:
            AuthorizationRequiredError: no token is stored, or Google rejected it
        """
        refresh_token = self.credential_store.get_refresh_token(self.purpose)
        if not refresh_token:
            raise AuthorizationRequiredError(self.purpose)

        creds = Credentials(
            token=None,
            refresh_token=refresh_token,
            token_uri=gmail_config.token_uri,
            client_id=gmail_config.client_id,
            client_secret=gmail_config.client_secret,
            scopes=gmail_config.scopes,
        )

        try:
            creds.refresh(Request())
        except RefreshError as e:
            if "invalid_grant" in str(e):
                self.credential_store.invalidate(self.purpose)
                raise AuthorizationRequiredError(
                    self.purpose, "Gmail refresh token is invalid or expired"
                ) from e
            raise

        self.service = build("gmail", "v1", credentials=creds, cache_discovery=False)
        self.logger.info("Connected to Gmail API", purpose=self.purpose.value)
        return self

    def list_message_ids(self, query: str, max_results: int) -> List[str]:
        """Return ids of messages matching a Gmail search query, newest first."""
        response = (
            self.service.users()
            .messages()
            .list(userId=gmail_config.user_id, q=query, maxResults=max_results)
            .execute()
        )
        ids = [m["id"] for m in response.get("messages") or [] if m.get("id")]
        self.logger.info("Found messages", query=query, count=len(ids))
        return ids

    def get_message(self, message_id: str) -> Optional[RawMessage]:
        """Fetch one message with its full part tree."""
        resource = (
            self.service.users()
            .messages()
            .get(userId=gmail_config.user_id, id=message_id, format="full")
            .execute()
        )
        if not resource.get("payload"):
            return None
        return RawMessage.from_api(resource)
