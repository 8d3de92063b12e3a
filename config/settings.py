"""
Configuration settings for the Hostel Mailbox Sync system.
"""
import os
from typing import Dict, List
from dataclasses import dataclass
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass
class GmailConfig:
    """Gmail API / Google OAuth configuration settings."""
    client_id: str = os.getenv("GOOGLE_CLIENT_ID", "")
    client_secret: str = os.getenv("GOOGLE_CLIENT_SECRET", "")
    redirect_uri: str = os.getenv(
        "GOOGLE_REDIRECT_URI", "http://127.0.0.1:8001/api/v1/gmail/callback"
    )
    auth_uri: str = "https://accounts.google.com/o/oauth2/auth"
    token_uri: str = os.getenv("GOOGLE_TOKEN_URI", "https://oauth2.googleapis.com/token")
    user_id: str = "me"

    scopes: List[str] = None

    # Gmail search queries per sync purpose
    search_queries: Dict[str, str] = None

    # Messages fetched per sync run
    max_results: Dict[str, int] = None

    def __post_init__(self):
        if self.scopes is None:
            self.scopes = ["https://www.googleapis.com/auth/gmail.readonly"]
        if self.search_queries is None:
            self.search_queries = {
                "transactions": 'from:info@sbmbank.co.in subject:"Credit Transaction Alert"',
                "bookings": 'from:no-reply@go-mmt.com subject:"New Booking Received"',
            }
        if self.max_results is None:
            self.max_results = {
                "transactions": int(os.getenv("TRANSACTIONS_MAX_RESULTS", "5")),
                "bookings": int(os.getenv("BOOKINGS_MAX_RESULTS", "50")),
            }

    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def client_config(self) -> Dict[str, Dict[str, object]]:
        """OAuth client config in the shape google-auth-oauthlib expects."""
        return {
            "web": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": self.auth_uri,
                "token_uri": self.token_uri,
                "redirect_uris": [self.redirect_uri],
            }
        }


@dataclass
class SupabaseConfig:
    """Supabase configuration settings."""
    url: str = os.getenv("SUPABASE_URL", "")
    anon_key: str = os.getenv("SUPABASE_ANON_KEY", "")
    service_role_key: str = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")

    def get_auth_key(self) -> str:
        """Prefer service role key for server-side operations when available."""
        return self.service_role_key or self.anon_key


@dataclass
class AppConfig:
    """Application configuration settings."""

    # Data storage table names
    bookings_collection: str = "bookings"
    transactions_collection: str = "transactions"
    settings_collection: str = "system_settings"

    # Refresh tokens are encrypted at rest with a key derived from these
    encryption_secret: str = os.getenv("ENCRYPTION_SECRET", "")
    encryption_salt: str = os.getenv("ENCRYPTION_SALT", "hostel-mailbox-sync")

    # Defaults for fields the booking voucher does not carry
    booking_country: str = "IN"
    booking_unit_type: str = "Dorm"
    booking_remarks: str = "Synced from Gmail"

    # Defaults for bank credit alerts
    transaction_category: str = "uncategorized"
    transaction_payment_method: str = "upi"
    transaction_description: str = "SBM Bank Transaction"

    # Characters of body logged when a message cannot be parsed
    snippet_lengths: Dict[str, int] = None

    def __post_init__(self):
        if self.snippet_lengths is None:
            self.snippet_lengths = {"transactions": 200, "bookings": 500}


@dataclass
class APIConfig:
    """API and URL configuration settings."""
    base_url: str = os.getenv("API_BASE_URL", "http://127.0.0.1:8001")
    api_prefix: str = "/api/v1"

    def auth_path(self, purpose: str) -> str:
        return f"{self.api_prefix}/gmail/auth?type={purpose}"


gmail_config = GmailConfig()
supabase_config = SupabaseConfig()
app_config = AppConfig()
api_config = APIConfig()
