"""
Supabase client helper for storing synced transactions and bookings.
"""
from datetime import datetime
from typing import Optional, Dict, Any

from supabase import create_client

from ..utils.models import BookingData, TransactionData, SyncResult
from ..utils.logger import get_logger
from config.settings import supabase_config, app_config


def _is_unique_violation(error: Exception) -> bool:
    text = str(error).lower()
    return "duplicate key" in text or "23505" in text


class SupabaseClient:
    """Supabase client for transaction and booking persistence."""

    def __init__(self):
        self.logger = get_logger("supabase_client")
        self.client = None
        self.initialized = False

    def initialize(self) -> bool:
        """Initialize Supabase client from environment configuration."""
        try:
            if self.initialized:
                return True

            auth_key = supabase_config.get_auth_key()
            if not supabase_config.url or not auth_key:
                self.logger.error("Supabase configuration missing", url=bool(supabase_config.url))
                return False

            self.client = create_client(supabase_config.url, auth_key)
            self.initialized = True
            self.logger.info("Supabase client initialized successfully", url=supabase_config.url)
            return True
        except Exception as e:
            self.logger.error("Failed to initialize Supabase client", error=str(e))
            self.initialized = False
            return False

    def _ensure_initialized(self):
        if not self.initialized and not self.initialize():
            raise RuntimeError("Supabase client not initialized")

    # Bookings
    def get_booking_by_book_number(self, book_number: str) -> Optional[Dict[str, Any]]:
        """Look up a booking by its external booking identifier, across all sources."""
        self._ensure_initialized()
        res = (
            self.client.table(app_config.bookings_collection)
            .select("*")
            .eq("book_number", book_number)
            .limit(1)
            .execute()
        )
        rows = getattr(res, "data", None) or []
        return rows[0] if rows else None

    def sync_booking(self, booking_data: BookingData, dry_run: bool = False) -> SyncResult:
        """Insert a booking unless one with the same book number exists."""
        key = booking_data.book_number
        try:
            if not self.initialized and not self.initialize():
                return SyncResult(
                    success=False,
                    error_message="Failed to initialize Supabase client",
                    record_key=key,
                )

            if self.get_booking_by_book_number(key) is not None:
                self.logger.info("Booking already exists in Supabase", book_number=key)
                return SyncResult(success=True, is_new=False, record_key=key)

            if dry_run:
                self.logger.info("DRY RUN: Would add new booking to Supabase", book_number=key)
                return SyncResult(success=True, is_new=True, record_key=key)

            (
                self.client.table(app_config.bookings_collection)
                .insert(booking_data.to_dict())
                .execute()
            )

            self.logger.info(
                "Successfully added booking to Supabase",
                book_number=key,
                platform=booking_data.platform.value,
            )
            return SyncResult(success=True, is_new=True, record_key=key)
        except Exception as e:
            if _is_unique_violation(e):
                # Another writer inserted it between the lookup and the insert
                self.logger.info("Booking rejected by unique constraint", book_number=key)
                return SyncResult(success=True, is_new=False, record_key=key)
            self.logger.error("Error syncing booking to Supabase", book_number=key, error=str(e))
            return SyncResult(success=False, error_message=str(e), record_key=key)

    # Transactions
    def find_transaction(self, description: str, amount: float, date: datetime) -> Optional[Dict[str, Any]]:
        """Exact match on description, amount and date."""
        self._ensure_initialized()
        res = (
            self.client.table(app_config.transactions_collection)
            .select("*")
            .eq("description", description)
            .eq("amount", amount)
            .eq("date", date.isoformat())
            .limit(1)
            .execute()
        )
        rows = getattr(res, "data", None) or []
        return rows[0] if rows else None

    def sync_transaction(self, transaction: TransactionData, dry_run: bool = False) -> SyncResult:
        """Insert a transaction unless an identical one is already stored."""
        key = f"{transaction.description}|{transaction.amount}|{transaction.date.isoformat()}"
        try:
            if not self.initialized and not self.initialize():
                return SyncResult(
                    success=False,
                    error_message="Failed to initialize Supabase client",
                    record_key=key,
                )

            existing = self.find_transaction(transaction.description, transaction.amount, transaction.date)
            if existing is not None:
                self.logger.info("Transaction already exists in Supabase", key=key)
                return SyncResult(success=True, is_new=False, record_key=key)

            if dry_run:
                self.logger.info("DRY RUN: Would add new transaction to Supabase", key=key)
                return SyncResult(success=True, is_new=True, record_key=key)

            (
                self.client.table(app_config.transactions_collection)
                .insert(transaction.to_dict())
                .execute()
            )
            self.logger.info("Successfully added transaction to Supabase", key=key, amount=transaction.amount)
            return SyncResult(success=True, is_new=True, record_key=key)
        except Exception as e:
            self.logger.error("Error syncing transaction to Supabase", key=key, error=str(e))
            return SyncResult(success=False, error_message=str(e), record_key=key)

    # System settings (key/value rows)
    def get_setting(self, key: str) -> Optional[str]:
        self._ensure_initialized()
        res = (
            self.client.table(app_config.settings_collection)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        rows = getattr(res, "data", None) or []
        return rows[0].get("value") if rows else None

    def upsert_setting(self, key: str, value: str) -> None:
        self._ensure_initialized()
        (
            self.client.table(app_config.settings_collection)
            .upsert(
                {"key": key, "value": value, "updated_at": datetime.utcnow().isoformat()},
                on_conflict="key",
            )
            .execute()
        )
        self.logger.info("Stored setting", key=key)

    def delete_setting(self, key: str) -> None:
        self._ensure_initialized()
        self.client.table(app_config.settings_collection).delete().eq("key", key).execute()
        self.logger.info("Deleted setting", key=key)

    def __enter__(self):
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        pass
