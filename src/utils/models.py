"""
Data models for the Hostel Mailbox Sync system.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any, List
from enum import Enum


class Platform(Enum):
    """Booking sources whose vouchers are parsed."""
    MAKEMYTRIP = "MakeMyTrip"


class SyncPurpose(Enum):
    """Mailbox sync jobs, each with its own stored Gmail credential."""
    TRANSACTIONS = "transactions"
    BOOKINGS = "bookings"

    @property
    def setting_key(self) -> str:
        """Key of the refresh token row in the settings table."""
        if self is SyncPurpose.BOOKINGS:
            return "gmail_refresh_token_bookings"
        return "gmail_refresh_token"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "SyncPurpose":
        """Resolve a purpose name, defaulting to transactions."""
        if value and value.lower() == cls.BOOKINGS.value:
            return cls.BOOKINGS
        return cls.TRANSACTIONS


@dataclass
class MessagePart:
    """One node of a message's MIME part tree."""
    mime_type: str = ""
    data: Optional[str] = None
    parts: List["MessagePart"] = field(default_factory=list)
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "MessagePart":
        """Build a part tree from a Gmail API ``payload`` resource."""
        body = payload.get("body") or {}
        headers = {}
        for header in payload.get("headers") or []:
            name = header.get("name")
            if name and name not in headers:
                headers[name] = header.get("value", "")
        return cls(
            mime_type=payload.get("mimeType", ""),
            data=body.get("data") or None,
            parts=[cls.from_api(p) for p in payload.get("parts") or []],
            headers=headers,
        )


@dataclass
class RawMessage:
    """Email fetched for a single sync run, discarded after parsing."""
    message_id: str
    headers: Dict[str, str]
    payload: MessagePart

    @classmethod
    def from_api(cls, resource: Dict[str, Any]) -> "RawMessage":
        payload = MessagePart.from_api(resource.get("payload") or {})
        return cls(
            message_id=resource.get("id", ""),
            headers=dict(payload.headers),
            payload=payload,
        )


@dataclass
class TransactionData:
    """Credit transaction extracted from a bank alert."""
    amount: float
    description: str
    date: datetime
    category: str = "uncategorized"
    type: str = "credit"
    payment_method: str = "upi"
    status: str = "success"
    email_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert transaction to a dictionary for storage."""
        now = datetime.utcnow().isoformat()
        return {
            'amount': self.amount,
            'type': self.type,
            'category': self.category,
            'description': self.description,
            'date': self.date.isoformat(),
            'payment_method': self.payment_method,
            'status': self.status,
            'created_at': now,
            'updated_at': now,
        }

    def __str__(self) -> str:
        return (f"Transaction(amount={self.amount}, "
                f"description='{self.description}', "
                f"date='{self.date}')")


@dataclass
class BookingData:
    """Booking information extracted from a voucher email."""
    book_number: str
    platform: Platform
    guest_names: str
    check_in: datetime
    check_out: datetime
    booked_on: datetime
    price: str
    duration_nights: int
    status: str = "confirmed"
    rooms: int = 1
    persons: int = 1
    commission_percent: float = 0
    commission_amount: str = "0"
    remarks: str = "Synced from Gmail"
    booker_country: str = "IN"
    unit_type: str = "Dorm"
    phone_number: int = 0
    advance_received: bool = True
    advance_amount: Optional[float] = None
    booking_status: str = "active"
    email_id: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.platform, str):
            self.platform = Platform(self.platform)

    def to_dict(self) -> Dict[str, Any]:
        """Convert booking data to a dictionary for storage."""
        now = datetime.utcnow().isoformat()
        return {
            'book_number': self.book_number,
            'booked_by': self.platform.value,
            'guest_names': self.guest_names,
            'check_in': self.check_in.isoformat(),
            'check_out': self.check_out.isoformat(),
            'booked_on': self.booked_on.isoformat(),
            'status': self.status,
            'rooms': self.rooms,
            'persons': self.persons,
            'price': self.price,
            'commission_percent': self.commission_percent,
            'commission_amount': self.commission_amount,
            'remarks': self.remarks,
            'booker_country': self.booker_country,
            'unit_type': self.unit_type,
            'duration_nights': self.duration_nights,
            'phone_number': self.phone_number,
            'advance_received': self.advance_received,
            'advance_amount': self.advance_amount,
            'booking_status': self.booking_status,
            'email_id': self.email_id,
            'created_at': now,
            'updated_at': now,
        }

    def __str__(self) -> str:
        """String representation of booking data."""
        return (f"Booking(book_number='{self.book_number}', "
                f"platform='{self.platform.value}', "
                f"guest='{self.guest_names}', "
                f"check_in='{self.check_in}', "
                f"check_out='{self.check_out}')")


@dataclass
class SyncResult:
    """Result of persisting one extracted record."""
    success: bool
    is_new: bool = False
    record_key: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class SyncSummary:
    """Counters for one sync invocation."""
    purpose: SyncPurpose
    total_processed: int = 0
    added: int = 0
    duplicates: int = 0
    parse_failures: int = 0
    errors: int = 0
    dry_run: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'purpose': self.purpose.value,
            'added': self.added,
            'totalProcessed': self.total_processed,
            'duplicates': self.duplicates,
            'parse_failures': self.parse_failures,
            'errors': self.errors,
            'dry_run': self.dry_run,
        }
