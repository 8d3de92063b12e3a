"""
Booking parser for MakeMyTrip host vouchers ("New Booking Received" emails).
"""
import re
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Dict

from .markup import strip_html
from ..email_reader.mime_decoder import decode_body, get_header, parse_header_date
from ..utils.field_rules import FieldRule, extract_fields, parse_amount
from ..utils.models import BookingData, Platform, RawMessage
from ..utils.logger import get_logger
from config.settings import app_config


class CheckInFallback(Enum):
    """What to use when the voucher has no readable check-in date."""
    EMAIL_RECEIVED_DATE = "email_received_date"
    NONE = "none"


class CheckOutFallback(Enum):
    """What to use when the voucher has no readable check-out date."""
    NEXT_DAY = "next_day"
    NONE = "none"


# "07 Jan '26"
VOUCHER_DATE = r"(\d{2}\s+[A-Za-z]{3}\s+'\d{2})"
_VOUCHER_DATE_NO_GROUP = r"\d{2}\s+[A-Za-z]{3}\s+'\d{2}"
_VOUCHER_TIME = r"(?:\s+\d{1,2}:\d{2}\s*[AP]M)?"
RUPEE_AMOUNT = r"(?:₹|Rs\.?|INR)\s*([\d,]+\.?\d*)"

VOUCHER_RULES = (
    FieldRule.compile(
        "book_number",
        r"Booking ID\s+([A-Z0-9]+)",
        r"\b(NH\d+)",
        flags=re.IGNORECASE,
        fallback_flags=0,
    ),
    FieldRule.compile("check_in", r"CHECK-IN[\s\S]*?" + VOUCHER_DATE),
    # Labels usually share a header row ("CHECK-IN CHECK-OUT 07 Jan '26 12:00 PM 08 Jan '26"),
    # in which case check-out is the date right after the check-in date and time
    FieldRule.compile(
        "check_out",
        r"CHECK-IN\s+CHECK-OUT\s+" + _VOUCHER_DATE_NO_GROUP + _VOUCHER_TIME + r"\s+" + VOUCHER_DATE,
        r"CHECK-OUT[\s\S]*?" + VOUCHER_DATE,
    ),
    FieldRule.compile("guest_names", r"PRIMARY GUEST DETAILS\s+([\s\S]+?)(?=\s+CHECK-IN)"),
    FieldRule.compile(
        "price",
        r"Payable to Property \(A-B-C\)[\s\S]*?" + RUPEE_AMOUNT,
        r"Payable to Property\s+" + RUPEE_AMOUNT,
    ),
    FieldRule.compile(
        "gross_charges",
        r"\(A\)\s*Property Gross Charges[^₹]*?" + RUPEE_AMOUNT,
        r"Property Gross Charges\s+" + RUPEE_AMOUNT,
    ),
    FieldRule.compile(
        "commission",
        r"\(B\)\s*Go-MMT Commission \(including GST\)[^₹]*?" + RUPEE_AMOUNT,
    ),
)


def parse_voucher_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse "DD Mon 'YY" as a calendar date.

    The two-digit year is always read as 20YY.
    """
    if not value:
        return None
    cleaned = " ".join(value.replace("'", "20", 1).split())
    try:
        return datetime.strptime(cleaned, "%d %b %Y")
    except ValueError:
        return None


class BookingParser:
    """Extracts bookings from MakeMyTrip voucher emails."""

    platform = Platform.MAKEMYTRIP

    def __init__(
        self,
        check_in_fallback: CheckInFallback = CheckInFallback.EMAIL_RECEIVED_DATE,
        check_out_fallback: CheckOutFallback = CheckOutFallback.NEXT_DAY,
    ):
        self.logger = get_logger("booking_parser")
        self.check_in_fallback = check_in_fallback
        self.check_out_fallback = check_out_fallback
        self.rules = VOUCHER_RULES

    def parse_message(self, message: RawMessage) -> Optional[BookingData]:
        """Decode a fetched message and extract a booking from it."""
        body = decode_body(message.payload)
        return self.parse_body(body, get_header(message, "Date"), email_id=message.message_id)

    def extract(self, html_body: str) -> Dict[str, Optional[str]]:
        """Run the voucher rules over the stripped body."""
        return extract_fields(strip_html(html_body), self.rules)

    def parse_body(self, html_body: str, date_header: str, email_id: Optional[str] = None) -> Optional[BookingData]:
        """
        Build a booking from a voucher body.

        Args:
            html_body: Raw (HTML or text) voucher body
            date_header: The message's ``Date`` header
            email_id: Source message id, stored for traceability

        Returns:
            BookingData, or None when the booking id or amount is missing or
            a date cannot be resolved under the configured fallbacks
        """
        fields = self.extract(html_body)
        self.logger.debug("Voucher matches", email_id=email_id, **fields)

        book_number = fields["book_number"]
        amount = parse_amount(fields["price"])
        if not book_number or amount is None:
            return None

        received = parse_header_date(date_header)

        check_in = parse_voucher_date(fields["check_in"])
        if check_in is None:
            if self.check_in_fallback is CheckInFallback.NONE or received is None:
                return None
            check_in = datetime(received.year, received.month, received.day)
            self.logger.warning("Check-in not found, using email date", book_number=book_number)

        check_out = parse_voucher_date(fields["check_out"])
        if check_out is not None and check_out <= check_in:
            self.logger.warning("Check-out not after check-in, ignoring it",
                                book_number=book_number, check_out=fields["check_out"])
            check_out = None
        if check_out is None:
            if self.check_out_fallback is CheckOutFallback.NONE:
                return None
            check_out = check_in + timedelta(days=1)

        price = fields["price"].replace(",", "")
        commission = parse_amount(fields["commission"])
        gross = parse_amount(fields["gross_charges"])
        commission_percent = 0
        if commission and gross:
            commission_percent = round(commission / gross * 100, 2)

        return BookingData(
            book_number=book_number,
            platform=self.platform,
            guest_names=fields["guest_names"] or "Guest",
            check_in=check_in,
            check_out=check_out,
            booked_on=received or datetime.utcnow(),
            price=price,
            duration_nights=round((check_out - check_in).total_seconds() / 86400),
            commission_percent=commission_percent,
            commission_amount=fields["commission"].replace(",", "") if commission else "0",
            remarks=app_config.booking_remarks,
            booker_country=app_config.booking_country,
            unit_type=app_config.booking_unit_type,
            # Vouchers are only sent for prepaid bookings
            advance_received=True,
            advance_amount=amount,
            email_id=email_id,
        )
