"""
Transaction parser for SBM Bank credit alert emails.

Sample alert body:
    Your account XX5151 is credited with INR 110.00 on 28-12-2025.
    Info:UPI/P2P/132948538720/RANGUVEN/. The Curr bal is 59016.87.
"""
from typing import Optional, Dict

from ..email_reader.mime_decoder import decode_body, get_header, parse_header_date
from ..utils.field_rules import FieldRule, extract_fields, parse_amount
from ..utils.models import RawMessage, TransactionData
from ..utils.logger import get_logger
from config.settings import app_config

ALERT_RULES = (
    FieldRule.compile("amount", r"credited with INR\s+([\d,]+\.?\d*)"),
    # Info usually embeds the UPI reference, which keeps descriptions unique
    FieldRule.compile("description", r"Info:([^.\n]+)"),
)


class TransactionParser:
    """Extracts credit transactions from bank alert emails."""

    def __init__(self):
        self.logger = get_logger("transaction_parser")
        self.rules = ALERT_RULES

    def parse_message(self, message: RawMessage) -> Optional[TransactionData]:
        body = decode_body(message.payload)
        return self.parse_body(body, get_header(message, "Date"), email_id=message.message_id)

    def extract(self, body: str) -> Dict[str, Optional[str]]:
        return extract_fields(body, self.rules)

    def parse_body(self, body: str, date_header: str, email_id: Optional[str] = None) -> Optional[TransactionData]:
        """
        Build a transaction from an alert body.

        The amount is mandatory. The date comes from the ``Date`` header rather
        than the body, so it is already a full timestamp and identical on
        every re-sync of the same message.
        """
        fields = self.extract(body)

        amount = parse_amount(fields["amount"])
        if amount is None or amount <= 0:
            return None

        date = parse_header_date(date_header)
        if date is None:
            self.logger.warning("Unparsable Date header", email_id=email_id, date_header=date_header)
            return None

        return TransactionData(
            amount=amount,
            description=fields["description"] or app_config.transaction_description,
            date=date,
            category=app_config.transaction_category,
            payment_method=app_config.transaction_payment_method,
            email_id=email_id,
        )
