"""
Unit tests for the bank alert transaction parser.
"""
import re
import pytest
from datetime import datetime, timezone, timedelta

from src.transaction_parser.parser import TransactionParser
from src.utils.field_rules import FieldRule, extract_fields, parse_amount

from conftest import ALERT_BODY, ALERT_DATE


IST = timezone(timedelta(hours=5, minutes=30))


class TestTransactionParser:
    """Test cases for TransactionParser."""

    @pytest.fixture
    def parser(self):
        return TransactionParser()

    def test_parse_message(self, parser, alert_message):
        transaction = parser.parse_message(alert_message)

        assert transaction is not None
        assert transaction.amount == 1250.50
        assert transaction.description == "UPI/P2P/132948538720/RANGUVEN/"
        assert transaction.date == datetime(2025, 12, 28, 14, 3, 11, tzinfo=IST)
        assert transaction.type == "credit"
        assert transaction.payment_method == "upi"
        assert transaction.status == "success"
        assert transaction.category == "uncategorized"
        assert transaction.email_id == "alert-1"

    def test_missing_info_uses_default_description(self, parser):
        transaction = parser.parse_body("Your account is credited with INR 110.00 on 28-12-2025", ALERT_DATE)
        assert transaction.amount == 110.0
        assert transaction.description == "SBM Bank Transaction"

    def test_missing_amount_phrase(self, parser):
        assert parser.parse_body("Your account is debited with INR 110.00. Info:ATM", ALERT_DATE) is None

    def test_zero_amount_rejected(self, parser):
        assert parser.parse_body("credited with INR 0.00 Info:REVERSAL", ALERT_DATE) is None

    def test_unparsable_date_header(self, parser):
        assert parser.parse_body(ALERT_BODY, "garbage") is None

    def test_same_message_yields_identical_key_fields(self, parser, alert_message):
        first = parser.parse_message(alert_message)
        second = parser.parse_message(alert_message)
        assert (first.description, first.amount, first.date) == (second.description, second.amount, second.date)

    def test_to_dict(self, parser, alert_message):
        row = parser.parse_message(alert_message).to_dict()
        assert row["date"] == "2025-12-28T14:03:11+05:30"
        assert row["type"] == "credit"
        assert "created_at" in row and "updated_at" in row


class TestFieldRules:

    def test_fallback_only_when_primary_misses(self):
        rule = FieldRule.compile("id", r"ID:(\w+)", r"#(\w+)")
        assert rule.match("ID:abc #xyz") == "abc"
        assert rule.match("ref #xyz") == "xyz"
        assert rule.match("nothing") is None

    def test_fallback_flags_are_separate(self):
        rule = FieldRule.compile("id", r"ID (\w+)", r"(NH\d+)", flags=re.IGNORECASE, fallback_flags=0)
        assert rule.match("id abc") == "abc"
        assert rule.match("see nh123") is None
        assert rule.match("see NH123") == "NH123"

    def test_extract_fields_is_partial(self):
        rules = (FieldRule.compile("a", r"a=(\d+)"), FieldRule.compile("b", r"b=(\d+)"))
        assert extract_fields("a=1", rules) == {"a": "1", "b": None}
        assert extract_fields(None, rules) == {"a": None, "b": None}

    @pytest.mark.parametrize("value,expected", [
        ("1,250.50", 1250.50),
        ("1,00,000", 100000.0),
        ("353.97", 353.97),
        ("", None),
        (None, None),
        (",", None),
    ])
    def test_parse_amount(self, value, expected):
        assert parse_amount(value) == expected
