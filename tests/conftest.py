"""
Shared fixtures for the mailbox sync tests.
"""
import base64

import pytest

from src.utils.models import MessagePart, RawMessage


ALERT_BODY = (
    "Dear Customer, Your account XX5151 is credited with INR 1,250.50 on 28-12-2025. "
    "Info:UPI/P2P/132948538720/RANGUVEN/. The Curr bal is 59016.87."
)

ALERT_DATE = "Sun, 28 Dec 2025 14:03:11 +0530"

VOUCHER_HTML = """
<html>
<body>
  <table>
    <tr><td>New Booking Received</td></tr>
    <tr><td>Booking ID</td><td>NH78235454389498</td></tr>
    <tr><td>PRIMARY GUEST DETAILS</td></tr>
    <tr><td><b>Shreyas P A</b></td></tr>
    <tr><th>CHECK-IN</th><th>CHECK-OUT</th></tr>
    <tr><td>07 Jan '26<br/>12:00 PM</td><td>08 Jan '26<br/>11:00 AM</td></tr>
    <tr><td>1 Night, 1 Room, 1 Adult</td></tr>
    <tr><td>(A) Property Gross Charges</td><td>₹ 450.0</td></tr>
    <tr><td>(B) Go-MMT Commission (including GST)</td><td>₹ 95.58</td></tr>
    <tr><td>(C) TDS &amp; TCS</td><td>₹ 0.45</td></tr>
    <tr><td>Payable to Property (A-B-C)</td><td>₹ 353.97</td></tr>
  </table>
</body>
</html>
"""

VOUCHER_DATE = "Tue, 06 Jan 2026 18:42:05 +0530"


def encode(text: str) -> str:
    """Gmail-style URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def make_message(message_id: str, body: str, date_header: str, mime_type: str = "text/plain") -> RawMessage:
    payload = MessagePart(mime_type=mime_type, data=encode(body), headers={"Date": date_header})
    return RawMessage(message_id=message_id, headers={"Date": date_header}, payload=payload)


@pytest.fixture
def alert_message():
    return make_message("alert-1", ALERT_BODY, ALERT_DATE)


@pytest.fixture
def voucher_message():
    return make_message("voucher-1", VOUCHER_HTML, VOUCHER_DATE, mime_type="text/html")
