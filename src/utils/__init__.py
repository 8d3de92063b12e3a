"""
Utility modules for hostel mailbox sync.
"""

from .models import (
    Platform, SyncPurpose, MessagePart, RawMessage, TransactionData,
    BookingData, SyncResult, SyncSummary
)
from .logger import setup_logger, get_logger, SyncLogger

__all__ = [
    'Platform', 'SyncPurpose', 'MessagePart', 'RawMessage', 'TransactionData',
    'BookingData', 'SyncResult', 'SyncSummary', 'setup_logger', 'get_logger',
    'SyncLogger'
]
