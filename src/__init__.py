"""
Hostel Mailbox Sync.

Reads bank credit alerts and travel-agency booking vouchers from Gmail,
extracts transactions and bookings from them, and stores new records in
Supabase.
"""

__version__ = "1.0.0"
__author__ = "Hostel Operations Team"
__description__ = "Gmail transaction and booking extraction with Supabase sync"
