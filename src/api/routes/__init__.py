"""
API routes and endpoints.
"""

from . import health, sync, gmail

__all__ = ["health", "sync", "gmail"]
