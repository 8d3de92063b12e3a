"""
Configuration module for hostel mailbox sync.
"""

from .settings import gmail_config, supabase_config, app_config, api_config

__all__ = ['gmail_config', 'supabase_config', 'app_config', 'api_config']
