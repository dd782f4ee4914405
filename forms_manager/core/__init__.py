"""
Core infrastructure for forms-manager.

Shared components used across all modules:
- Configuration management
- Database handle and transactions
- Logging setup
- AWS clients
"""

from forms_manager.core.config import Settings, clear_settings_cache, get_settings
from forms_manager.core.database import PostgresDatabase, create_database, init_database
from forms_manager.core.logging import configure_logging

__all__ = [
    'PostgresDatabase',
    'Settings',
    'clear_settings_cache',
    'configure_logging',
    'create_database',
    'get_settings',
    'init_database',
]
