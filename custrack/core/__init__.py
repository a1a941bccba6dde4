"""
custrack core - Shared services for all modules.

Usage:
    from custrack.core import get_db, get_config, get_logger, CT_PATHS
"""

from custrack.core.config import get_config, get_config_value, CT_PATHS
from custrack.core.db import get_db, migrate_all
from custrack.core.logging import get_logger

__all__ = [
    "get_config",
    "get_config_value",
    "CT_PATHS",
    "get_db",
    "migrate_all",
    "get_logger",
]
