"""Core app configuration, security primitives and database."""

from echos.core.config import get_auth_config, get_settings, settings
from echos.core.database import get_db

__all__ = ["get_auth_config", "get_settings", "settings", "get_db"]
