"""
Configuration module - pydantic-settings base class loaded from env / .env.
"""

from common.config.base_settings import BaseAppSettings

__all__ = ["BaseAppSettings"]
