"""Configuration package: environment settings and Supabase client management."""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
