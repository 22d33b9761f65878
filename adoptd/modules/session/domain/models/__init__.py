"""Session domain models."""

from .profile import ProfileUpdate, UserProfile
from .session import Session, UserRole

__all__ = ["ProfileUpdate", "Session", "UserProfile", "UserRole"]
