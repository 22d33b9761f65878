"""Session repository interfaces."""

from .auth_repository import AuthRepository
from .profile_repository import ProfileRepository

__all__ = ["AuthRepository", "ProfileRepository"]
