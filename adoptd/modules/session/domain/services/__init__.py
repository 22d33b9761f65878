"""Session domain services."""

from .profile_service import ProfileState
from .session_service import SessionState

__all__ = ["ProfileState", "SessionState"]
