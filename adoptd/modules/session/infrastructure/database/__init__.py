"""Supabase implementations of the session repositories."""

from .auth_repository_impl import AuthRepositoryImpl
from .profile_repository_impl import ProfileRepositoryImpl

__all__ = ["AuthRepositoryImpl", "ProfileRepositoryImpl"]
