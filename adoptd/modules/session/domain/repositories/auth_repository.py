# 📄 File: adoptd/modules/session/domain/repositories/auth_repository.py
# 🧭 Purpose (Layman Explanation):
# Lists the things we can ask the login service to do: log in, register, log out,
# and look up whether someone is an admin.
# 🧪 Purpose (Technical Summary):
# Abstract repository interface over the remote auth provider and the role lookup,
# so SessionState can be tested against an in-memory fake.
# 🔗 Dependencies:
# abc, typing, Session domain model
# 🔄 Connected Modules / Calls From:
# SessionState (domain service), AuthRepositoryImpl (Supabase implementation)

from abc import ABC, abstractmethod
from typing import Optional

from adoptd.modules.session.domain.models.session import Session


class AuthRepository(ABC):
    """
    Abstract repository interface for authentication operations.
    """

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> Session:
        """
        Exchange credentials for a session.

        Raises:
            AuthenticationError: on rejected credentials
        """
        pass

    @abstractmethod
    async def sign_up(self, email: str, password: str, redirect_to: Optional[str] = None) -> Optional[Session]:
        """Register a new account; returns a session unless email confirmation is pending."""
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        """
        Invalidate the current session.

        A missing session is not an error.
        """
        pass

    @abstractmethod
    async def get_role(self, user_id: str) -> Optional[str]:
        """Role column of the user's row, or None when there is no row."""
        pass
