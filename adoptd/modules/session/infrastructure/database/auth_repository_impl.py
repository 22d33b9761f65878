# 📄 File: adoptd/modules/session/infrastructure/database/auth_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Talks to Supabase's login service for real: checks email and password, creates
# accounts, logs people out and reads their role from the users table.
# 🧪 Purpose (Technical Summary):
# Supabase implementation of AuthRepository over the session's async client. Maps
# gotrue auth errors to AuthenticationError and treats a missing session on sign-out
# as success.
# 🔗 Dependencies:
# supabase (async client, auth errors), SupabaseRepository base, Session model
# 🔄 Connected Modules / Calls From:
# SessionState via UserScope construction

from typing import Optional

from supabase import AsyncClient, AuthApiError, AuthError, AuthSessionMissingError

from adoptd.modules.session.domain.models.session import Session
from adoptd.modules.session.domain.repositories.auth_repository import AuthRepository
from adoptd.shared.core.exceptions import AuthenticationError, GatewayError
from adoptd.shared.infrastructure.database.supabase_repository import SupabaseRepository
from adoptd.shared.utils.logging import get_logger

logger = get_logger(__name__)


class AuthRepositoryImpl(SupabaseRepository, AuthRepository):
    """
    Supabase implementation of the AuthRepository interface.
    """

    def __init__(self, client: AsyncClient):
        super().__init__(client)

    async def sign_in(self, email: str, password: str) -> Session:
        try:
            response = await self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthApiError as e:
            raise AuthenticationError(message=e.message or "Invalid login credentials") from e
        except AuthError as e:
            raise GatewayError("auth:sign_in", e) from e

        if response.session is None or response.user is None:
            raise AuthenticationError(message="Invalid login credentials")
        return self._to_session(response)

    async def sign_up(self, email: str, password: str, redirect_to: Optional[str] = None) -> Optional[Session]:
        payload = {"email": email, "password": password}
        if redirect_to:
            payload["options"] = {"email_redirect_to": redirect_to}

        try:
            response = await self.client.auth.sign_up(payload)
        except AuthApiError as e:
            raise AuthenticationError(message=e.message or "Sign-up rejected") from e
        except AuthError as e:
            raise GatewayError("auth:sign_up", e) from e

        if response.session is None:
            return None
        return self._to_session(response)

    async def sign_out(self) -> None:
        try:
            await self.client.auth.sign_out()
        except AuthSessionMissingError:
            logger.debug("Sign-out without a live session")
        except AuthError as e:
            if "session_not_found" in (e.message or ""):
                logger.debug("Sign-out for an already revoked session")
                return
            logger.error(f"Unexpected sign-out failure: {e}")
            raise GatewayError("auth:sign_out", e) from e

    async def get_role(self, user_id: str) -> Optional[str]:
        row = await self._first(
            "users:role",
            self.table("users").select("role").eq("user_id", user_id),
        )
        return row.get("role") if row else None

    @staticmethod
    def _to_session(response) -> Session:
        auth_session = response.session
        return Session(
            user_id=str(response.user.id),
            email=response.user.email,
            access_token=auth_session.access_token,
            refresh_token=auth_session.refresh_token,
            expires_at=auth_session.expires_at,
        )
