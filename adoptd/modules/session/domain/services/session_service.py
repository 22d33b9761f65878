# 📄 File: adoptd/modules/session/domain/services/session_service.py
# 🧭 Purpose (Layman Explanation):
# Keeps track of who is logged in and whether they are an admin. Everything else in the
# app waits for this to finish checking before it loads anything.
# 🧪 Purpose (Technical Summary):
# Observable session state service. Owns the Session snapshot, resolves the readiness
# gate (success or failure) that every other state service waits on, and maps a missing
# or expired session to AuthenticationError carrying the login redirect.
# 🔗 Dependencies:
# AuthRepository, Readiness/StateService primitives, structured logging, settings
# 🔄 Connected Modules / Calls From:
# UserScope, auth endpoints, every state service needing the current user id

from typing import Optional

from adoptd.modules.session.domain.models.session import Session, UserRole
from adoptd.modules.session.domain.repositories.auth_repository import AuthRepository
from adoptd.shared.config.settings import Settings, get_settings
from adoptd.shared.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ExternalAPIError,
)
from adoptd.shared.core.observable import BackgroundTasks, Readiness, StateService
from adoptd.shared.utils.logging import bind_user, get_logger

logger = get_logger(__name__)


class SessionState(StateService[Optional[Session]]):
    """
    Tracks authenticated identity and role; gates every other state service.

    The readiness gate opens after the first sign-in attempt resolves, whether
    it succeeded or not.
    """

    name = "session"

    def __init__(
        self,
        auth_repository: AuthRepository,
        readiness: Optional[Readiness] = None,
        tasks: Optional[BackgroundTasks] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(readiness, tasks)
        self.auth_repository = auth_repository
        self.settings = settings or get_settings()
        self._session: Optional[Session] = None

    @property
    def snapshot(self) -> Optional[Session]:
        return self._session

    @property
    def user_id(self) -> Optional[str]:
        return self._session.user_id if self._session else None

    @property
    def role(self) -> Optional[str]:
        return self._session.role if self._session else None

    @property
    def is_admin(self) -> bool:
        return bool(self._session and self._session.is_admin)

    async def sign_in(self, email: str, password: str) -> Session:
        try:
            session = await self.auth_repository.sign_in(email, password)
        except AuthenticationError:
            self._resolve(False)
            logger.warning("Sign-in rejected", email=email)
            raise

        await self._establish(session)
        logger.log_user_action("sign_in", session.user_id)
        return self._session

    async def sign_up(self, email: str, password: str) -> Optional[Session]:
        """
        Register an account.

        Returns None while the confirmation email is pending; in that case the
        user signs in after confirming.
        """
        session = await self.auth_repository.sign_up(
            email, password, redirect_to=self.settings.AUTH_CALLBACK_URL
        )
        if session is None:
            logger.info("Sign-up pending email confirmation", email=email)
            return None

        await self._establish(session)
        logger.log_user_action("sign_up", session.user_id)
        return self._session

    async def sign_out(self):
        user_id = self.user_id
        await self.auth_repository.sign_out()
        self._session = None
        bind_user(None)
        await self.broadcast()
        if user_id:
            logger.log_user_action("sign_out", user_id)

    async def refresh(self) -> Optional[Session]:
        """Re-read the role of the current user."""
        if self._session is None:
            return None
        role = await self._load_role(self._session.user_id)
        self._session = self._session.model_copy(update={"role": role})
        await self.broadcast()
        return self._session

    def require_user(self) -> Session:
        """
        Current session or an authentication error pointing at the login page.
        """
        if self._session is None or self._session.is_expired():
            raise AuthenticationError(
                message="Session missing or expired",
                redirect_to=self.settings.AUTH_REDIRECT_PATH,
            )
        return self._session

    def require_admin(self) -> Session:
        session = self.require_user()
        if not session.is_admin:
            raise AuthorizationError(
                message="Administrator role required",
                required_role=UserRole.ADMIN.value,
                user_id=session.user_id,
            )
        return session

    async def _establish(self, session: Session):
        role = await self._load_role(session.user_id)
        self._session = session.model_copy(update={"role": role})
        bind_user(session.user_id)
        self._resolve(True)
        await self.broadcast()

    async def _load_role(self, user_id: str) -> str:
        # no users row yet, or the lookup failed: plain user
        try:
            role = await self.auth_repository.get_role(user_id)
        except ExternalAPIError as e:
            logger.warning(f"Role lookup failed, defaulting to user: {e.message}", user_id=user_id)
            return UserRole.USER.value
        if role == UserRole.ADMIN.value:
            return UserRole.ADMIN.value
        return UserRole.USER.value

    def _resolve(self, authenticated: bool):
        if not self.readiness.resolved:
            self.readiness.resolve(authenticated)
