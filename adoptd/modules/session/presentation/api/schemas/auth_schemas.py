# 📄 File: adoptd/modules/session/presentation/api/schemas/auth_schemas.py
# 🧭 Purpose (Layman Explanation):
# Defines what the app sends to sign in, sign up or edit a profile, and what it gets back.
#
# 🧪 Purpose (Technical Summary):
# Pydantic request/response schemas for authentication and profile endpoints.
#
# 🔗 Dependencies:
# - pydantic for schema validation and serialization
# - session domain models (Session, UserProfile)
#
# 🔄 Connected Modules / Calls From:
# - adoptd.modules.session.presentation.api.v1.auth
# - adoptd.modules.session.presentation.api.v1.profiles

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from adoptd.modules.session.domain.models.profile import UserProfile
from adoptd.modules.session.domain.models.session import Session


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320, description="Account email")
    password: str = Field(..., min_length=1, max_length=256)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value:
            raise ValueError("Invalid email address")
        return value


class SignUpRequest(SignInRequest):
    password: str = Field(..., min_length=6, max_length=256)


class SessionResponse(BaseModel):
    user_id: str
    email: Optional[str] = None
    role: str
    is_admin: bool
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None

    @classmethod
    def from_domain(cls, session: Session) -> "SessionResponse":
        return cls(
            user_id=session.user_id,
            email=session.email,
            role=session.role,
            is_admin=session.is_admin,
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=session.expires_at,
        )


class SignUpResponse(BaseModel):
    confirmation_required: bool
    session: Optional[SessionResponse] = None


class SignOutResponse(BaseModel):
    signed_out: bool = True
    redirect_to: str


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    occupation: Optional[str] = Field(None, max_length=200)


class ProfileResponse(BaseModel):
    user_id: str
    name: Optional[str] = None
    display_name: str
    occupation: Optional[str] = None
    avatar_url: Optional[str] = None
    role: str = "user"
    subscription_tier_id: int = 0
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, profile: UserProfile) -> "ProfileResponse":
        return cls(display_name=profile.display_name, **profile.model_dump())
