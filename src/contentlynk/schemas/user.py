# src/contentlynk/schemas/user.py
"""User, subscription and administration schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator


class UserResponse(BaseModel):
    """Account fields visible to administrators."""

    id: int
    email: str | None
    username: str
    display_name: str | None
    avatar_url: str | None
    email_verified: bool
    is_admin: bool
    membership_tier: str
    status: str
    wallet_address: str | None
    beta_tester_number: int | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BotAnalysisResponse(BaseModel):
    score: int
    indicators: list[str]
    is_likely_bot: bool
    is_suspicious: bool


class AdminUserResponse(UserResponse):
    posts_count: int = 0
    comments_count: int = 0
    bot_analysis: BotAnalysisResponse


class UserStats(BaseModel):
    total: int
    verified: int
    unverified: int
    today: int


class AdminUserListResponse(BaseModel):
    users: list[AdminUserResponse]
    stats: UserStats


class MakeAdminRequest(BaseModel):
    email: str
    secret: str | None = None


class DeleteUserRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


class BulkDeleteRequest(BaseModel):
    user_ids: list[int] = Field(default_factory=list)
    reason: str | None = Field(None, max_length=500)
    confirmed_bots_only: bool = False


class BulkDeleteResponse(BaseModel):
    success: bool = True
    deleted_count: int
    requested_count: int
    errors: list[dict[str, object]] = Field(default_factory=list)


class SubscribeRequest(BaseModel):
    email: str | None = None
    name: str | None = Field(None, max_length=200)
    source: str | None = Field(None, max_length=50)


class UnsubscribeRequest(BaseModel):
    email: str | None = None


class SubscriptionResponse(BaseModel):
    success: bool = True
    message: str


class ProfileResponse(BaseModel):
    """The signed-in user's own profile."""

    id: int
    username: str
    email: str | None
    email_verified: bool
    display_name: str | None
    legal_name: str | None
    bio: str | None
    avatar_url: str | None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ProfileEnvelope(BaseModel):
    success: bool = True
    user: ProfileResponse


class ProfileUpdate(BaseModel):
    """Partial profile edit; omitted fields are left unchanged, ``null`` clears."""

    legal_name: str | None = Field(None, min_length=2, max_length=100)
    display_name: str | None = Field(None, min_length=2, max_length=50)
    bio: str | None = Field(None, max_length=1000)
    avatar_url: HttpUrl | None = None

    @field_validator("legal_name")
    @classmethod
    def legal_name_not_cleared(cls, value: str | None) -> str | None:
        if value is None:
            raise ValueError("legal name cannot be cleared")
        return value
