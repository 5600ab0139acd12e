"""Pydantic schemas for Auth API."""

from datetime import date

from pydantic import BaseModel, Field

from api.v1.schemas.profile import GeoPointSchema, PhotoSchema, PreferencesSchema, ProfileResponse
from domain.entities.profile import Gender


class RegisterRequest(BaseModel):
    """Schema for registering a profile."""

    email: str
    password: str
    display_name: str
    birth_date: date
    gender: Gender
    photos: list[PhotoSchema] = Field(default_factory=list)
    preferences: PreferencesSchema = Field(default_factory=PreferencesSchema)
    location: GeoPointSchema | None = None
    bio: str | None = None
    interests: list[str] = Field(default_factory=list)


class LoginRequest(BaseModel):
    """Schema for logging in."""

    email: str
    password: str


class TokenResponse(BaseModel):
    """Bearer token issued on register or login."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    profile: ProfileResponse


class TokenDetailResponse(BaseModel):
    """Schema for token response."""

    data: TokenResponse
