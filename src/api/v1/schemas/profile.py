"""Pydantic schemas for Profile API.

Schemas check shape only; range and format rules are enforced by the domain
layer so every rule violation is reported as a 400 VALIDATION_ERROR.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.profile import Gender, GeoPoint, Photo, Preferences, Profile


class GeoPointSchema(BaseModel):
    """WGS84 coordinate."""

    longitude: float
    latitude: float

    def to_domain(self) -> GeoPoint:
        return GeoPoint(longitude=self.longitude, latitude=self.latitude)


class PhotoSchema(BaseModel):
    """Photo attached to a profile."""

    model_config = ConfigDict(from_attributes=True)

    url: str
    is_primary: bool = False
    uploaded_at: datetime | None = None

    def to_domain(self) -> Photo:
        if self.uploaded_at is None:
            return Photo(url=self.url, is_primary=self.is_primary)
        return Photo(url=self.url, is_primary=self.is_primary, uploaded_at=self.uploaded_at)


class PreferencesSchema(BaseModel):
    """Matching preferences."""

    gender_preferences: list[Gender] = Field(
        default_factory=lambda: [Gender.MALE, Gender.FEMALE]
    )
    min_age: int = 18
    max_age: int = 100
    max_distance_km: float | None = 50.0
    show_me: bool = True

    def to_domain(self) -> Preferences:
        return Preferences(
            gender_preferences=set(self.gender_preferences),
            min_age=self.min_age,
            max_age=self.max_age,
            max_distance_km=self.max_distance_km,
            show_me=self.show_me,
        )

    @classmethod
    def from_domain(cls, prefs: Preferences) -> "PreferencesSchema":
        return cls(
            gender_preferences=sorted(prefs.gender_preferences),
            min_age=prefs.min_age,
            max_age=prefs.max_age,
            max_distance_km=prefs.max_distance_km,
            show_me=prefs.show_me,
        )


class PreferencesUpdate(BaseModel):
    """Partial preferences update."""

    gender_preferences: list[Gender] | None = None
    min_age: int | None = None
    max_age: int | None = None
    max_distance_km: float | None = None
    show_me: bool | None = None

    def changes(self) -> dict[str, Any]:
        """Fields explicitly supplied, in domain form."""
        changes = {name: getattr(self, name) for name in self.model_fields_set}
        if changes.get("gender_preferences") is not None:
            changes["gender_preferences"] = set(changes["gender_preferences"])
        # Only max_distance_km may be cleared.
        return {
            k: v for k, v in changes.items() if v is not None or k == "max_distance_km"
        }


class ProfileReplace(BaseModel):
    """Schema for replacing a profile (PUT)."""

    version: int
    display_name: str
    birth_date: date
    gender: Gender
    photos: list[PhotoSchema] = Field(default_factory=list)
    preferences: PreferencesSchema = Field(default_factory=PreferencesSchema)
    location: GeoPointSchema | None = None
    bio: str | None = None
    interests: list[str] = Field(default_factory=list)


class ProfileUpdate(BaseModel):
    """Schema for updating a profile (PATCH, all fields but version optional)."""

    version: int
    display_name: str | None = None
    gender: Gender | None = None
    bio: str | None = None
    interests: list[str] | None = None
    photos: list[PhotoSchema] | None = None
    location: GeoPointSchema | None = None
    preferences: PreferencesUpdate | None = None


class ProfileResponse(BaseModel):
    """Schema for Profile response.

    ``email`` and ``preferences`` are only filled in for the owner.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "0b6f5b0e-3d1c-4d8e-9a55-6c1f7d0f2a11",
                "display_name": "Alex",
                "age": 29,
                "gender": "FEMALE",
                "bio": "Climber and amateur baker",
                "interests": ["climbing", "baking"],
                "photos": [
                    {
                        "url": "https://cdn.example.com/p/1.jpg",
                        "is_primary": True,
                        "uploaded_at": "2026-01-28T10:00:00",
                    }
                ],
                "location": {"longitude": 13.405, "latitude": 52.52},
                "is_verified": False,
                "last_active_at": "2026-01-28T10:00:00",
                "version": 3,
            }
        },
    )

    id: str
    display_name: str
    age: int
    gender: Gender
    bio: str | None
    interests: list[str]
    photos: list[PhotoSchema]
    location: GeoPointSchema | None
    is_verified: bool
    last_active_at: datetime
    version: int
    email: str | None = None
    preferences: PreferencesSchema | None = None
    is_active: bool | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile response."""

    data: ProfileResponse


class ProfileListResponse(BaseModel):
    """Schema for a page of Profiles."""

    data: list[ProfileResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


def build_profile_response(profile: Profile, owner: bool = False) -> ProfileResponse:
    """Map a domain profile to its API form."""
    assert profile.id is not None
    response = ProfileResponse(
        id=profile.id,
        display_name=profile.display_name,
        age=profile.calculate_age(),
        gender=profile.gender,
        bio=profile.bio,
        interests=profile.interests,
        photos=[
            PhotoSchema(url=p.url, is_primary=p.is_primary, uploaded_at=p.uploaded_at)
            for p in profile.photos
        ],
        location=(
            GeoPointSchema(longitude=profile.location.longitude, latitude=profile.location.latitude)
            if profile.location
            else None
        ),
        is_verified=profile.is_verified,
        last_active_at=profile.last_active_at,
        version=profile.version,
    )
    if owner:
        response.email = profile.email
        response.preferences = PreferencesSchema.from_domain(profile.preferences)
        response.is_active = profile.is_active
        response.created_at = profile.created_at
        response.updated_at = profile.updated_at
    return response
