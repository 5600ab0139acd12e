"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any

MINIMUM_AGE = 18
MAXIMUM_AGE = 120
BIO_MAX_LENGTH = 500


class Gender(StrEnum):
    """Gender a profile identifies as."""

    MALE = "MALE"
    FEMALE = "FEMALE"
    NON_BINARY = "NON_BINARY"
    PREFER_NOT_TO_SAY = "PREFER_NOT_TO_SAY"


def calculate_age(birth_date: date, today: date) -> int:
    """Whole years between ``birth_date`` and ``today``.

    Calendar-year difference, minus one if the birthday has not yet
    occurred this year.
    """
    age = today.year - birth_date.year
    if (birth_date.month, birth_date.day) > (today.month, today.day):
        age -= 1
    return age


@dataclass(frozen=True)
class GeoPoint:
    """A WGS84 coordinate."""

    longitude: float
    latitude: float


@dataclass
class Photo:
    """A photo attached to a profile."""

    url: str
    is_primary: bool = False
    uploaded_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Preferences:
    """Matching preferences, embedded in the owning profile."""

    gender_preferences: set[Gender] = field(
        default_factory=lambda: {Gender.MALE, Gender.FEMALE}
    )
    min_age: int = MINIMUM_AGE
    max_age: int = 100
    max_distance_km: float | None = 50.0
    show_me: bool = True


@dataclass
class Profile:
    """Domain entity for a user profile."""

    email: str
    display_name: str
    birth_date: date
    gender: Gender
    id: str | None = None
    password_hash: str = ""
    bio: str | None = None
    interests: list[str] = field(default_factory=list)
    photos: list[Photo] = field(default_factory=list)
    location: GeoPoint | None = None
    preferences: Preferences = field(default_factory=Preferences)
    is_active: bool = True
    is_verified: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    last_active_at: datetime = field(default_factory=datetime.utcnow)
    version: int = 0

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def calculate_age(self, today: date | None = None) -> int:
        """Age in whole years as of ``today`` (UTC date by default)."""
        return calculate_age(self.birth_date, today or datetime.utcnow().date())

    @property
    def primary_photo(self) -> Photo | None:
        return next((p for p in self.photos if p.is_primary), None)

    def touch(self) -> None:
        """Record a mutation."""
        self.updated_at = datetime.utcnow()

    def mark_active(self) -> None:
        """Record user activity."""
        now = datetime.utcnow()
        self.last_active_at = now
        self.updated_at = now

    def to_dict(self) -> dict[str, Any]:
        """Plain representation used for cache and event payloads.

        The password hash is left out; only the primary store holds it.
        """
        return {
            "id": self.id,
            "email": self.email,
            "display_name": self.display_name,
            "birth_date": self.birth_date.isoformat(),
            "gender": self.gender.value,
            "bio": self.bio,
            "interests": list(self.interests),
            "photos": [
                {
                    "url": p.url,
                    "is_primary": p.is_primary,
                    "uploaded_at": p.uploaded_at.isoformat(),
                }
                for p in self.photos
            ],
            "location": (
                {"longitude": self.location.longitude, "latitude": self.location.latitude}
                if self.location
                else None
            ),
            "preferences": {
                "gender_preferences": sorted(g.value for g in self.preferences.gender_preferences),
                "min_age": self.preferences.min_age,
                "max_age": self.preferences.max_age,
                "max_distance_km": self.preferences.max_distance_km,
                "show_me": self.preferences.show_me,
            },
            "is_active": self.is_active,
            "is_verified": self.is_verified,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "last_active_at": self.last_active_at.isoformat(),
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        """Inverse of :meth:`to_dict`."""
        location = data.get("location")
        prefs = data["preferences"]
        return cls(
            id=data["id"],
            email=data["email"],
            password_hash=data.get("password_hash", ""),
            display_name=data["display_name"],
            birth_date=date.fromisoformat(data["birth_date"]),
            gender=Gender(data["gender"]),
            bio=data.get("bio"),
            interests=list(data.get("interests", [])),
            photos=[
                Photo(
                    url=p["url"],
                    is_primary=p["is_primary"],
                    uploaded_at=datetime.fromisoformat(p["uploaded_at"]),
                )
                for p in data.get("photos", [])
            ],
            location=GeoPoint(**location) if location else None,
            preferences=Preferences(
                gender_preferences={Gender(g) for g in prefs["gender_preferences"]},
                min_age=prefs["min_age"],
                max_age=prefs["max_age"],
                max_distance_km=prefs.get("max_distance_km"),
                show_me=prefs["show_me"],
            ),
            is_active=data["is_active"],
            is_verified=data["is_verified"],
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
            last_active_at=datetime.fromisoformat(data["last_active_at"]),
            version=data["version"],
        )
