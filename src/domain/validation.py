"""Explicit validation rules for profiles, preferences and paging.

Every function returns a list of :class:`FieldError`; an empty list means the
input is valid. Callers raise :class:`ValidationError` before touching any
store.
"""

import re
from datetime import date

from core.exceptions import FieldError, ValidationError
from domain.entities.profile import (
    BIO_MAX_LENGTH,
    MAXIMUM_AGE,
    MINIMUM_AGE,
    GeoPoint,
    Photo,
    Preferences,
    calculate_age,
)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PASSWORD_PATTERN = re.compile(r"^(?=.*[0-9])(?=.*[a-z])(?=.*[A-Z])(?=.*[@#$%^&+=!])(?=\S+$).{8,100}$")
PHOTO_URL_PATTERN = re.compile(r"^https?://.+\.(jpg|jpeg|png|gif|webp)$", re.IGNORECASE)
MESSAGE_MAX_LENGTH = 1000
EMAIL_MAX_LENGTH = 255
INTEREST_MAX_LENGTH = 50


def raise_if_invalid(errors: list[FieldError]) -> None:
    if errors:
        raise ValidationError(errors)


def validate_preferences(
    prefs: Preferences, prefix: str = "preferences", allow_single_age: bool = False
) -> list[FieldError]:
    """Check stored preferences. Queries may pass ``allow_single_age`` for a one-year window."""
    errors: list[FieldError] = []
    if not prefs.gender_preferences:
        errors.append(
            FieldError(f"{prefix}.gender_preferences", "At least one gender preference is required")
        )
    for name in ("min_age", "max_age"):
        value = getattr(prefs, name)
        if not MINIMUM_AGE <= value <= MAXIMUM_AGE:
            errors.append(
                FieldError(
                    f"{prefix}.{name}",
                    f"Must be between {MINIMUM_AGE} and {MAXIMUM_AGE}",
                )
            )
    if prefs.min_age > prefs.max_age or (prefs.min_age == prefs.max_age and not allow_single_age):
        errors.append(FieldError(f"{prefix}.max_age", "Max age must be greater than min age"))
    if prefs.max_distance_km is not None and prefs.max_distance_km <= 0:
        errors.append(FieldError(f"{prefix}.max_distance_km", "Max distance must be positive"))
    return errors


def validate_paging(page: int, size: int, max_size: int) -> list[FieldError]:
    errors: list[FieldError] = []
    if page < 0:
        errors.append(FieldError("page", "Page index must be zero or greater"))
    if not 1 <= size <= max_size:
        errors.append(FieldError("size", f"Page size must be between 1 and {max_size}"))
    return errors


def validate_location(location: GeoPoint | None) -> list[FieldError]:
    if location is None:
        return []
    errors: list[FieldError] = []
    if not -180.0 <= location.longitude <= 180.0:
        errors.append(FieldError("location.longitude", "Longitude must be between -180 and 180 degrees"))
    if not -90.0 <= location.latitude <= 90.0:
        errors.append(FieldError("location.latitude", "Latitude must be between -90 and 90 degrees"))
    return errors


def validate_photos(photos: list[Photo], required: bool = False) -> list[FieldError]:
    errors: list[FieldError] = []
    if required and not photos:
        errors.append(FieldError("photos", "At least one photo is required"))
    for index, photo in enumerate(photos):
        if not PHOTO_URL_PATTERN.match(photo.url):
            errors.append(
                FieldError(
                    f"photos[{index}].url",
                    "Photo URL must be a valid image URL (jpg, jpeg, png, gif, or webp)",
                )
            )
    if photos:
        primaries = sum(1 for p in photos if p.is_primary)
        if primaries != 1:
            errors.append(FieldError("photos", "Exactly one photo must be marked as primary"))
    return errors


def validate_profile_fields(
    display_name: str,
    birth_date: date,
    bio: str | None,
    interests: list[str],
    photos: list[Photo],
    location: GeoPoint | None,
    preferences: Preferences,
    today: date,
    photos_required: bool = False,
) -> list[FieldError]:
    """Validate the user-editable part of a profile."""
    errors: list[FieldError] = []
    if not 2 <= len(display_name.strip()) <= 100:
        errors.append(FieldError("display_name", "Name must be between 2 and 100 characters"))
    if birth_date >= today:
        errors.append(FieldError("birth_date", "Date of birth must be in the past"))
    elif calculate_age(birth_date, today) < MINIMUM_AGE:
        errors.append(FieldError("birth_date", f"User must be at least {MINIMUM_AGE} years old"))
    if bio is not None and len(bio) > BIO_MAX_LENGTH:
        errors.append(FieldError("bio", f"Bio cannot exceed {BIO_MAX_LENGTH} characters"))
    if any(not tag.strip() for tag in interests):
        errors.append(FieldError("interests", "Interests cannot be blank"))
    if any(len(tag) > INTEREST_MAX_LENGTH for tag in interests):
        errors.append(
            FieldError("interests", f"Interests cannot exceed {INTEREST_MAX_LENGTH} characters")
        )
    errors.extend(validate_photos(photos, required=photos_required))
    errors.extend(validate_location(location))
    errors.extend(validate_preferences(preferences))
    return errors


def validate_credentials(email: str, password: str) -> list[FieldError]:
    errors: list[FieldError] = []
    if len(email) > EMAIL_MAX_LENGTH:
        errors.append(FieldError("email", f"Email cannot exceed {EMAIL_MAX_LENGTH} characters"))
    elif not EMAIL_PATTERN.match(email):
        errors.append(FieldError("email", "Invalid email format"))
    if not PASSWORD_PATTERN.match(password):
        errors.append(
            FieldError(
                "password",
                "Password must be 8-100 characters with a digit, a lowercase letter, "
                "an uppercase letter, a special character and no whitespace",
            )
        )
    return errors


def validate_message(content: str) -> list[FieldError]:
    if not content.strip():
        return [FieldError("content", "Message cannot be empty")]
    if len(content) > MESSAGE_MAX_LENGTH:
        return [FieldError("content", f"Message cannot exceed {MESSAGE_MAX_LENGTH} characters")]
    return []


def validate_age_range(min_age: int | None, max_age: int | None) -> list[FieldError]:
    """Check optional search bounds; either end may be left open."""
    errors: list[FieldError] = []
    for name, value in (("min_age", min_age), ("max_age", max_age)):
        if value is not None and not MINIMUM_AGE <= value <= MAXIMUM_AGE:
            errors.append(FieldError(name, f"Must be between {MINIMUM_AGE} and {MAXIMUM_AGE}"))
    if min_age is not None and max_age is not None and min_age > max_age:
        errors.append(FieldError("max_age", "Max age cannot be less than min age"))
    return errors
