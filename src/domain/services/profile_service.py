"""Profile service layer: registration, lookup and mutation through the cache."""

from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime
from typing import Any, cast

import orjson
import structlog

from core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    EmailAlreadyRegisteredError,
    ErrorCode,
    ProfileNotFoundError,
)
from core.security import hash_password, verify_password
from domain.entities.profile import Gender, GeoPoint, Photo, Preferences, Profile
from domain.repositories.cache_store import ICacheStore
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.event_service import EventService
from domain.services.read_through_cache import DEFAULT_TTL_SECONDS, ReadThroughCache
from domain.validation import (
    raise_if_invalid,
    validate_credentials,
    validate_profile_fields,
)

logger = structlog.get_logger()

PROFILE_ENTITY_TYPE = "profile"


def utc_today() -> date:
    return datetime.utcnow().date()


def normalize_interests(interests: list[str]) -> list[str]:
    """Lower-case, trim and de-duplicate tags, keeping first-seen order."""
    seen: dict[str, None] = {}
    for tag in interests:
        cleaned = tag.strip().lower()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


def serialize_profile(profile: Profile) -> bytes:
    return orjson.dumps(profile.to_dict())


def deserialize_profile(raw: bytes) -> Profile:
    return Profile.from_dict(orjson.loads(raw))


class ProfileService:
    """Service layer for Profile business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        cache: ICacheStore,
        event_service: EventService | None = None,
        cache_ttl_seconds: int = DEFAULT_TTL_SECONDS,
        cache_key_prefix: str = "",
        clock: Callable[[], date] = utc_today,
    ) -> None:
        self._uow_factory = uow_factory
        self._events = event_service
        self._clock = clock
        self._cache: ReadThroughCache[Profile] = ReadThroughCache(
            cache=cache,
            entity_type=PROFILE_ENTITY_TYPE,
            load=self._load,
            save=self._save,
            remove=self._remove,
            serialize=serialize_profile,
            deserialize=deserialize_profile,
            identify=lambda p: cast(str, p.id),
            ttl_seconds=cache_ttl_seconds,
            key_prefix=cache_key_prefix,
        )

    @property
    def cache(self) -> ReadThroughCache[Profile]:
        return self._cache

    # --- Primary store access used by the cache ---

    async def _load(self, profile_id: str) -> Profile | None:
        async with self._uow_factory() as uow:
            return await uow.profiles.get(profile_id)

    async def _save(self, profile: Profile) -> Profile:
        async with self._uow_factory() as uow:
            if profile.id is None:
                saved = await uow.profiles.create(profile)
            else:
                saved = await uow.profiles.update(profile)
            await uow.commit()
            return saved

    async def _remove(self, profile_id: str) -> bool:
        async with self._uow_factory() as uow:
            deleted = await uow.profiles.delete(profile_id)
            await uow.commit()
            return deleted

    # --- Reads ---

    async def get_profile(self, profile_id: str) -> Profile | None:
        """Get a profile by ID, or None if it does not exist."""
        return await self._cache.get(profile_id)

    async def require_profile(self, profile_id: str) -> Profile:
        """Get a profile by ID, raising if it does not exist."""
        profile = await self._cache.get(profile_id)
        if profile is None:
            raise ProfileNotFoundError(profile_id)
        return profile

    # --- Writes ---

    async def upsert_profile(self, profile: Profile) -> Profile:
        """Persist a profile (insert when it has no ID) and refresh the cache."""
        created = profile.id is None
        saved = await self._cache.put(profile)
        if self._events:
            await self._events.profile_changed(saved, created=created)
        return saved

    async def register(
        self,
        email: str,
        password: str,
        display_name: str,
        birth_date: date,
        gender: Gender,
        photos: list[Photo],
        preferences: Preferences,
        location: GeoPoint | None = None,
        bio: str | None = None,
        interests: list[str] | None = None,
    ) -> Profile:
        """Register a new profile."""
        email = email.strip().lower()
        interests = normalize_interests(interests or [])
        raise_if_invalid(
            validate_credentials(email, password)
            + validate_profile_fields(
                display_name=display_name,
                birth_date=birth_date,
                bio=bio,
                interests=interests,
                photos=photos,
                location=location,
                preferences=preferences,
                today=self._clock(),
                photos_required=True,
            )
        )

        async with self._uow_factory() as uow:
            if await uow.profiles.exists_by_email(email):
                logger.warning("registration_rejected_duplicate_email", email=email)
                raise EmailAlreadyRegisteredError(email)

        profile = Profile(
            email=email,
            password_hash=hash_password(password),
            display_name=display_name.strip(),
            birth_date=birth_date,
            gender=gender,
            bio=bio,
            interests=interests,
            photos=photos,
            location=location,
            preferences=preferences,
        )
        saved = await self.upsert_profile(profile)
        logger.info("profile_registered", profile_id=saved.id)
        return saved

    async def authenticate(self, email: str, password: str) -> Profile:
        """Check credentials and return the matching profile."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_by_email(email.strip().lower())

        if not profile or not verify_password(password, profile.password_hash):
            raise AuthenticationError(
                message="Invalid email or password",
                error_code=ErrorCode.INVALID_CREDENTIALS,
            )
        if not profile.is_active:
            raise AuthenticationError(
                message="Account is deactivated",
                error_code=ErrorCode.INVALID_CREDENTIALS,
            )
        return profile

    async def replace_profile(
        self,
        profile_id: str,
        actor_id: str,
        version: int,
        display_name: str,
        birth_date: date,
        gender: Gender,
        photos: list[Photo],
        preferences: Preferences,
        location: GeoPoint | None,
        bio: str | None,
        interests: list[str],
    ) -> Profile:
        """Replace every user-editable field of a profile."""
        self._require_owner(profile_id, actor_id)
        interests = normalize_interests(interests)
        raise_if_invalid(
            validate_profile_fields(
                display_name=display_name,
                birth_date=birth_date,
                bio=bio,
                interests=interests,
                photos=photos,
                location=location,
                preferences=preferences,
                today=self._clock(),
            )
        )

        existing = await self.require_profile(profile_id)
        updated = replace(
            existing,
            display_name=display_name.strip(),
            birth_date=birth_date,
            gender=gender,
            bio=bio,
            interests=interests,
            photos=photos,
            location=location,
            preferences=preferences,
            version=version,
        )
        updated.touch()
        return await self.upsert_profile(updated)

    async def patch_profile(
        self,
        profile_id: str,
        actor_id: str,
        version: int,
        display_name: str | None = None,
        gender: Gender | None = None,
        bio: object = ...,  # Sentinel to detect explicit None
        interests: list[str] | None = None,
        photos: list[Photo] | None = None,
        location: object = ...,  # Sentinel to detect explicit None
        preference_changes: dict[str, Any] | None = None,
    ) -> Profile:
        """Update only the fields that were supplied."""
        self._require_owner(profile_id, actor_id)
        existing = await self.require_profile(profile_id)

        changes: dict[str, Any] = {"version": version}
        if display_name is not None:
            changes["display_name"] = display_name.strip()
        if gender is not None:
            changes["gender"] = gender
        if bio is not ...:
            changes["bio"] = bio
        if interests is not None:
            changes["interests"] = normalize_interests(interests)
        if photos is not None:
            changes["photos"] = photos
        if location is not ...:
            changes["location"] = location
        if preference_changes:
            changes["preferences"] = replace(existing.preferences, **preference_changes)

        updated = replace(existing, **changes)
        raise_if_invalid(
            validate_profile_fields(
                display_name=updated.display_name,
                birth_date=updated.birth_date,
                bio=updated.bio,
                interests=updated.interests,
                photos=updated.photos,
                location=updated.location,
                preferences=updated.preferences,
                today=self._clock(),
            )
        )
        updated.touch()
        return await self.upsert_profile(updated)

    async def record_activity(self, profile_id: str) -> Profile:
        """Bump the profile's last-active timestamp."""
        # Read from the store so the write carries the current version.
        profile = await self._load(profile_id)
        if profile is None:
            raise ProfileNotFoundError(profile_id)
        profile.mark_active()
        return await self._cache.put(profile)

    async def delete_profile(self, profile_id: str, actor_id: str) -> None:
        """Delete a profile from the store and the cache."""
        self._require_owner(profile_id, actor_id)
        if not await self._cache.delete(profile_id):
            raise ProfileNotFoundError(profile_id)
        logger.info("profile_deleted", profile_id=profile_id)
        if self._events:
            await self._events.profile_deleted(profile_id)

    # --- Helpers ---

    @staticmethod
    def _require_owner(profile_id: str, actor_id: str) -> None:
        if profile_id != actor_id:
            raise AuthorizationError("You can only modify your own profile")
