"""Matching service: candidate discovery, profile browsing and search, match events."""

from collections.abc import Callable
from datetime import date

import structlog

from core.exceptions import FieldError, ProfileNotFoundError, ValidationError
from domain.entities.profile import Gender, GeoPoint, Preferences, Profile
from domain.queries.candidate_filter import build_candidate_filter
from domain.queries.page import Page
from domain.queries.profile_search import ProfileSearch
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.event_service import EventService, match_id
from domain.services.profile_service import ProfileService, normalize_interests, utc_today
from domain.validation import (
    raise_if_invalid,
    validate_age_range,
    validate_message,
    validate_paging,
    validate_preferences,
)

logger = structlog.get_logger()

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class MatchingService:
    """Service layer for finding and announcing matches."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        profile_service: ProfileService,
        event_service: EventService | None = None,
        max_page_size: int = MAX_PAGE_SIZE,
        clock: Callable[[], date] = utc_today,
    ) -> None:
        self._uow_factory = uow_factory
        self._profiles = profile_service
        self._events = event_service
        self._max_page_size = max_page_size
        self._clock = clock

    async def find_candidates(
        self,
        requester_id: str,
        preferences: Preferences,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        origin: GeoPoint | None = None,
    ) -> Page[Profile]:
        """Get one page of candidates for ``requester_id``, ordered by ID.

        Preferences and paging are validated before any store access. When
        ``origin`` is not supplied it is taken from the requester's profile;
        without a location no distance filter applies.
        """
        raise_if_invalid(
            validate_preferences(preferences, allow_single_age=True)
            + validate_paging(page, size, self._max_page_size)
        )

        if origin is None:
            requester = await self._profiles.require_profile(requester_id)
            origin = requester.location

        candidate_filter = build_candidate_filter(
            requester_id=requester_id,
            preferences=preferences,
            today=self._clock(),
            origin=origin,
        )
        async with self._uow_factory() as uow:
            result = await uow.profiles.find_candidates(candidate_filter, page, size)

        logger.debug(
            "candidates_found",
            requester_id=requester_id,
            page=page,
            size=size,
            count=len(result.items),
            distance_filter=candidate_filter.has_distance_filter,
        )
        return result

    async def find_candidates_for(
        self, requester_id: str, page: int = 0, size: int = DEFAULT_PAGE_SIZE
    ) -> Page[Profile]:
        """Find candidates using the requester's stored preferences and location."""
        requester = await self._profiles.require_profile(requester_id)
        return await self.find_candidates(
            requester_id,
            requester.preferences,
            page=page,
            size=size,
            origin=requester.location,
        )

    async def list_profiles(self, page: int = 0, size: int = DEFAULT_PAGE_SIZE) -> Page[Profile]:
        """Browse every active, visible profile, ordered by ID."""
        raise_if_invalid(validate_paging(page, size, self._max_page_size))
        async with self._uow_factory() as uow:
            return await uow.profiles.list_profiles(page, size)

    async def search_profiles(
        self,
        interests: list[str] | None = None,
        genders: list[Gender] | None = None,
        min_age: int | None = None,
        max_age: int | None = None,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
    ) -> Page[Profile]:
        """Search visible profiles by gender, age range and interests.

        Supplied criteria are combined with AND; a profile matches the interest
        criterion when it has any of the tags. At least one criterion is required.
        """
        criteria = ProfileSearch(
            today=self._clock(),
            genders=frozenset(genders or ()),
            min_age=min_age,
            max_age=max_age,
            interests=tuple(normalize_interests(interests or [])),
        )
        errors = validate_age_range(min_age, max_age) + validate_paging(
            page, size, self._max_page_size
        )
        if criteria.is_empty:
            errors.append(
                FieldError("search", "Supply at least one of gender, min_age, max_age or interests")
            )
        raise_if_invalid(errors)

        async with self._uow_factory() as uow:
            return await uow.profiles.search(criteria, page, size)

    async def announce_match(self, user_id: str, other_id: str) -> str:
        """Publish a mutual match between two existing profiles.

        Returns the match ID.
        """
        if user_id == other_id:
            raise ValidationError.single("user_id", "Cannot match a profile with itself")
        for profile_id in (user_id, other_id):
            if await self._profiles.get_profile(profile_id) is None:
                raise ProfileNotFoundError(profile_id)

        if self._events:
            await self._events.match_created(user_id, other_id)
        logger.info("match_announced", user_id=user_id, other_id=other_id)
        return match_id(user_id, other_id)

    async def send_message(self, sender_id: str, recipient_id: str, content: str) -> None:
        """Publish a message event from one profile to another."""
        errors = validate_message(content)
        if sender_id == recipient_id:
            errors.append(FieldError("recipient_id", "Cannot message yourself"))
        raise_if_invalid(errors)

        if await self._profiles.get_profile(recipient_id) is None:
            raise ProfileNotFoundError(recipient_id)
        if self._events:
            await self._events.message_sent(sender_id, recipient_id, content)
