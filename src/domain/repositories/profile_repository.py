"""Profile repository protocol."""

from typing import Protocol

from domain.entities.profile import Profile
from domain.queries.candidate_filter import CandidateFilter
from domain.queries.page import Page
from domain.queries.profile_search import ProfileSearch


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get(self, id: str) -> Profile | None:
        """Get a profile by ID."""
        ...

    async def get_by_email(self, email: str) -> Profile | None:
        """Get a profile by its (lower-case) email."""
        ...

    async def exists_by_email(self, email: str) -> bool:
        """Check whether an email is already registered."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Insert a new profile; the store assigns the ID."""
        ...

    async def update(self, profile: Profile) -> Profile:
        """Update an existing profile.

        ``profile.version`` must match the stored version; the returned
        entity carries the incremented version.
        """
        ...

    async def delete(self, id: str) -> bool:
        """Delete a profile and return whether it existed."""
        ...

    async def find_candidates(
        self, candidate_filter: CandidateFilter, page: int, size: int
    ) -> Page[Profile]:
        """Get one page of profiles matching the filter, ordered by ID."""
        ...

    async def list_profiles(self, page: int, size: int) -> Page[Profile]:
        """Get one page of active, visible profiles, ordered by ID."""
        ...

    async def search(self, criteria: ProfileSearch, page: int, size: int) -> Page[Profile]:
        """Get active, visible profiles meeting the criteria, ordered by ID."""
        ...
