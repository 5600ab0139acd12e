"""Profile search criteria.

Unlike a :class:`~domain.queries.candidate_filter.CandidateFilter`, every
criterion here is optional and no requester is involved. Only active, visible
profiles are ever returned.
"""

from dataclasses import dataclass
from datetime import date

from domain.entities.profile import Gender, Profile, calculate_age
from domain.queries.candidate_filter import years_before


@dataclass(frozen=True)
class ProfileSearch:
    """Optional gender, age range and interest criteria, combined with AND.

    Interests match when a profile has any of them.
    """

    today: date
    genders: frozenset[Gender] = frozenset()
    min_age: int | None = None
    max_age: int | None = None
    interests: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return (
            not self.genders
            and self.min_age is None
            and self.max_age is None
            and not self.interests
        )

    @property
    def born_after(self) -> date | None:
        """Exclusive lower bound on birth date, from ``max_age``."""
        if self.max_age is None:
            return None
        return years_before(self.today, self.max_age + 1)

    @property
    def born_on_or_before(self) -> date | None:
        """Inclusive upper bound on birth date, from ``min_age``."""
        if self.min_age is None:
            return None
        return years_before(self.today, self.min_age)

    def matches(self, profile: Profile) -> bool:
        """Evaluate the criteria against a single profile in memory."""
        if not (profile.is_active and profile.preferences.show_me):
            return False
        if self.genders and profile.gender not in self.genders:
            return False
        age = calculate_age(profile.birth_date, self.today)
        if self.min_age is not None and age < self.min_age:
            return False
        if self.max_age is not None and age > self.max_age:
            return False
        if self.interests and not set(self.interests) & set(profile.interests):
            return False
        return True
