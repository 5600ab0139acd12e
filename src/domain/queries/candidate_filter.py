"""Candidate filter construction.

A :class:`CandidateFilter` is the full description of which profiles a
requester may be shown. It is built in code from the requester's preferences
and evaluated either in memory (:meth:`CandidateFilter.matches`) or translated
into a store query by a repository. Both paths must agree.
"""

import math
from dataclasses import dataclass
from datetime import date

from domain.entities.profile import Gender, GeoPoint, Preferences, Profile, calculate_age

EARTH_RADIUS_KM = 6371.0088
KM_PER_DEGREE_LATITUDE = math.pi * EARTH_RADIUS_KM / 180.0


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points in kilometers."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def years_before(day: date, years: int) -> date:
    """The same calendar day ``years`` earlier; Feb 29 falls back to Feb 28."""
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


@dataclass(frozen=True)
class BoundingBox:
    """Latitude/longitude rectangle enclosing a search radius."""

    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    @property
    def crosses_antimeridian(self) -> bool:
        return self.min_longitude > self.max_longitude

    def contains(self, point: GeoPoint) -> bool:
        if not self.min_latitude <= point.latitude <= self.max_latitude:
            return False
        if self.crosses_antimeridian:
            return point.longitude >= self.min_longitude or point.longitude <= self.max_longitude
        return self.min_longitude <= point.longitude <= self.max_longitude


def bounding_box(origin: GeoPoint, radius_km: float) -> BoundingBox:
    """Smallest lat/lon box containing every point within ``radius_km``."""
    delta_lat = radius_km / KM_PER_DEGREE_LATITUDE
    min_lat = origin.latitude - delta_lat
    max_lat = origin.latitude + delta_lat
    if min_lat <= -90.0 or max_lat >= 90.0:
        # A pole is inside the circle; every longitude qualifies.
        return BoundingBox(max(min_lat, -90.0), min(max_lat, 90.0), -180.0, 180.0)

    # Widest longitude span is at the latitude closest to a pole.
    widest_lat = max(abs(min_lat), abs(max_lat))
    km_per_degree_lon = KM_PER_DEGREE_LATITUDE * math.cos(math.radians(widest_lat))
    delta_lon = radius_km / km_per_degree_lon
    if delta_lon >= 180.0:
        return BoundingBox(min_lat, max_lat, -180.0, 180.0)

    min_lon = origin.longitude - delta_lon
    max_lon = origin.longitude + delta_lon
    if min_lon < -180.0:
        min_lon += 360.0
    if max_lon > 180.0:
        max_lon -= 360.0
    return BoundingBox(min_lat, max_lat, min_lon, max_lon)


@dataclass(frozen=True)
class CandidateFilter:
    """Predicate over profiles for one requester at one point in time.

    ``born_after`` is exclusive and ``born_on_or_before`` inclusive; together
    they select exactly the birth dates whose age on ``today`` lies in
    ``[min_age, max_age]``.
    """

    exclude_id: str
    genders: frozenset[Gender]
    min_age: int
    max_age: int
    today: date
    born_after: date
    born_on_or_before: date
    origin: GeoPoint | None = None
    max_distance_km: float | None = None
    box: BoundingBox | None = None

    @property
    def has_distance_filter(self) -> bool:
        return self.origin is not None and self.max_distance_km is not None

    def within_distance(self, location: GeoPoint | None) -> bool:
        if not self.has_distance_filter:
            return True
        if location is None:
            return False
        assert self.origin is not None and self.max_distance_km is not None
        return haversine_km(self.origin, location) <= self.max_distance_km

    def matches(self, profile: Profile) -> bool:
        """Evaluate the filter against a single profile in memory."""
        if profile.id == self.exclude_id:
            return False
        if not (profile.is_active and profile.preferences.show_me):
            return False
        if profile.gender not in self.genders:
            return False
        if not self.min_age <= calculate_age(profile.birth_date, self.today) <= self.max_age:
            return False
        return self.within_distance(profile.location)


def build_candidate_filter(
    requester_id: str,
    preferences: Preferences,
    today: date,
    origin: GeoPoint | None = None,
) -> CandidateFilter:
    """Compose the candidate predicate for ``requester_id``.

    Preferences must already be validated. The distance filter is applied only
    when both an origin and ``max_distance_km`` are present.
    """
    max_distance = preferences.max_distance_km if origin is not None else None
    return CandidateFilter(
        exclude_id=requester_id,
        genders=frozenset(preferences.gender_preferences),
        min_age=preferences.min_age,
        max_age=preferences.max_age,
        today=today,
        born_after=years_before(today, preferences.max_age + 1),
        born_on_or_before=years_before(today, preferences.min_age),
        origin=origin if max_distance is not None else None,
        max_distance_km=max_distance,
        box=bounding_box(origin, max_distance) if origin is not None and max_distance is not None else None,
    )
