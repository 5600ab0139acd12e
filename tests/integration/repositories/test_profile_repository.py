"""Integration tests for SQLAlchemyProfileRepository against SQLite."""

from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import VersionConflictError
from domain.entities.profile import Gender, GeoPoint, Photo, Preferences, Profile
from domain.queries.candidate_filter import build_candidate_filter, years_before
from domain.queries.profile_search import ProfileSearch
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

TODAY = date(2026, 6, 15)
BERLIN = GeoPoint(longitude=13.405, latitude=52.52)


def _profile(email: str, **overrides) -> Profile:
    fields = {
        "email": email,
        "password_hash": "hash",
        "display_name": email.split("@")[0].title(),
        "birth_date": years_before(TODAY, 27),
        "gender": Gender.FEMALE,
        "interests": ["hiking"],
        "photos": [Photo(url="https://cdn.example.com/p.jpg", is_primary=True, uploaded_at=datetime(2026, 1, 1))],
        "location": BERLIN,
        "preferences": Preferences(),
    }
    fields.update(overrides)
    return Profile(**fields)


@pytest.fixture
def uow_factory(session_factory: async_sessionmaker[AsyncSession]) -> Callable[[], SQLAlchemyUnitOfWork]:
    return lambda: SQLAlchemyUnitOfWork(session_factory)


async def _create(uow_factory, profile: Profile) -> Profile:
    async with uow_factory() as uow:
        created = await uow.profiles.create(profile)
        await uow.commit()
        return created


class TestCrud:
    async def test_create_assigns_id_and_version(self, uow_factory):
        created = await _create(uow_factory, _profile("ann@example.com", interests=["jazz", "chess"]))

        assert created.id
        assert created.version == 1
        async with uow_factory() as uow:
            loaded = await uow.profiles.get(created.id)
        assert loaded == created
        assert loaded.interests == ["jazz", "chess"]

    async def test_get_by_email_and_exists(self, uow_factory):
        created = await _create(uow_factory, _profile("ann@example.com"))

        async with uow_factory() as uow:
            assert (await uow.profiles.get_by_email("ann@example.com")).id == created.id
            assert await uow.profiles.exists_by_email("ann@example.com")
            assert not await uow.profiles.exists_by_email("bob@example.com")

    async def test_update_bumps_version(self, uow_factory):
        created = await _create(uow_factory, _profile("ann@example.com"))

        async with uow_factory() as uow:
            updated = await uow.profiles.update(replace(created, bio="new", interests=["chess"]))
            await uow.commit()

        assert updated.version == 2
        assert updated.bio == "new"
        assert updated.interests == ["chess"]
        assert updated.created_at == created.created_at

    async def test_stale_version_conflicts(self, uow_factory):
        created = await _create(uow_factory, _profile("ann@example.com"))
        async with uow_factory() as uow:
            await uow.profiles.update(replace(created, bio="first"))
            await uow.commit()

        with pytest.raises(VersionConflictError):
            async with uow_factory() as uow:
                await uow.profiles.update(replace(created, bio="second"))

        async with uow_factory() as uow:
            assert (await uow.profiles.get(created.id)).bio == "first"

    async def test_delete(self, uow_factory):
        created = await _create(uow_factory, _profile("ann@example.com"))

        async with uow_factory() as uow:
            assert await uow.profiles.delete(created.id) is True
            await uow.commit()
        async with uow_factory() as uow:
            assert await uow.profiles.get(created.id) is None
            assert await uow.profiles.delete(created.id) is False


class TestFindCandidates:
    async def test_active_vs_inactive_scenario(self, uow_factory):
        requester = await _create(
            uow_factory,
            _profile("req@example.com", gender=Gender.MALE, birth_date=years_before(TODAY, 30)),
        )
        active = await _create(
            uow_factory, _profile("active@example.com", location=GeoPoint(13.45, 52.50))
        )
        await _create(
            uow_factory,
            _profile("inactive@example.com", location=GeoPoint(13.41, 52.53), is_active=False),
        )
        prefs = Preferences(gender_preferences={Gender.FEMALE}, min_age=25, max_age=30, max_distance_km=10.0)
        candidate_filter = build_candidate_filter(requester.id, prefs, TODAY, origin=requester.location)

        async with uow_factory() as uow:
            result = await uow.profiles.find_candidates(candidate_filter, 0, 20)

        assert [p.id for p in result.items] == [active.id]
        assert not result.has_next

    async def test_filters_each_predicate(self, uow_factory):
        requester = await _create(uow_factory, _profile("req@example.com", gender=Gender.MALE))
        match = await _create(uow_factory, _profile("match@example.com"))
        await _create(uow_factory, _profile("male@example.com", gender=Gender.MALE))
        await _create(uow_factory, _profile("young@example.com", birth_date=years_before(TODAY, 24)))
        await _create(uow_factory, _profile("old@example.com", birth_date=years_before(TODAY, 31)))
        await _create(uow_factory, _profile("hidden@example.com", preferences=Preferences(show_me=False)))
        await _create(uow_factory, _profile("far@example.com", location=GeoPoint(11.58, 48.14)))
        await _create(uow_factory, _profile("nowhere@example.com", location=None))
        prefs = Preferences(gender_preferences={Gender.FEMALE}, min_age=25, max_age=30, max_distance_km=10.0)
        candidate_filter = build_candidate_filter(requester.id, prefs, TODAY, origin=BERLIN)

        async with uow_factory() as uow:
            result = await uow.profiles.find_candidates(candidate_filter, 0, 20)

        assert [p.id for p in result.items] == [match.id]

    async def test_age_bounds_are_inclusive(self, uow_factory):
        requester = await _create(uow_factory, _profile("req@example.com", gender=Gender.MALE))
        youngest = await _create(uow_factory, _profile("a@example.com", birth_date=years_before(TODAY, 25)))
        oldest = await _create(
            uow_factory,
            _profile("b@example.com", birth_date=date(TODAY.year - 31, TODAY.month, TODAY.day + 1)),
        )
        prefs = Preferences(gender_preferences={Gender.FEMALE}, min_age=25, max_age=30, max_distance_km=None)
        candidate_filter = build_candidate_filter(requester.id, prefs, TODAY)

        async with uow_factory() as uow:
            result = await uow.profiles.find_candidates(candidate_filter, 0, 20)

        assert {p.id for p in result.items} == {youngest.id, oldest.id}

    @pytest.mark.parametrize("with_distance", [False, True])
    async def test_paging_is_ordered_by_id(self, uow_factory, with_distance: bool):
        requester = await _create(uow_factory, _profile("req@example.com", gender=Gender.MALE))
        ids = sorted(
            [(await _create(uow_factory, _profile(f"c{i}@example.com"))).id for i in range(5)]
        )
        prefs = Preferences(
            gender_preferences={Gender.FEMALE},
            min_age=18,
            max_age=100,
            max_distance_km=10.0 if with_distance else None,
        )
        candidate_filter = build_candidate_filter(requester.id, prefs, TODAY, origin=BERLIN)

        pages = []
        async with uow_factory() as uow:
            for page in range(3):
                pages.append(await uow.profiles.find_candidates(candidate_filter, page, 2))

        assert [[p.id for p in page.items] for page in pages] == [ids[0:2], ids[2:4], ids[4:5]]
        assert [page.has_next for page in pages] == [True, True, False]


class TestListProfiles:
    async def test_pages_visible_profiles_by_id(self, uow_factory):
        ids = sorted(
            [(await _create(uow_factory, _profile(f"p{i}@example.com"))).id for i in range(3)]
        )
        await _create(uow_factory, _profile("inactive@example.com", is_active=False))
        await _create(
            uow_factory,
            _profile("hidden@example.com", preferences=Preferences(show_me=False)),
        )

        async with uow_factory() as uow:
            first = await uow.profiles.list_profiles(0, 2)
            second = await uow.profiles.list_profiles(1, 2)

        assert [p.id for p in first.items] == ids[:2]
        assert first.has_next
        assert [p.id for p in second.items] == ids[2:]
        assert not second.has_next


class TestSearch:
    async def test_interests_match_any_tag(self, uow_factory):
        a = await _create(uow_factory, _profile("a@example.com", interests=["jazz"]))
        b = await _create(uow_factory, _profile("b@example.com", interests=["chess", "hiking"]))
        await _create(uow_factory, _profile("c@example.com", interests=["surfing"]))
        await _create(uow_factory, _profile("d@example.com", interests=["jazz"], is_active=False))

        async with uow_factory() as uow:
            result = await uow.profiles.search(
                ProfileSearch(today=TODAY, interests=("jazz", "chess")), 0, 20
            )

        assert [p.id for p in result.items] == sorted([a.id, b.id])

    async def test_gender_age_and_interests_combine(self, uow_factory):
        match = await _create(uow_factory, _profile("match@example.com", interests=["jazz"]))
        await _create(
            uow_factory, _profile("male@example.com", gender=Gender.MALE, interests=["jazz"])
        )
        await _create(
            uow_factory,
            _profile("old@example.com", birth_date=years_before(TODAY, 41), interests=["jazz"]),
        )
        await _create(uow_factory, _profile("chess@example.com", interests=["chess"]))
        criteria = ProfileSearch(
            today=TODAY,
            genders=frozenset({Gender.FEMALE}),
            min_age=25,
            max_age=40,
            interests=("jazz",),
        )

        async with uow_factory() as uow:
            result = await uow.profiles.search(criteria, 0, 20)

        assert [p.id for p in result.items] == [match.id]

    async def test_open_ended_age_range_is_inclusive(self, uow_factory):
        youngest = await _create(
            uow_factory, _profile("young@example.com", birth_date=years_before(TODAY, 30))
        )
        await _create(
            uow_factory,
            _profile("younger@example.com", birth_date=date(2000, 6, 16)),
        )

        async with uow_factory() as uow:
            result = await uow.profiles.search(ProfileSearch(today=TODAY, min_age=30), 0, 20)

        assert [p.id for p in result.items] == [youngest.id]
