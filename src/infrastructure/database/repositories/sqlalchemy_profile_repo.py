"""SQLAlchemy implementation of Profile repository."""

from datetime import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import Select, and_, delete, exists, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from core.exceptions import EmailAlreadyRegisteredError, ProfileNotFoundError, VersionConflictError
from domain.entities.profile import Gender, GeoPoint, Photo, Preferences, Profile
from domain.queries.candidate_filter import CandidateFilter
from domain.queries.page import Page
from domain.queries.profile_search import ProfileSearch
from infrastructure.database.models import ProfileInterestModel, ProfileModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: str) -> Profile | None:
        """Get a profile by ID."""
        model = await self._get_model(id)
        return self._to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Profile | None:
        """Get a profile by email."""
        stmt = select(ProfileModel).where(ProfileModel.email == email)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def exists_by_email(self, email: str) -> bool:
        """Check whether an email is already registered."""
        stmt = select(exists().where(ProfileModel.email == email))
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def create(self, profile: Profile) -> Profile:
        """Insert a new profile with a store-assigned ID."""
        model = self._to_model(profile)
        model.id = str(uuid4())
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            await self._session.rollback()
            if await self.exists_by_email(profile.email):
                raise EmailAlreadyRegisteredError(profile.email) from e
            raise
        return self._to_entity(model)

    async def update(self, profile: Profile) -> Profile:
        """Update an existing profile, checking its version."""
        if profile.id is None:
            raise ValueError("Cannot update a profile without an ID")

        model = await self._get_model(profile.id)
        if not model:
            raise ProfileNotFoundError(profile.id)
        if model.version != profile.version:
            raise VersionConflictError(profile.id, profile.version)

        # Identity and creation time never change
        model.display_name = profile.display_name
        model.birth_date = profile.birth_date
        model.gender = profile.gender.value
        model.bio = profile.bio
        model.photos = self._photos_to_json(profile.photos)
        model.longitude = profile.location.longitude if profile.location else None
        model.latitude = profile.location.latitude if profile.location else None
        model.gender_preferences = sorted(g.value for g in profile.preferences.gender_preferences)
        model.min_age = profile.preferences.min_age
        model.max_age = profile.preferences.max_age
        model.max_distance_km = profile.preferences.max_distance_km
        model.show_me = profile.preferences.show_me
        model.is_active = profile.is_active
        model.is_verified = profile.is_verified
        model.updated_at = profile.updated_at
        model.last_active_at = profile.last_active_at
        if [i.tag for i in model.interests] != profile.interests:
            model.interests = self._interests_to_models(profile.interests)

        try:
            await self._session.flush()
        except StaleDataError as e:
            raise VersionConflictError(profile.id, profile.version) from e
        return self._to_entity(model)

    async def delete(self, id: str) -> bool:
        """Delete a profile and its interests."""
        await self._session.execute(
            delete(ProfileInterestModel).where(ProfileInterestModel.profile_id == id)
        )
        result = await self._session.execute(delete(ProfileModel).where(ProfileModel.id == id))
        return bool(result.rowcount)

    async def find_candidates(
        self, candidate_filter: CandidateFilter, page: int, size: int
    ) -> Page[Profile]:
        """Get one page of candidates ordered by ID.

        Scalar predicates and the bounding box run in SQL. The exact
        great-circle check runs here, so paging happens after it when a
        distance filter is present.
        """
        stmt = self._candidate_query(candidate_filter)

        if not candidate_filter.has_distance_filter:
            return await self._fetch_page(stmt, page, size)

        result = await self._session.execute(stmt)
        start = page * size
        window: list[Profile] = []
        seen = 0
        for model in result.scalars():
            point = None
            if model.longitude is not None and model.latitude is not None:
                point = GeoPoint(longitude=model.longitude, latitude=model.latitude)
            if not candidate_filter.within_distance(point):
                continue
            if seen >= start:
                window.append(self._to_entity(model))
                if len(window) > size:
                    break
            seen += 1
        return Page.from_window(window, page, size)

    async def list_profiles(self, page: int, size: int) -> Page[Profile]:
        """Get one page of active, visible profiles ordered by ID."""
        return await self._fetch_page(self._visible_query(), page, size)

    async def search(self, criteria: ProfileSearch, page: int, size: int) -> Page[Profile]:
        """Get active, visible profiles meeting every supplied criterion."""
        stmt = self._visible_query()
        if criteria.genders:
            stmt = stmt.where(ProfileModel.gender.in_(sorted(g.value for g in criteria.genders)))
        if criteria.born_after is not None:
            stmt = stmt.where(ProfileModel.birth_date > criteria.born_after)
        if criteria.born_on_or_before is not None:
            stmt = stmt.where(ProfileModel.birth_date <= criteria.born_on_or_before)
        if criteria.interests:
            matching_ids = select(ProfileInterestModel.profile_id).where(
                ProfileInterestModel.tag.in_(criteria.interests)
            )
            stmt = stmt.where(ProfileModel.id.in_(matching_ids))
        return await self._fetch_page(stmt, page, size)

    @staticmethod
    def _visible_query() -> Select[tuple[ProfileModel]]:
        return (
            select(ProfileModel)
            .where(ProfileModel.is_active.is_(True), ProfileModel.show_me.is_(True))
            .order_by(ProfileModel.id)
        )

    async def _fetch_page(
        self, stmt: Select[tuple[ProfileModel]], page: int, size: int
    ) -> Page[Profile]:
        result = await self._session.execute(stmt.offset(page * size).limit(size + 1))
        rows = [self._to_entity(m) for m in result.scalars()]
        return Page.from_window(rows, page, size)

    def _candidate_query(self, f: CandidateFilter) -> Select[tuple[ProfileModel]]:
        """Translate a candidate filter into a SELECT ordered by ID."""
        conditions: list[Any] = [
            ProfileModel.id != f.exclude_id,
            ProfileModel.is_active.is_(True),
            ProfileModel.show_me.is_(True),
            ProfileModel.gender.in_(sorted(g.value for g in f.genders)),
            ProfileModel.birth_date > f.born_after,
            ProfileModel.birth_date <= f.born_on_or_before,
        ]
        if f.box is not None:
            conditions.append(ProfileModel.latitude.between(f.box.min_latitude, f.box.max_latitude))
            if f.box.crosses_antimeridian:
                conditions.append(
                    or_(
                        ProfileModel.longitude >= f.box.min_longitude,
                        ProfileModel.longitude <= f.box.max_longitude,
                    )
                )
            else:
                conditions.append(
                    ProfileModel.longitude.between(f.box.min_longitude, f.box.max_longitude)
                )
        return select(ProfileModel).where(and_(*conditions)).order_by(ProfileModel.id)

    async def _get_model(self, id: str) -> ProfileModel | None:
        stmt = select(ProfileModel).where(ProfileModel.id == id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _photos_to_json(photos: list[Photo]) -> list[dict[str, Any]]:
        return [
            {"url": p.url, "is_primary": p.is_primary, "uploaded_at": p.uploaded_at.isoformat()}
            for p in photos
        ]

    @staticmethod
    def _interests_to_models(interests: list[str]) -> list[ProfileInterestModel]:
        return [
            ProfileInterestModel(tag=tag, position=position)
            for position, tag in enumerate(interests)
        ]

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        location = None
        if model.longitude is not None and model.latitude is not None:
            location = GeoPoint(longitude=model.longitude, latitude=model.latitude)
        return Profile(
            id=model.id,
            email=model.email,
            password_hash=model.password_hash,
            display_name=model.display_name,
            birth_date=model.birth_date,
            gender=Gender(model.gender),
            bio=model.bio,
            interests=[i.tag for i in model.interests],
            photos=[
                Photo(
                    url=p["url"],
                    is_primary=p["is_primary"],
                    uploaded_at=datetime.fromisoformat(p["uploaded_at"]),
                )
                for p in model.photos
            ],
            location=location,
            preferences=Preferences(
                gender_preferences={Gender(g) for g in model.gender_preferences},
                min_age=model.min_age,
                max_age=model.max_age,
                max_distance_km=model.max_distance_km,
                show_me=model.show_me,
            ),
            is_active=model.is_active,
            is_verified=model.is_verified,
            created_at=model.created_at,
            updated_at=model.updated_at,
            last_active_at=model.last_active_at,
            version=model.version,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            email=entity.email,
            password_hash=entity.password_hash,
            display_name=entity.display_name,
            birth_date=entity.birth_date,
            gender=entity.gender.value,
            bio=entity.bio,
            photos=self._photos_to_json(entity.photos),
            longitude=entity.location.longitude if entity.location else None,
            latitude=entity.location.latitude if entity.location else None,
            gender_preferences=sorted(g.value for g in entity.preferences.gender_preferences),
            min_age=entity.preferences.min_age,
            max_age=entity.preferences.max_age,
            max_distance_km=entity.preferences.max_distance_km,
            show_me=entity.preferences.show_me,
            is_active=entity.is_active,
            is_verified=entity.is_verified,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            last_active_at=entity.last_active_at,
            interests=self._interests_to_models(entity.interests),
        )
