"""Dependency injection factories for API v1."""

from typing import Callable

from fastapi import Depends, Request

from domain.services.event_service import EventService
from domain.services.matching_service import MatchingService
from domain.services.profile_service import ProfileService
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.resources import Resources


def get_resources(request: Request) -> Resources:
    """Resources created by the application lifespan."""
    return request.app.state.resources


def get_uow_factory(
    resources: Resources = Depends(get_resources),
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(resources.session_factory)

    return factory


def get_event_service(resources: Resources = Depends(get_resources)) -> EventService:
    """Get Event service instance."""
    return EventService(resources.event_publisher)


def get_profile_service(
    resources: Resources = Depends(get_resources),
    uow_factory: Callable[[], SQLAlchemyUnitOfWork] = Depends(get_uow_factory),
    event_service: EventService = Depends(get_event_service),
) -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(
        uow_factory,
        cache=resources.cache_store,
        event_service=event_service,
        cache_ttl_seconds=resources.settings.cache_ttl_seconds,
        cache_key_prefix=resources.settings.cache_key_prefix,
    )


def get_matching_service(
    resources: Resources = Depends(get_resources),
    uow_factory: Callable[[], SQLAlchemyUnitOfWork] = Depends(get_uow_factory),
    profile_service: ProfileService = Depends(get_profile_service),
    event_service: EventService = Depends(get_event_service),
) -> MatchingService:
    """Get Matching service instance."""
    return MatchingService(
        uow_factory,
        profile_service=profile_service,
        event_service=event_service,
        max_page_size=resources.settings.candidate_max_page_size,
    )
