"""Profile API routes."""

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_matching_service, get_profile_service
from api.v1.schemas.profile import (
    ProfileDetailResponse,
    ProfileListResponse,
    ProfileReplace,
    ProfileUpdate,
    build_profile_response,
)
from core.exceptions import ProfileNotFoundError
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.profile import Gender, Profile
from domain.queries.page import Page
from domain.services.matching_service import DEFAULT_PAGE_SIZE, MatchingService
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get(
    "/me",
    response_model=ProfileDetailResponse,
    summary="Get own profile",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_own_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the authenticated profile, including private fields."""
    profile = await service.require_profile(user.id)
    return ProfileDetailResponse(data=build_profile_response(profile, owner=True))


@router.post(
    "/me/activity",
    response_model=ProfileDetailResponse,
    summary="Record activity",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def record_activity(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Bump the authenticated profile's last-active time."""
    profile = await service.record_activity(user.id)
    return ProfileDetailResponse(data=build_profile_response(profile, owner=True))


@router.get(
    "",
    response_model=ProfileListResponse,
    summary="List profiles",
    responses={400: {"description": "Invalid paging"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_profiles(
    request: Request,
    user: CurrentUser,
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
    service: MatchingService = Depends(get_matching_service),
) -> ProfileListResponse:
    """Browse active, visible profiles page by page, ordered by ID."""
    result = await service.list_profiles(page=page, size=size)
    return _list_response(result)


@router.get(
    "/search",
    response_model=ProfileListResponse,
    summary="Search profiles",
    responses={400: {"description": "No criteria, bad age range or invalid paging"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def search_profiles(
    request: Request,
    user: CurrentUser,
    interests: list[str] | None = Query(None),
    gender: list[Gender] | None = Query(None),
    min_age: int | None = None,
    max_age: int | None = None,
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
    service: MatchingService = Depends(get_matching_service),
) -> ProfileListResponse:
    """
    Search visible profiles, ordered by ID.

    `gender` and `interests` may be repeated. Criteria combine with AND; a
    profile matches `interests` when it has any of the tags.
    """
    result = await service.search_profiles(
        interests=interests,
        genders=gender,
        min_age=min_age,
        max_age=max_age,
        page=page,
        size=size,
    )
    return _list_response(result)


@router.get(
    "/{profile_id}",
    response_model=ProfileDetailResponse,
    summary="Get a profile",
    responses={404: {"description": "Profile not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    profile_id: str,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get a profile by ID. Private fields are included only for the owner."""
    profile = await service.get_profile(profile_id)
    if profile is None:
        raise ProfileNotFoundError(profile_id)
    return ProfileDetailResponse(
        data=build_profile_response(profile, owner=profile.id == user.id)
    )


@router.put(
    "/{profile_id}",
    response_model=ProfileDetailResponse,
    summary="Replace a profile",
    responses={
        200: {"description": "Profile replaced"},
        400: {"description": "Validation error"},
        403: {"description": "Not the profile owner"},
        404: {"description": "Profile not found"},
        409: {"description": "Version conflict"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def replace_profile(
    request: Request,
    profile_id: str,
    body: ProfileReplace,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Replace every editable field. `version` must match the stored version."""
    profile = await service.replace_profile(
        profile_id=profile_id,
        actor_id=user.id,
        version=body.version,
        display_name=body.display_name,
        birth_date=body.birth_date,
        gender=body.gender,
        photos=[p.to_domain() for p in body.photos],
        preferences=body.preferences.to_domain(),
        location=body.location.to_domain() if body.location else None,
        bio=body.bio,
        interests=body.interests,
    )
    return ProfileDetailResponse(data=build_profile_response(profile, owner=True))


@router.patch(
    "/{profile_id}",
    response_model=ProfileDetailResponse,
    summary="Update a profile",
    responses={
        200: {"description": "Profile updated"},
        400: {"description": "Validation error"},
        403: {"description": "Not the profile owner"},
        404: {"description": "Profile not found"},
        409: {"description": "Version conflict"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_profile(
    request: Request,
    profile_id: str,
    body: ProfileUpdate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """
    Update the supplied fields only. `version` must match the stored version.

    Set `bio` or `location` to `null` to clear them.
    """
    # Sentinels: only pass nullable fields if explicitly set in the request
    bio = ... if "bio" not in body.model_fields_set else body.bio
    location = (
        ...
        if "location" not in body.model_fields_set
        else (body.location.to_domain() if body.location else None)
    )

    profile = await service.patch_profile(
        profile_id=profile_id,
        actor_id=user.id,
        version=body.version,
        display_name=body.display_name,
        gender=body.gender,
        bio=bio,
        interests=body.interests,
        photos=[p.to_domain() for p in body.photos] if body.photos is not None else None,
        location=location,
        preference_changes=body.preferences.changes() if body.preferences else None,
    )
    return ProfileDetailResponse(data=build_profile_response(profile, owner=True))


@router.delete(
    "/{profile_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a profile",
    responses={
        204: {"description": "Profile deleted"},
        403: {"description": "Not the profile owner"},
        404: {"description": "Profile not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_profile(
    request: Request,
    profile_id: str,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> None:
    """Delete the authenticated profile."""
    await service.delete_profile(profile_id, actor_id=user.id)
    return None


def _list_response(result: Page[Profile]) -> ProfileListResponse:
    """Public views of one page of profiles."""
    return ProfileListResponse(
        data=[build_profile_response(p) for p in result.items],
        meta={"page": result.page, "size": result.size, "has_next": result.has_next},
    )
