"""Candidate discovery, match and message API routes."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_matching_service
from api.v1.schemas.match import (
    MatchCreate,
    MatchDetailResponse,
    MatchResponse,
    MessageCreate,
)
from api.v1.schemas.profile import ProfileListResponse, build_profile_response
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.matching_service import DEFAULT_PAGE_SIZE, MatchingService

router = APIRouter(tags=["matching"])


@router.get(
    "/candidates",
    response_model=ProfileListResponse,
    summary="Find candidates",
    responses={
        400: {"description": "Invalid stored preferences or paging"},
        404: {"description": "Requester profile not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def find_candidates(
    request: Request,
    user: CurrentUser,
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
    service: MatchingService = Depends(get_matching_service),
) -> ProfileListResponse:
    """
    Get candidates matching the authenticated profile's preferences.

    Results are ordered by profile ID. The distance limit applies only when
    the requester has a location.
    """
    result = await service.find_candidates_for(user.id, page=page, size=size)
    return ProfileListResponse(
        data=[build_profile_response(p) for p in result.items],
        meta={"page": result.page, "size": result.size, "has_next": result.has_next},
    )


@router.post(
    "/matches",
    response_model=MatchDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Announce a match",
    responses={
        400: {"description": "Cannot match with yourself"},
        404: {"description": "Profile not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def announce_match(
    request: Request,
    body: MatchCreate,
    user: CurrentUser,
    service: MatchingService = Depends(get_matching_service),
) -> MatchDetailResponse:
    """Publish a mutual match between the authenticated profile and another."""
    match_id = await service.announce_match(user.id, body.other_profile_id)
    return MatchDetailResponse(
        data=MatchResponse(
            match_id=match_id,
            user_id_1=user.id,
            user_id_2=body.other_profile_id,
        )
    )


@router.post(
    "/messages",
    status_code=status.HTTP_202_ACCEPTED,
    summary="Send a message",
    responses={
        400: {"description": "Empty or oversized message"},
        404: {"description": "Recipient not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def send_message(
    request: Request,
    body: MessageCreate,
    user: CurrentUser,
    service: MatchingService = Depends(get_matching_service),
) -> None:
    """Publish a message event to the recipient."""
    await service.send_message(user.id, body.recipient_id, body.content)
    return None
