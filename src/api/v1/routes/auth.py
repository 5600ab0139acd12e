"""Auth API routes."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import get_auth_provider
from api.v1.dependencies import get_profile_service
from api.v1.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenDetailResponse,
    TokenResponse,
)
from api.v1.schemas.profile import build_profile_response
from core.rate_limit import WRITE_LIMIT, limiter
from domain.entities.profile import Profile
from domain.services.profile_service import ProfileService
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_token(profile: Profile, auth_provider: JWTAuthProvider) -> TokenDetailResponse:
    assert profile.id is not None
    token = auth_provider.create_token(
        TokenUser(id=profile.id, email=profile.email, display_name=profile.display_name)
    )
    return TokenDetailResponse(
        data=TokenResponse(
            access_token=token,
            expires_in=auth_provider.expire_minutes * 60,
            profile=build_profile_response(profile, owner=True),
        )
    )


@router.post(
    "/register",
    response_model=TokenDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a profile",
    responses={
        201: {"description": "Profile registered"},
        400: {"description": "Validation error"},
        409: {"description": "Email already registered"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def register(
    request: Request,
    body: RegisterRequest,
    service: ProfileService = Depends(get_profile_service),
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenDetailResponse:
    """Create a profile and return a bearer token for it."""
    profile = await service.register(
        email=body.email,
        password=body.password,
        display_name=body.display_name,
        birth_date=body.birth_date,
        gender=body.gender,
        photos=[p.to_domain() for p in body.photos],
        preferences=body.preferences.to_domain(),
        location=body.location.to_domain() if body.location else None,
        bio=body.bio,
        interests=body.interests,
    )
    return _issue_token(profile, auth_provider)


@router.post(
    "/login",
    response_model=TokenDetailResponse,
    summary="Log in",
    responses={
        200: {"description": "Credentials accepted"},
        401: {"description": "Invalid email or password"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def login(
    request: Request,
    body: LoginRequest,
    service: ProfileService = Depends(get_profile_service),
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenDetailResponse:
    """Exchange email and password for a bearer token."""
    profile = await service.authenticate(body.email, body.password)
    return _issue_token(profile, auth_provider)
