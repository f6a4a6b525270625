"""User profile API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_user_service
from api.v1.schemas.common import ErrorResponse, MessageResponse
from api.v1.schemas.user import (
    CreateUserResponse,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from core.exceptions import MalformedRequestError
from core.rate_limit import limiter
from domain.services.user_service import UserService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid token"}},
)


@router.post(
    "",
    response_model=CreateUserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user record",
    responses={
        201: {"description": "User created"},
        400: {"model": ErrorResponse, "description": "Invalid JSON in request body"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_user(
    request: Request,
    body: UserCreate,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> CreateUserResponse:
    """Create a record. An existing record with the same userID is overwritten."""
    user_id = await service.create(
        user_id=body.user_id,
        name=body.name,
        email=body.email,
        preferences=body.preferences,
        profile_picture_url=body.profile_picture_url,
        bio=body.bio,
        location=body.location,
        website=body.website,
        joined_events=body.joined_event_entities(),
        created_at=body.created_at,
    )
    return CreateUserResponse(user_id=user_id)


@router.get(
    "",
    response_model=list[UserResponse],
    summary="List user records",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_users(
    request: Request,
    user: CurrentUser,
    limit: Optional[int] = Query(None, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    service: UserService = Depends(get_user_service),
) -> list[UserResponse]:
    """Return every record, or one page of them when ``limit`` is given."""
    users = await service.list_all(limit=limit, offset=offset)
    return [UserResponse.from_entity(u) for u in users]


@router.get(
    "/{identifier}",
    response_model=UserResponse,
    summary="Get a user by userID or email",
    responses={404: {"model": ErrorResponse, "description": "User not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_user(
    request: Request,
    identifier: str,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Look up by primary key first, then by exact email match."""
    found = await service.get(identifier)
    return UserResponse.from_entity(found)


async def _replace(service: UserService, user_id: str, body: UserUpdate) -> UserResponse:
    stored = await service.replace(
        user_id,
        name=body.name,
        email=body.email,
        preferences=body.preferences,
        profile_picture_url=body.profile_picture_url,
        bio=body.bio,
        location=body.location,
        website=body.website,
        joined_events=body.joined_event_entities(),
    )
    return UserResponse.from_entity(stored)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    summary="Replace a user record",
    responses={
        200: {"description": "Record as stored after the update"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_user(
    request: Request,
    user_id: str,
    body: UserUpdate,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Overwrite every tracked field. Omitted fields are reset, not kept."""
    return await _replace(service, user_id, body)


@router.put(
    "",
    response_model=UserResponse,
    summary="Replace a user record addressed by the body's userID",
    responses={
        200: {"description": "Record as stored after the update"},
        400: {"model": ErrorResponse, "description": "userID missing from the body"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_user_from_body(
    request: Request,
    body: UserUpdate,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Same as the path variant, with the key taken from ``userID``."""
    if not body.user_id:
        raise MalformedRequestError("userID is required in request body")
    return await _replace(service, body.user_id, body)


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Delete a user record",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_user(
    request: Request,
    user_id: str,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Delete a record. Succeeds whether or not it existed."""
    await service.delete(user_id)
    return MessageResponse(message="User deleted")
