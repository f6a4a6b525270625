"""Wiring for the client-side profile helper."""

from typing import Optional

import httpx

from core.config import settings
from core.exceptions import AuthenticationError, ErrorCode
from domain.repositories.profile_cache import IProfileCache
from domain.services.profile_sync_service import ProfileSyncService
from infrastructure.auth.jwt_provider import decode_identity_claims
from infrastructure.cache.profile_cache import JsonFileProfileCache
from infrastructure.http.user_api_client import UserApiClient


def build_profile_sync(
    id_token: str,
    cache: Optional[IProfileCache] = None,
    base_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ProfileSyncService:
    """Build a ProfileSyncService for the identity in ``id_token``.

    The token's ``sub`` becomes the record key and its ``email`` seeds the
    default profile. The same token is sent as the bearer credential on
    every store call. Without an explicit cache the file-backed one under
    ``settings.profile_cache_dir`` is used.
    """
    identity = decode_identity_claims(id_token)
    if identity is None:
        raise AuthenticationError(
            message="ID token has no subject or email claim",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    gateway = UserApiClient(
        id_token,
        base_url=base_url or settings.api_base_url,
        timeout=settings.client_timeout_seconds,
        transport=transport,
    )
    if cache is None:
        cache = JsonFileProfileCache(settings.profile_cache_dir)

    return ProfileSyncService(
        gateway,
        cache,
        identity.id,
        identity.email,
        max_upload_bytes=settings.upload_max_bytes,
    )
