"""JWT authentication provider implementation.

Supports both Cognito-issued ID tokens (RS256 via the user pool JWKS) and
locally-created tokens (HS256 for tests and local runs).

Cognito ID token payload structure:
    {
        "sub": "3f1c...-uuid",
        "email": "user@example.com",
        "cognito:username": "user",
        "preferred_username": "Gig Goer",
        "token_use": "id",
        "aud": "<app client id>",
        "exp": 1234567890
    }
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import httpx
from jose import JWTError, jwt

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)

# Module-level JWKS cache (fetched once, reused across requests)
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys() -> dict[str, Any]:
    """Fetch and cache JWKS keys from the Cognito user pool."""
    global _jwks_cache
    if _jwks_cache is not None:
        return _jwks_cache

    jwks_url = settings.cognito_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            jwks_data = response.json()
    except httpx.HTTPError:
        logger.exception("Failed to fetch JWKS from %s", jwks_url)
        return {}

    _jwks_cache = {
        key_data["kid"]: key_data
        for key_data in jwks_data.get("keys", [])
        if key_data.get("kid")
    }
    logger.info("Fetched %d JWKS keys from Cognito", len(_jwks_cache))
    return _jwks_cache


def _expiry(payload: dict[str, Any]) -> Optional[datetime]:
    exp = payload.get("exp")
    if exp is None:
        return None
    return datetime.fromtimestamp(int(exp), tz=timezone.utc)


def claims_to_user(payload: dict[str, Any]) -> Optional[TokenUser]:
    """Map ID token claims to a TokenUser, or None if sub/email are missing."""
    user_id = payload.get("sub")
    email = payload.get("email")
    if not user_id or not email:
        return None

    display_name = payload.get("preferred_username") or payload.get(
        "cognito:username"
    )
    return TokenUser(
        id=str(user_id),
        email=email,
        display_name=display_name,
        expires_at=_expiry(payload),
    )


def decode_identity_claims(id_token: str) -> Optional[TokenUser]:
    """Read the identity out of an ID token without verifying it.

    Used client side, where the token came straight from the identity
    provider and the server verifies it on every request anyway.
    """
    try:
        payload = jwt.get_unverified_claims(id_token)
    except JWTError:
        return None
    return claims_to_user(payload)


class JWTAuthProvider:
    """JWT-based authentication provider.

    Handles validation of both Cognito-issued (RS256) and
    locally-created (HS256) JWTs.
    """

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT token and extract user info.

        Detects the signing algorithm from the token header:
        - RS256 (Cognito): validates via JWKS public key
        - HS256 (local/test): validates via shared secret

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        try:
            header = jwt.get_unverified_header(token)
            alg = header.get("alg", self._algorithm)

            if alg == "RS256":
                payload = await self._validate_rs256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if payload is None:
            return None

        return claims_to_user(payload)

    async def _validate_rs256(
        self, token: str, header: dict
    ) -> Optional[dict]:
        """Validate an RS256-signed JWT using the user pool's public keys."""
        kid = header.get("kid")
        if not kid:
            return None

        jwks_keys = await _get_jwks_keys()
        key_data = jwks_keys.get(kid)
        if not key_data:
            # Unknown kid, refetch once in case the pool rotated its keys
            global _jwks_cache
            _jwks_cache = None
            jwks_keys = await _get_jwks_keys()
            key_data = jwks_keys.get(kid)
            if not key_data:
                logger.warning("JWKS key not found for kid=%s", kid)
                return None

        # ID tokens are checked on their own, without the paired access token
        options = {
            "verify_aud": bool(settings.cognito_client_id),
            "verify_at_hash": False,
        }
        return jwt.decode(
            token,
            key_data,
            algorithms=["RS256"],
            audience=settings.cognito_client_id or None,
            options=options,
        )

    def create_token(self, user: TokenUser) -> str:
        """
        Create a JWT token for a user (HS256, used for tests).

        Args:
            user: The user to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.now(timezone.utc) + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": user.id,
            "email": user.email,
            "token_use": "id",
            "exp": expire,
        }
        if user.display_name:
            payload["preferred_username"] = user.display_name

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
