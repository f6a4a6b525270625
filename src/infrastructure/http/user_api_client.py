"""HTTP client for the user profile store.

Implements ``IUserGateway`` over the REST routes so the profile sync
helper can run against a deployed API.
"""

import base64
from urllib.parse import quote
from typing import Any, Optional

import httpx
import structlog

from core.config import settings
from core.exceptions import (
    AppException,
    AuthenticationError,
    ErrorCode,
    MalformedRequestError,
    RequestTimeoutError,
    StorageFaultError,
    UserNotFoundError,
)
from domain.entities.user import UserProfile

logger = structlog.get_logger()


def _user_path(identifier: str) -> str:
    # Emails may contain "?", "#", "%" or "/", which must stay in the path segment
    return f"/users/{quote(identifier, safe='@')}"


class UserApiClient:
    """User store gateway backed by ``httpx.AsyncClient``.

    Every call sends the caller's ID token as a bearer credential and is
    bounded by a single per-round-trip timeout.
    """

    def __init__(
        self,
        token: str,
        base_url: str = settings.api_base_url,
        timeout: float = settings.client_timeout_seconds,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def create(self, user: UserProfile) -> str:
        response = await self._request(
            "create user", "POST", "/users", json=user.to_record()
        )
        return str(response.json()["userID"])

    async def get(self, identifier: str) -> UserProfile:
        response = await self._request(
            "retrieve user", "GET", _user_path(identifier), identifier=identifier
        )
        return UserProfile.from_record(response.json())

    async def list_all(self) -> list[UserProfile]:
        response = await self._request("retrieve users", "GET", "/users")
        return [UserProfile.from_record(record) for record in response.json()]

    async def replace(self, user: UserProfile) -> UserProfile:
        response = await self._request(
            "update user",
            "PUT",
            _user_path(user.user_id),
            json=user.to_record(),
            identifier=user.user_id,
        )
        return UserProfile.from_record(response.json())

    async def delete(self, user_id: str) -> None:
        await self._request("delete user", "DELETE", _user_path(user_id))

    async def upload_image(self, data: bytes, filename: str, folder: str) -> str:
        """Post a base64 encoded image to the upload endpoint, return its URL."""
        payload = {
            "image": base64.b64encode(data).decode("ascii"),
            "filename": filename,
            "folder": folder,
        }
        response = await self._request("upload image", "POST", "/upload", json=payload)
        return str(response.json()["imageUrl"])

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        json: Any = None,
        identifier: Optional[str] = None,
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
                headers={"Authorization": f"Bearer {self._token}"},
            ) as client:
                response = await client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            logger.warning("user_api_timeout", operation=operation, timeout=self._timeout)
            raise RequestTimeoutError(operation, self._timeout) from e
        except httpx.HTTPError as e:
            logger.warning("user_api_unreachable", operation=operation, error=str(e))
            raise StorageFaultError(operation, str(e)) from e

        if response.is_success:
            return response

        raise self._error_for(operation, response, identifier)

    @staticmethod
    def _error_for(
        operation: str, response: httpx.Response, identifier: Optional[str]
    ) -> AppException:
        """Turn an error response back into the exception the server raised."""
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        status = response.status_code
        code = body.get("error_code")
        message = body.get("message") or response.reason_phrase

        logger.info(
            "user_api_error", operation=operation, status=status, error_code=code
        )

        if status == 404:
            return UserNotFoundError(identifier or "")
        if status == 401:
            auth_code = (
                ErrorCode.INVALID_TOKEN
                if code == ErrorCode.INVALID_TOKEN
                else ErrorCode.UNAUTHORIZED
            )
            return AuthenticationError(message=message, error_code=auth_code)
        if status >= 500:
            return StorageFaultError(operation, f"HTTP {status}: {message}")
        if code == ErrorCode.MALFORMED_REQUEST:
            return MalformedRequestError(message)
        if code in ErrorCode.__members__:
            return AppException(
                error_code=ErrorCode(code),
                message=message,
                status_code=status,
                details=body.get("details"),
            )
        return AppException(
            error_code=ErrorCode.INTERNAL_ERROR,
            message=message,
            status_code=status,
        )
