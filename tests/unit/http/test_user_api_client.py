"""Unit tests for UserApiClient against a mocked transport."""

import base64
import json
from collections.abc import Callable

import httpx
import pytest

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
from infrastructure.http.user_api_client import UserApiClient

BASE_URL = "https://api.example.com/api/v1"

RECORD = {
    "userID": "sub-1",
    "name": "sam",
    "email": "sam@example.com",
    "preferences": {"genres": ["rock"]},
    "profilePictureUrl": None,
    "bio": None,
    "location": None,
    "website": None,
    "joinedEvents": [],
    "createdAt": "2024-01-01T00:00:00.000Z",
}


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> UserApiClient:
    return UserApiClient(
        token="id-token",
        base_url=BASE_URL,
        timeout=2.5,
        transport=httpx.MockTransport(handler),
    )


class TestRequests:
    async def test_get_sends_bearer_token(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=RECORD)

        user = await _client(handler).get("sub-1")

        assert user.email == "sam@example.com"
        assert seen[0].method == "GET"
        assert seen[0].url.path == "/api/v1/users/sub-1"
        assert seen[0].headers["Authorization"] == "Bearer id-token"

    async def test_email_with_reserved_characters_stays_in_path(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={**RECORD, "email": "fan?club@x.com"})

        user = await _client(handler).get("fan?club@x.com")

        assert user.email == "fan?club@x.com"
        assert seen[0].url.path == "/api/v1/users/fan?club@x.com"
        assert seen[0].url.query == b""
        assert seen[0].url.raw_path == b"/api/v1/users/fan%3Fclub@x.com"

    async def test_delete_encodes_slash_and_hash(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"message": "User deleted"})

        await _client(handler).delete("a/b#c")

        assert seen[0].url.raw_path == b"/api/v1/users/a%2Fb%23c"

    async def test_create_posts_full_record(self):
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(201, json={"message": "User created", "userID": "sub-1"})

        user_id = await _client(handler).create(UserProfile.from_record(RECORD))

        assert user_id == "sub-1"
        assert bodies[0]["userID"] == "sub-1"
        assert bodies[0]["joinedEvents"] == []

    async def test_replace_puts_to_user_path(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={**RECORD, "name": "stored"})

        user = await _client(handler).replace(UserProfile.from_record(RECORD))

        assert seen[0].method == "PUT"
        assert seen[0].url.path == "/api/v1/users/sub-1"
        assert user.name == "stored"

    async def test_list_all_parses_array(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[RECORD, {**RECORD, "userID": "sub-2"}])

        users = await _client(handler).list_all()

        assert [u.user_id for u in users] == ["sub-1", "sub-2"]

    async def test_delete(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"message": "User deleted"})

        await _client(handler).delete("sub-1")

        assert seen[0].method == "DELETE"

    async def test_upload_image_sends_base64(self):
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"imageUrl": "https://img.example.com/users/a.png"})

        url = await _client(handler).upload_image(b"\x89PNG", "a.png", "users")

        assert url == "https://img.example.com/users/a.png"
        assert base64.b64decode(bodies[0]["image"]) == b"\x89PNG"
        assert bodies[0]["folder"] == "users"
        assert bodies[0]["filename"] == "a.png"


class TestErrorMapping:
    async def test_404_is_user_not_found(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                404, json={"error_code": "USER_NOT_FOUND", "message": "User not found", "details": None}
            )

        with pytest.raises(UserNotFoundError) as exc_info:
            await _client(handler).get("ghost")

        assert exc_info.value.details == {"identifier": "ghost"}

    async def test_500_is_storage_fault(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                500, json={"error_code": "STORAGE_FAULT", "message": "Could not update user: x"}
            )

        with pytest.raises(StorageFaultError):
            await _client(handler).replace(UserProfile.from_record(RECORD))

    async def test_malformed_request(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                400,
                json={"error_code": "MALFORMED_REQUEST", "message": "Invalid JSON in request body"},
            )

        with pytest.raises(MalformedRequestError):
            await _client(handler).create(UserProfile.from_record(RECORD))

    async def test_unauthorized(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                401, json={"error_code": "INVALID_TOKEN", "message": "Invalid or expired token"}
            )

        with pytest.raises(AuthenticationError) as exc_info:
            await _client(handler).get("sub-1")

        assert exc_info.value.error_code == ErrorCode.INVALID_TOKEN

    async def test_unknown_error_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(418, text="teapot")

        with pytest.raises(AppException) as exc_info:
            await _client(handler).get("sub-1")

        assert exc_info.value.status_code == 418
        assert exc_info.value.error_code == ErrorCode.INTERNAL_ERROR

    async def test_timeout_is_distinct_from_not_found(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(RequestTimeoutError) as exc_info:
            await _client(handler).get("sub-1")

        assert exc_info.value.error_code == ErrorCode.REQUEST_TIMEOUT
        assert exc_info.value.details == {"operation": "retrieve user", "timeout": 2.5}

    async def test_connection_error_is_storage_fault(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(StorageFaultError):
            await _client(handler).delete("sub-1")
