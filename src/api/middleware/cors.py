"""CORS header middleware."""

from typing import Awaitable, Callable

from fastapi.responses import ORJSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from core.config import settings

USERS_PREFIX = "/api/v1/users"


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Stamp the same CORS headers on every response, errors included.

    Browsers only ever see one fixed policy, so preflight requests for the
    user collection and single-user paths are answered here without
    reaching the router. OPTIONS anywhere else is routed like any other
    method and ends up as an unsupported route.
    """

    def __init__(self, app: ASGIApp, preflight_prefix: str = USERS_PREFIX) -> None:
        super().__init__(app)
        self._prefix = preflight_prefix.rstrip("/")

    def _is_preflight(self, request: Request) -> bool:
        if request.method != "OPTIONS":
            return False
        path = request.url.path.rstrip("/")
        if path == self._prefix:
            return True
        # One path segment below the prefix: /users/{userID}
        rest = path.removeprefix(self._prefix + "/")
        return rest != path and "/" not in rest

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if self._is_preflight(request):
            response: Response = ORJSONResponse({"message": "CORS preflight"})
        else:
            response = await call_next(request)

        response.headers.update(settings.cors_headers)
        return response
