"""
Pizzeria Orders — JWT authentication + role permission middleware

Validates the Bearer token (401 on failure), attaches its claims to
request.state.user, then checks the role's permissions for the route
(403 when none of the required actions is granted).
"""
import logging

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from jose import JWTError
from starlette.middleware.base import BaseHTTPMiddleware

from pizzeria.core.config import get_settings
from pizzeria.core.permissions import is_permitted
from pizzeria.core.security import decode_token

settings = get_settings()
logger = logging.getLogger(__name__)

PUBLIC_PATHS = {
    "/",
    "/health",
    "/metrics",
    "/docs",
    "/openapi.json",
}


class JWTAuthMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if request.method == "OPTIONS" or path in PUBLIC_PATHS:
            return await call_next(request)

        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            return JSONResponse(
                status_code=401,
                content={"detail": "Missing or invalid Authorization header. Expected: Bearer <token>"},
                headers={"WWW-Authenticate": "Bearer"},
            )

        try:
            claims = decode_token(auth_header.split(" ", 1)[1])
        except JWTError as exc:
            return JSONResponse(
                status_code=401,
                content={"detail": f"Invalid or expired JWT: {exc}"},
                headers={"WWW-Authenticate": "Bearer"},
            )

        if not is_permitted(claims.get("permissions"), path, request.method, settings.API_PREFIX):
            logger.info("User %s denied %s %s", claims.get("sub"), request.method, path)
            return JSONResponse(status_code=403, content={"detail": "User is not allowed to perform this action."})

        request.state.user = claims
        return await call_next(request)
