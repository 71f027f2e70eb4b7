"""
Pizzeria Orders — Idempotent order creation

A POST /orders carrying an Idempotency-Key header is answered from Redis
when the same user already sent that key; otherwise the response is stored
for IDEMPOTENCY_KEY_TTL_SECONDS. Server errors are never stored.
"""
import json

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from pizzeria.core.config import get_settings
from pizzeria.core.redis_client import get_redis

settings = get_settings()

IDEMPOTENCY_PREFIX = "idempotent:"
IDEMPOTENT_PATHS = {f"{settings.API_PREFIX}/orders", f"{settings.API_PREFIX}/orders/"}


def cache_key(request: Request, idem_key: str) -> str:
    user = getattr(request.state, "user", None) or {}
    return f"{IDEMPOTENCY_PREFIX}{user.get('sub', 'anonymous')}:{idem_key}"


class IdempotencyMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        idem_key = request.headers.get("Idempotency-Key")
        if request.method != "POST" or request.url.path not in IDEMPOTENT_PATHS or not idem_key:
            return await call_next(request)

        redis = get_redis()
        key = cache_key(request, idem_key)

        cached = await redis.get(key)
        if cached:
            stored = json.loads(cached)
            return JSONResponse(
                content=stored["body"],
                status_code=stored["status_code"],
                headers={"X-Idempotency-Replay": "true"},
            )

        response = await call_next(request)
        body = b"".join([chunk async for chunk in response.body_iterator])

        if response.status_code < 500:
            try:
                content = json.loads(body)
            except ValueError:
                content = body.decode("utf-8", errors="replace")
            await redis.setex(
                key,
                settings.IDEMPOTENCY_KEY_TTL_SECONDS,
                json.dumps({"body": content, "status_code": response.status_code}),
            )

        return Response(
            content=body,
            status_code=response.status_code,
            media_type=response.media_type,
            headers=dict(response.headers),
        )
