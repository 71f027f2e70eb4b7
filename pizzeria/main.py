"""
Pizzeria Orders — FastAPI application entrypoint
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from pizzeria.api import health, orders
from pizzeria.core.config import get_settings
from pizzeria.core.redis_client import close_redis
from pizzeria.db.database import Base, engine
from pizzeria.middleware.auth import JWTAuthMiddleware
from pizzeria.middleware.idempotency import IdempotencyMiddleware
from pizzeria.models import catalog, order  # noqa: F401  (register tables on Base.metadata)

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create tables (migrations are handled outside the service in production)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await close_redis()
    await engine.dispose()


app = FastAPI(
    title="Pizzeria Orders",
    description="Order construction, pricing and status transitions for the pizza ordering platform.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Added last runs first: auth sets request.state.user before the idempotency key is scoped to it.
app.add_middleware(IdempotencyMiddleware)
app.add_middleware(JWTAuthMiddleware)

if settings.METRICS_ENABLED:
    Instrumentator().instrument(app).expose(app, endpoint="/metrics")

app.include_router(orders.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {"service": settings.SERVICE_NAME, "version": settings.SERVICE_VERSION}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("pizzeria.main:app", host=settings.HOST, port=settings.PORT)
