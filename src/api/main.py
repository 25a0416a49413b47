"""FastAPI application entry point for Chit Chest."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api.middleware.logging_middleware import LoggingMiddleware
from src.api.routes.chest import router as chest_router
from src.api.routes.chit import router as chit_router
from src.api.routes.health import router as health_router
from src.api.routes.identity import router as identity_router
from src.api.routes.settings import router as settings_router
from src.api.startup import on_shutdown, on_startup


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    await on_startup()
    yield
    await on_shutdown()


app = FastAPI(
    title="Chit Chest API",
    description="Time-locked blind-box notes for paired couples",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)

app.include_router(health_router)
app.include_router(identity_router)
app.include_router(chest_router)
app.include_router(chit_router)
app.include_router(settings_router)
