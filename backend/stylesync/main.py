"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stylesync.config import settings
from stylesync.db.database import Base, engine
from stylesync.db.redis import close_redis
from stylesync.exceptions import SocialGraphError
from stylesync.services.card_cache import build_card_cache

log = logging.getLogger("stylesync")
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create tables (dev only; use migrations in production)
    import stylesync.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    app.state.card_cache = build_card_cache(settings)
    log.info("Started (%s), card cache backend: %s", settings.APP_ENV, settings.CARD_CACHE_BACKEND)
    yield
    # Shutdown: close connections
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title="StyleSync Social API",
    description="Friend requests, follows and rank/suit card profiles",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SocialGraphError)
async def social_graph_error_handler(request: Request, exc: SocialGraphError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# --- Routes ---
from stylesync.api.routes import cards, friends  # noqa: E402

app.include_router(friends.router, prefix="/api/friends", tags=["friends"])
app.include_router(cards.router, prefix="/api/cards", tags=["cards"])


@app.get("/health")
async def health_check():
    return {"status": "ok"}
