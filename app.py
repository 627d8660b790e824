from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    load_dotenv("local.env")

    from settings import get_settings

    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    from endpoints.screen_endpoints import router as screen_router

    app = FastAPI(title="User Write/Read")

    @app.get("/healthz")
    async def healthz():
        return JSONResponse({"status": "ok", "backend": settings.user_store_backend})

    app.include_router(screen_router)

    logger.info(
        "APP: backend=%s collection=%s prefs=%s",
        settings.user_store_backend,
        settings.users_collection,
        settings.prefs_scope,
    )
    return app


app = create_app()
