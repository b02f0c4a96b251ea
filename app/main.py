import asyncio
import contextlib
import logging
import sys
import time
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.cache import ResultCache, run_sweeper
from app.config import Settings
from app.exceptions.custom import FetchError, InvalidInputError
from app.exceptions.handlers import fetch_error_handler, invalid_input_error_handler
from app.routers.lookup import router as lookup_router
from app.routers.system import router as system_router
from app.services.extractor import Extractor, default_rules
from app.services.fetcher import PageFetcher, RenderedPageFetcher, StaticPageFetcher
from app.services.lookup import LookupService

logger = logging.getLogger(__name__)

_CORS_ALLOW_HEADERS = ["Origin", "X-Requested-With", "Content-Type", "Accept"]


def _configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _build_fetcher(settings: Settings, client: httpx.AsyncClient) -> PageFetcher:
    if settings.fetch_strategy == "rendered":
        return RenderedPageFetcher(
            settings.profile_base_url,
            settings.user_agent,
            timeout=settings.render_timeout_seconds,
            settle_delay=settings.render_settle_seconds,
        )
    return StaticPageFetcher(
        client,
        settings.profile_base_url,
        settings.user_agent,
        timeout=settings.fetch_timeout_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()
    _configure_logging(settings)

    cache = ResultCache(settings.cache_ttl_seconds)
    sweeper = asyncio.create_task(
        run_sweeper(cache, settings.cache_sweep_interval_seconds)
    )

    async with httpx.AsyncClient() as client:
        extractor = Extractor(
            default_rules(
                settings.brand_name,
                settings.name_selectors,
                settings.not_found_phrases,
            )
        )
        app.state.settings = settings
        app.state.result_cache = cache
        app.state.lookup_service = LookupService(
            _build_fetcher(settings, client),
            extractor,
            cache,
            country_prefix=settings.country_prefix,
            local_prefix=settings.local_prefix,
        )
        app.state.started_at = time.monotonic()

        logger.info(
            "Zalo Proxy Server ready (port=%d, strategy=%s, ttl=%gs)",
            settings.port, settings.fetch_strategy, settings.cache_ttl_seconds,
        )
        logger.info("Health: http://localhost:%d/health", settings.port)
        logger.info("API: http://localhost:%d/api/lookup?phone=0398981698", settings.port)
        try:
            yield
        finally:
            sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper
            cache.clear()


app = FastAPI(title="Zalo Proxy", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=_CORS_ALLOW_HEADERS,
)


@app.middleware("http")
async def cors_headers(request: Request, call_next):
    # CORSMiddleware only answers requests that carry an Origin header
    response = await call_next(request)
    response.headers.setdefault("Access-Control-Allow-Origin", "*")
    response.headers.setdefault("Access-Control-Allow-Headers", ", ".join(_CORS_ALLOW_HEADERS))
    return response


app.add_exception_handler(InvalidInputError, invalid_input_error_handler)
app.add_exception_handler(FetchError, fetch_error_handler)

app.include_router(system_router)
app.include_router(lookup_router)


def run() -> None:
    settings = Settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
