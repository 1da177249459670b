"""FastAPI entrypoint for Hitcount."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from time import monotonic
from typing import Any

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import PlainTextResponse

from hitcount.client_identity import client_ip, counter_key
from hitcount.config import Settings, get_settings
from hitcount.counter_store import CountingStore
from hitcount.schemas import CountResponse

request_logger = logging.getLogger("hitcount.request")
server_logger = logging.getLogger("hitcount.server")


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def get_counting_store(request: Request) -> CountingStore:
    return request.app.state.counting_store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def create_app(
    settings: Settings | None = None,
    *,
    store: CountingStore | None = None,
) -> FastAPI:
    """Build the application around a single shared counting store."""

    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        server_logger.info(
            "startup app=%s version=%s ttl_seconds=%s client_ip_header=%s",
            settings.app_name,
            settings.app_version,
            settings.count_ttl_seconds,
            settings.client_ip_header,
        )
        yield
        server_logger.info("shutdown tracked_keys=%s", len(app.state.counting_store))

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.counting_store = store if store is not None else CountingStore()

    @app.middleware("http")
    async def counting_middleware(request: Request, call_next: Any) -> Response:
        path = request.url.path
        if path == settings.health_path:
            return await call_next(request)

        ip = client_ip(request, header=settings.client_ip_header)
        request.state.client_ip = ip
        request.state.count = app.state.counting_store.record_and_get(
            counter_key(ip, path),
            settings.count_ttl_seconds,
        )
        return await call_next(request)

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next: Any) -> Response:
        started = monotonic()
        path = request.url.path
        method = request.method.upper()
        try:
            response = await call_next(request)
        except Exception:
            latency_ms = int((monotonic() - started) * 1000)
            request_logger.exception(
                "request method=%s path=%s status=%s latency_ms=%s",
                method,
                path,
                500,
                latency_ms,
            )
            raise

        latency_ms = int((monotonic() - started) * 1000)
        request_logger.info(
            "request method=%s path=%s status=%s latency_ms=%s count=%s",
            method,
            path,
            response.status_code,
            latency_ms,
            getattr(request.state, "count", "-"),
        )
        return response

    @app.get(settings.health_path, tags=["health"], response_class=PlainTextResponse)
    async def health() -> str:
        return "OK"

    @app.get("/{path:path}", tags=["counts"], response_model=CountResponse)
    async def current_count(
        request: Request,
        store: CountingStore = Depends(get_counting_store),
        app_settings: Settings = Depends(get_app_settings),
    ) -> CountResponse:
        ip = getattr(request.state, "client_ip", None) or client_ip(
            request, header=app_settings.client_ip_header
        )
        path = request.url.path
        return CountResponse(
            total=store.get(counter_key(ip, path), app_settings.count_ttl_seconds),
            ip=ip,
            path=path,
        )

    return app


configure_logging(get_settings())
app = create_app()
