"""
FastAPI HTTP API server for imbridge.

提供：
- Health check
- IM 消息发送与通讯录查询（/api/im/...）
- Webhook 中转（/create, /hook/{id}, /logs/{id}）

默认端口：8080
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..channels.errors import ErrorType, IMError
from ..channels.registry import ClientRegistry
from ..config import Settings
from ..relay import HookStore
from .routes import health, im, relay

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR_TYPE = {
    ErrorType.CONTENT_MISMATCH: 400,
    ErrorType.UNSUPPORTED_TYPE: 400,
    ErrorType.INVALID_RECIPIENT: 400,
    ErrorType.CONFIG: 503,
    ErrorType.TRANSPORT: 502,
    ErrorType.AUTH: 502,
    ErrorType.UPSTREAM: 502,
    ErrorType.DIRECTORY_PARSE: 502,
}


def create_app(
    settings: Settings | None = None,
    registry: ClientRegistry | None = None,
    hook_store: HookStore | None = None,
) -> FastAPI:
    """Create the FastAPI application with all routes mounted."""
    from imbridge import __version__

    if settings is None:
        from ..config import settings as default_settings

        settings = default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.registry.close()

    app = FastAPI(
        title="imbridge API",
        description="Unified WeCom / DingTalk / Feishu messaging and directory API",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.registry = registry if registry is not None else ClientRegistry(settings)
    app.state.hook_store = (
        hook_store if hook_store is not None else HookStore(max_logs=settings.relay_max_logs)
    )
    app.state.http_timeout = settings.http_timeout

    @app.exception_handler(IMError)
    async def im_error_handler(request: Request, exc: IMError):
        status = _STATUS_BY_ERROR_TYPE.get(exc.error_type, 500)
        logger.warning(f"{request.method} {request.url.path} -> {status}: {exc}")
        return JSONResponse(status_code=status, content=exc.to_dict())

    app.include_router(health.router)
    app.include_router(im.router)
    app.include_router(relay.router)

    @app.get("/")
    def root():
        return {
            "service": "imbridge",
            "api_version": "1.0.0",
            "status": "running",
        }

    return app


def run_api_server(settings: Settings, host: str | None = None, port: int | None = None) -> None:
    """Run the API server in the foreground (blocking)."""
    import uvicorn

    host = host or settings.api_host
    port = port or settings.api_port
    app = create_app(settings)

    logger.info(f"HTTP API server starting on http://{host}:{port}")
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="warning",
        access_log=False,
        log_config=None,  # 禁止 uvicorn 调用 dictConfig 覆盖根日志器
    )
