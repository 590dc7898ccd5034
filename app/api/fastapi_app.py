from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.auth.routes import router as auth_router
from app.api.health import router as health_router
from app.api.spotify.playlists import router as spotify_router
from app.config import Settings, load_settings
from app.core import ErrorKind, ProxyError, configure_logging, log_error


async def _proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
    log_error(f"{request.method} {request.url.path} -> {exc.kind.value}: {exc.message}")
    headers = {}
    if exc.retry_after is not None:
        headers["Retry-After"] = str(exc.retry_after)
    return JSONResponse(
        status_code=exc.status_code, content=exc.to_dict(), headers=headers
    )


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return await _proxy_error_handler(
        request, ProxyError(ErrorKind.VALIDATION, f"Invalid request: {details}")
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Spotify Proxy API",
        version="1.0.0",
        description="Stateless proxy between a frontend and the Spotify Web API.",
    )
    app.state.settings = settings

    # Trusted-frontend deployment: every origin, method and header is allowed
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ProxyError, _proxy_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router, tags=["auth"])
    app.include_router(spotify_router, tags=["spotify"])

    return app
