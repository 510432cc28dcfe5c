# fuse_server/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from fuse_server.api import ai, auth, channels, editors, iterations, users, videos
from fuse_server.core.config import Settings, settings
from fuse_server.core.database import init_db, make_engine
from fuse_server.core.errors import FuseError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _validation_message(exc: RequestValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "Invalid request data: " + "; ".join(problems)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(FuseError)
    async def fuse_error_handler(request: Request, exc: FuseError):
        return error_response(exc.status_code, exc.message, exc.headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.info(f"Rejected {request.method} {request.url.path}: {message}")
        return error_response(400, message)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception(f"Unhandled database error on {request.method} {request.url.path}")
        return error_response(500, "Database error")


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Builds the application around one engine and one settings object."""
    app_settings = app_settings or settings
    logging.basicConfig(level=app_settings.log_level.upper())

    engine = make_engine(app_settings.sqlalchemy_url, echo=app_settings.sql_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(engine)
        yield
        engine.dispose()

    app = FastAPI(title=app_settings.app_name, lifespan=lifespan)
    app.state.settings = app_settings
    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # Every API route passes through the authorization gate
    api = APIRouter(dependencies=[Depends(auth.authorize)])
    api.include_router(auth.router, prefix="/auth", tags=["auth"])
    api.include_router(users.router, prefix="/users", tags=["users"])
    api.include_router(channels.router, prefix="/channels", tags=["channels"])
    api.include_router(videos.router, prefix="/videos", tags=["videos"])
    api.include_router(iterations.router, prefix="/iterations", tags=["iterations"])
    api.include_router(editors.router, prefix="/editors", tags=["editors"])
    api.include_router(ai.router, prefix="/ai", tags=["ai"])
    app.include_router(api)

    @app.get("/health", tags=["health"])
    def health():
        return {"status": "ok"}

    return app


app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run(
        "fuse_server.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
