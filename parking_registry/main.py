# parking_registry/main.py
"""
FastAPI application factory.
Builds Settings and the Database once, wires error handlers, middleware and routers.
Run: uvicorn parking_registry.main:create_app --factory --host 0.0.0.0 --port 5000
"""

import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from parking_registry.config import Settings
from parking_registry.database import Database
from parking_registry.errors import RegistryError
from parking_registry.routers import auth, health, inventory, public, statistics, users
from parking_registry.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Dữ liệu không hợp lệ"
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg", "invalid")
    msg = msg.removeprefix("Value error, ")
    return f"{field}: {msg}" if field else msg


def register_error_handlers(app: FastAPI):
    @app.exception_handler(RegistryError)
    async def registry_error_handler(request: Request, exc: RegistryError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} → {exc.status_code}: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} → {exc.status_code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.info(f"{request.method} {request.url.path} → 400: {message}")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Lỗi server"},
        )


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)

    app = FastAPI(
        title="Parking Registry API",
        description="CCCD-linked vehicle registry: deposit/retrieve, statistics, inventory.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.db = Database(settings.DATABASE_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Request Timing Middleware ────────────────────────────────────────────
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = round((time.time() - start) * 1000, 2)
        logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
        return response

    register_error_handlers(app)

    # ── Routers ──────────────────────────────────────────────────────────────
    app.include_router(public.router,     prefix="/api",       tags=["🛵 Scan & Action"])
    app.include_router(health.router,     prefix="/api",       tags=["💚 Health"])
    app.include_router(auth.router,       prefix="/api/admin", tags=["🔑 Admin Auth"])
    app.include_router(users.router,      prefix="/api/admin", tags=["👤 Registry"])
    app.include_router(statistics.router, prefix="/api/admin", tags=["📊 Statistics"])
    app.include_router(inventory.router,  prefix="/api/admin", tags=["📋 Inventory"])

    @app.on_event("startup")
    async def startup():
        logger.info("🚀 Parking Registry starting up...")
        app.state.db.create_tables()
        logger.info("✅ Database tables ready")
        logger.info(f"🕒 Statistics timezone: {settings.TIMEZONE}")
        logger.info("📖 API docs at /docs")

    @app.on_event("shutdown")
    async def shutdown():
        logger.info("🛑 Parking Registry shutting down...")
        app.state.db.engine.dispose()

    return app


if __name__ == "__main__":
    import uvicorn

    _settings = Settings()
    uvicorn.run("parking_registry.main:create_app", factory=True,
                host=_settings.API_HOST, port=_settings.API_PORT)
