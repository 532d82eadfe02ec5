# parkdesk/main.py
"""
FastAPI application entry point.
Includes request logging, error handlers, all routers and the daily auto-clear scheduler.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from parkdesk.routers import auth, vehicles, parking_slots, parking_sessions, notifications, stats, health
from parkdesk.database import create_tables
from parkdesk.config import settings
from parkdesk.services.auto_clear_service import AutoClearScheduler
from parkdesk.services.exceptions import AuthenticationError, ConflictError, NotFoundError
from parkdesk.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="ParkDesk API",
    description="Parking lot management: vehicles, slots, entry/exit sessions, daily auto-clear.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (the web client is served from a different origin) ─────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Business-rule errors ─────────────────────────────────────────────────────
@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message})


@app.exception_handler(AuthenticationError)
async def authentication_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": exc.message})


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "error": str(exc)},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(auth.router,             prefix="/api", tags=["🔑 Auth"])
app.include_router(vehicles.router,         prefix="/api", tags=["🚗 Vehicles"])
app.include_router(parking_slots.router,    prefix="/api", tags=["🅿️  Slots"])
app.include_router(parking_sessions.router, prefix="/api", tags=["⏱  Sessions"])
app.include_router(notifications.router,    prefix="/api", tags=["🔔 Notifications"])
app.include_router(stats.router,            prefix="/api", tags=["📊 Stats"])
app.include_router(health.router,           prefix="/api", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 ParkDesk backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")

    if settings.AUTO_CLEAR_ENABLED:
        app.state.scheduler = AutoClearScheduler()
        app.state.scheduler.start()
    else:
        logger.info("Auto-clear disabled")

    logger.info(f"🌐 Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 ParkDesk backend shutting down...")
    scheduler = getattr(app.state, "scheduler", None)
    if scheduler is not None:
        await scheduler.stop()
