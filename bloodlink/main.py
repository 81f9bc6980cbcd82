import time

from fastapi import FastAPI, Request, status, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from bloodlink.config import get_settings
from bloodlink.database import init_db, ping_db, close_db
from bloodlink.errors import AppError
from bloodlink.utils.firebase import push_enabled
from bloodlink.utils.webpush import webpush_enabled
from bloodlink.utils.logger import get_logger
from bloodlink.rate_limit import limiter

logger = get_logger("main")
settings = get_settings()

# Routers
from bloodlink.routers import donors as donors_router
from bloodlink.routers import requests as requests_router
from bloodlink.routers import messages as messages_router
from bloodlink.routers import stats as stats_router
from bloodlink.routers import inventory as inventory_router

app = FastAPI(
    title="BloodLink API",
    debug=settings.APP_DEBUG,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS for the static frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(donors_router.router)
app.include_router(requests_router.router)
app.include_router(messages_router.router)
app.include_router(stats_router.router)
app.include_router(inventory_router.router)
logger.debug(f"Registered {len(app.routes)} routes")


# Error handlers
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    logger.warning(f"{exc.kind} ({exc.status_code}): {exc.message} - Path: {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "message": exc.message,
            "kind": exc.kind,
            "status_code": exc.status_code,
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"HTTP {exc.status_code}: {exc.detail} - Path: {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "message": str(exc.detail), "status_code": exc.status_code}
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error: {exc.errors()} - Path: {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_errors(exc), "status_code": 422}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "status_code": 500}
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry exception objects which are not JSON serialisable
    return [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]


# Middleware Logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Time: {process_time:.3f}s"
    )
    return response


@app.get("/healthz")
async def healthz():
    return {"status": "ok", "push": "enabled" if push_enabled() or webpush_enabled() else "disabled"}


@app.get("/readyz")
async def readyz():
    if not await ping_db():
        raise HTTPException(status_code=503, detail="Database not ready")
    return {"status": "ok", "database": "up"}


@app.on_event("startup")
async def on_startup():
    logger.info(f"Starting {settings.APP_NAME} ({settings.APP_ENV})...")
    await init_db()
    logger.info("Database initialized")
    if not push_enabled():
        logger.warning("FIREBASE_CREDENTIALS_FILE not set; FCM token alerts will be skipped")
    if not webpush_enabled():
        logger.warning("VAPID_PRIVATE_KEY not set; browser Web Push alerts will be skipped")


@app.on_event("shutdown")
async def on_shutdown():
    close_db()
    logger.info("Shutting down application...")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("bloodlink.main:app", host="0.0.0.0", port=8000)
