"""
FastAPI application entry point
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.app.api.v1.admin import routes as admin_routes
from backend.app.api.v1.applications import routes as applications_routes
from backend.app.api.v1.auth import routes as auth_routes
from backend.app.api.v1.employers import routes as employers_routes
from backend.app.api.v1.jobs import routes as jobs_routes
from backend.app.api.v1.projects import routes as projects_routes
from backend.app.api.v1.users import routes as users_routes
from backend.app.core.config import settings
from backend.app.core.logging_config import get_logger, setup_logging
from backend.app.db.base import Base
from backend.app.db.session import engine
from backend.app.utils import cache

# Import models so they register with Base.metadata
import backend.app.models  # noqa: F401

setup_logging()
logger = get_logger("main")

# Create database tables
try:
    Base.metadata.create_all(bind=engine)
except Exception as e:
    logger.error("Database error: %s", e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await cache.connect()
    logger.info("%s started on port %s", settings.app_name, settings.port)
    try:
        yield
    finally:
        await cache.close()


# Initialize FastAPI app
app = FastAPI(
    title="Freelance Marketplace API",
    description="Jobs, applications, submissions and profiles for freelancers and employers",
    version=settings.app_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Every error body is {"error": message}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    logger.info("Request validation failed path=%s error=%s", request.url.path, message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


# Include routers
for module in (
    auth_routes,
    jobs_routes,
    applications_routes,
    users_routes,
    employers_routes,
    projects_routes,
    admin_routes,
):
    app.include_router(module.router, prefix="/api")


@app.get("/")
def read_root():
    """Root endpoint"""
    return {"message": settings.app_name, "version": settings.app_version}


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "ok", "time": datetime.now(timezone.utc).isoformat()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
