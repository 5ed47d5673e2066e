# fintrack/main.py
import uvicorn
import os
import logging
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from fintrack.core.config import settings
from fintrack.core.database import engine, Base
from fintrack.core.exceptions import Unauthenticated
from fintrack.api.v1.api import api_router
# Register every table on Base.metadata
from fintrack.models import record, fixed_settings, debt, goal, motivation  # noqa: F401

logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

# Create all tables on startup (Alembic handles real migrations)
async def create_db_and_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    openapi_tags=[
        {"name": "Authentication", "description": "Register, login and logout"},
        {"name": "records", "description": "Income, expense, savings and debt records"},
        {"name": "dashboard", "description": "Summary metrics and chart payloads"},
        {"name": "motivation", "description": "Goal motivation logs and score charts"},
    ],
)

# CORS Configuration
origins = [
    settings.FRONTEND_URL,
    "http://localhost:3000",
    "http://localhost:3001",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(Unauthenticated)
async def unauthenticated_handler(request, exc: Unauthenticated):
    return JSONResponse(
        status_code=401,
        content={"detail": exc.detail},
        headers={"WWW-Authenticate": "Bearer"},
    )

@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request, exc: SQLAlchemyError):
    """Store failures are shown to the user, never retried here."""
    logger.error(f"Store error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=503,
        content={"detail": "Data store unavailable, please try again"}
    )

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    if isinstance(exc, HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail}
        )
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )

app.include_router(api_router, prefix="/api/v1")

@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information"""
    return {
        "message": f"{settings.APP_NAME} is running!",
        "version": settings.VERSION
    }

@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "kind_scheme": settings.KIND_SCHEME,
        "metrics_formula": settings.METRICS_FORMULA,
    }

@app.on_event("startup")
async def on_startup():
    """Startup event to create database tables"""
    try:
        await create_db_and_tables()
        logger.info("✅ Database tables created successfully")
        logger.info(f"✅ Frontend URL: {settings.FRONTEND_URL}")
    except Exception as e:
        logger.error(f"❌ Startup error: {str(e)}")
        raise

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("fintrack.main:app", host="0.0.0.0", port=port, reload=False)
