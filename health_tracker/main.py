"""
Main entry point for the Health Tracker API.

This module initializes the FastAPI application, creates the database tables,
registers the API routers and global exception handlers, and starts the
background scheduler that runs lab ingestion jobs and notification checks.
"""

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from health_tracker import crud, models
from health_tracker.api.api import api_router
from health_tracker.core.config import settings
from health_tracker.database import SessionLocal, engine
from health_tracker.database_types import get_cipher
from health_tracker.scheduler import check_notifications, scheduler
from health_tracker.seed import seed_demo_data

load_dotenv()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Fail at startup, not on the first profile write, when ENCRYPTION_KEY is unusable
get_cipher()

# Create all database tables defined in models.py
models.Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Personal health tracking: lab results, medications, supplements, doses and reminders.",
    version="1.0.0",
)

# --- Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Exception handlers ---
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies, bad enum values and bad query parameters all become a 400."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app.include_router(api_router, prefix=settings.API_PREFIX)


@app.on_event("startup")
def start_scheduler():
    scheduler.add_job(
        check_notifications,
        "interval",
        seconds=settings.NOTIFICATION_CHECK_SECONDS,
        id="check_notifications",
        replace_existing=True,
    )
    scheduler.start()
    logger.info("Scheduler started...")

    if settings.SEED_DEMO_DATA:
        db = SessionLocal()
        try:
            user = crud.ensure_demo_user(db)
            if seed_demo_data(db, user.id):
                logger.info(f"Seeded demo data for user {user.id}.")
        finally:
            db.close()


@app.on_event("shutdown")
def shutdown_scheduler():
    scheduler.shutdown()
    logger.info("Scheduler shut down...")


@app.get("/", tags=["Root"])
def root():
    """Root endpoint for basic health check."""
    return {"message": f"Welcome to the {settings.PROJECT_NAME}"}
