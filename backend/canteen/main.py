"""Canteen API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CanteenError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from canteen.infrastructure.database import init_db
from canteen.infrastructure.observability import setup_logging
from canteen.config import get_settings
from canteen.api.error_handlers import register_error_handlers
from canteen.api.routes import (
    admin, canteen_staff, canteens, cart, exams, feedback, health, menu,
    orders, payments, users,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Canteen API started")
    yield
    logger.info("Canteen API shutting down")


app = FastAPI(
    title="Campus Canteen API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(admin.router)
app.include_router(users.router)
app.include_router(canteen_staff.router)
app.include_router(canteens.router)
app.include_router(menu.router)
app.include_router(cart.router)
app.include_router(orders.router)
app.include_router(payments.router)
app.include_router(exams.router)
app.include_router(feedback.router)

register_error_handlers(app)


@app.get("/")
async def root():
    return {"message": "Campus Canteen API is running"}
