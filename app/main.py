import logging

from fastapi import FastAPI

from app.core.config import ENABLE_DEBUG_ROUTES
from app.core.errors import HabitHubError, habithub_error_handler
from app.core.logging import configure_logging
from app.db.base import Base, engine, log_db_diagnostics
from app.catalog.models import HabitCategory  # noqa: F401  registers table for create_all
from app.habits.models import UserHabit, Completion  # noqa: F401
from app.communities.models import Community, CommunityMembership  # noqa: F401

from app.catalog.routes import router as catalog_router
from app.habits.routes import router as habits_router
from app.progress.routes import router as progress_router
from app.communities.routes import router as communities_router
from app.web.debug_routes import router as debug_router

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="HabitHub", version="0.1.0")

app.add_exception_handler(HabitHubError, habithub_error_handler)

# Only expose debug routes (including diagnostics) when explicitly enabled.
if ENABLE_DEBUG_ROUTES:
    app.include_router(debug_router)

# Create database tables (still useful in dev; in production prefer Alembic)
log_db_diagnostics()
Base.metadata.create_all(bind=engine)

# Include routers
app.include_router(catalog_router)
app.include_router(habits_router)
app.include_router(progress_router)
app.include_router(communities_router)


@app.get("/healthz", include_in_schema=False)
def healthz():
    return {"status": "ok"}
