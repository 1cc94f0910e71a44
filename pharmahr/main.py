"""
PharmaHR application entry point.

This is the **only** file that assembles the app.  Gateway handlers live in
``api/``, storage in ``models/`` and ``db/``, the client-side engines in
``services/``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import func, select

from pharmahr.api.v1.api import api_router
from pharmahr.api.v1.endpoints.gateway import limiter
from pharmahr.core.config import settings
from pharmahr.core.enums import Role
from pharmahr.core.exceptions import register_exception_handlers
from pharmahr.core.security import get_password_hash
from pharmahr.db.base import Base
from pharmahr.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from pharmahr.models.dropdown import DEFAULT_DROPDOWNS, Dropdown
from pharmahr.models.employee import AttendanceRecord, Employee  # noqa: F401
from pharmahr.models.evaluation import Evaluation  # noqa: F401
from pharmahr.models.fund import FundTransaction  # noqa: F401
from pharmahr.models.proposal import Proposal  # noqa: F401
from pharmahr.models.report import PrescriptionReport  # noqa: F401
from pharmahr.models.roster import DutyRoster  # noqa: F401
from pharmahr.models.user import User

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


async def seed_defaults() -> None:
    """Create the first admin account and the dropdown lists when missing."""
    async with async_session_factory() as session:
        if await session.get(User, settings.FIRST_ADMIN_USERNAME) is None:
            session.add(
                User(
                    username=settings.FIRST_ADMIN_USERNAME,
                    hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
                    name="System Administrator",
                    role=Role.ADMIN.value,
                )
            )
            logger.info(
                "Default admin created: %s (password: <redacted>)",
                settings.FIRST_ADMIN_USERNAME,
            )

        dropdown_count = await session.execute(select(func.count(Dropdown.row)))
        if not dropdown_count.scalar():
            session.add_all(Dropdown(type=t, value=v) for t, v in DEFAULT_DROPDOWNS)
            logger.info("Seeded %d dropdown options", len(DEFAULT_DROPDOWNS))

        await session.commit()


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    await seed_defaults()

    logger.info("%s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Pharmacy department HR: staff, attendance, fund ledger and reports",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting on the gateway
    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    application.include_router(api_router, prefix=settings.API_V1_PREFIX)
    return application


app = create_app()
