# edumanage/__init__.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from edumanage.core.config import settings
from edumanage.core.database import AsyncSessionLocal, close_db, get_db_context, init_db
from edumanage.core.errors import register_exception_handlers
from edumanage.core.logging import configure_logging
from edumanage.core.redis import close_redis, init_redis
from edumanage.middleware import RequestIDMiddleware
from edumanage.routes import (
    attendance_router,
    auth_router,
    classes_router,
    dashboard_router,
    students_router,
    subjects_router,
    timetable_router,
    users_router,
)
from edumanage.services.auth_service import AuthService
from edumanage.services.identity_service import IdentityStore

logger = logging.getLogger(__name__)


async def create_super_admin() -> None:
    """Provision the configured platform operator, if any"""
    if not settings.SUPER_ADMIN_EMAIL or not settings.SUPER_ADMIN_PASSWORD:
        logger.info("No super admin configured")
        return

    async with get_db_context() as db:
        service = AuthService(db, IdentityStore(AsyncSessionLocal))
        user_id = await service.bootstrap_super_admin(
            settings.SUPER_ADMIN_EMAIL,
            settings.SUPER_ADMIN_PASSWORD.get_secret_value()
        )
    logger.info(f"Super admin ready: {user_id}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)
    await init_db()
    await init_redis()
    await create_super_admin()
    logger.info("Application startup completed")
    yield
    await close_redis()
    await close_db()
    logger.info("Application shutdown completed")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Multi-tenant school management API",
        version=settings.VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Include routers
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(dashboard_router)
    app.include_router(classes_router)
    app.include_router(subjects_router)
    app.include_router(timetable_router)
    app.include_router(students_router)
    app.include_router(attendance_router)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok", "version": settings.VERSION}

    return app
