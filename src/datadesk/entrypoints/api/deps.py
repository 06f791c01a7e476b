"""Dependency injection and application lifespan management."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Annotated

import structlog
from fastapi import Depends, Request

from datadesk.adapters.db.app_db import AppDatabase
from datadesk.adapters.db.engine import SqlAlchemyQueryEngine
from datadesk.adapters.notifications.email import EmailConfig, EmailNotifier
from datadesk.adapters.repositories import (
    AdminLogRepository,
    DataRequestRepository,
    EmailHistoryRepository,
    RequestHistoryRepository,
    UserRepository,
)
from datadesk.adapters.storage.local import LocalArtifactStorage
from datadesk.core.export import DEFAULT_PREVIEW_MAX_ROWS, ExportPipeline
from datadesk.core.naming import ARTIFACT_NAME_LENGTH
from datadesk.demo.seed import seed_admin

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = structlog.get_logger()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings:
    """Application settings loaded from environment."""

    def __init__(self) -> None:
        """Load settings from environment variables."""
        self.database_url = os.getenv("DATABASE_URL", "postgresql://localhost:5432/datadesk")
        self.app_database_url = os.getenv("APP_DATABASE_URL", self.database_url)
        self.create_tables = _flag("CREATE_TABLES", "true")

        # Exports
        self.upload_dir = os.getenv("UPLOAD_DIR", "uploads")
        self.artifact_name_length = int(
            os.getenv("ARTIFACT_NAME_LENGTH", str(ARTIFACT_NAME_LENGTH))
        )
        self.preview_max_rows = int(
            os.getenv("PREVIEW_MAX_ROWS", str(DEFAULT_PREVIEW_MAX_ROWS))
        )
        self.base_url = os.getenv("BASE_URL", "")
        self.fixed_table = os.getenv("FIXED_TABLE", "")

        # Email
        self.email_host = os.getenv("EMAIL_HOST", "")
        self.email_port = int(os.getenv("EMAIL_PORT", "587"))
        self.email_username = os.getenv("EMAIL_USERNAME") or None
        self.email_password = os.getenv("EMAIL_PASSWORD") or None
        self.email_from = os.getenv("EMAIL_FROM", "datadesk@example.com")
        self.email_use_tls = _flag("EMAIL_USE_TLS", "true")

        # Bootstrap admin account
        self.admin_email = os.getenv("ADMIN_EMAIL", "")
        self.admin_password = os.getenv("ADMIN_PASSWORD", "")
        self.admin_name = os.getenv("ADMIN_NAME", "Administrator")


settings = Settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - setup and teardown.

    This context manager handles:
    - App database setup and the bootstrap admin account
    - The query engine for exports
    - Export pipeline and email notifier configuration
    """
    app_db = AppDatabase(settings.app_database_url)
    if settings.create_tables:
        await app_db.create_tables()

    if settings.admin_email and settings.admin_password:
        async with app_db.sessionmaker() as session:
            await seed_admin(
                session,
                email=settings.admin_email,
                password=settings.admin_password,
                name=settings.admin_name,
            )

    query_engine = SqlAlchemyQueryEngine(settings.database_url)
    history = RequestHistoryRepository(app_db.sessionmaker)
    pipeline = ExportPipeline(
        engine=query_engine,
        storage=LocalArtifactStorage(settings.upload_dir),
        history=history,
        name_length=settings.artifact_name_length,
        preview_max_rows=settings.preview_max_rows,
    )

    notifier = None
    if settings.email_host:
        notifier = EmailNotifier(
            EmailConfig(
                smtp_host=settings.email_host,
                smtp_port=settings.email_port,
                smtp_user=settings.email_username,
                smtp_password=settings.email_password,
                from_email=settings.email_from,
                use_tls=settings.email_use_tls,
            ),
            history=EmailHistoryRepository(app_db.sessionmaker),
        )
    else:
        logger.warning("email_not_configured")

    # Store in app state
    app.state.settings = settings
    app.state.app_db = app_db
    app.state.query_engine = query_engine
    app.state.history = history
    app.state.pipeline = pipeline
    app.state.notifier = notifier

    logger.info("app_started", upload_dir=settings.upload_dir)

    yield

    await query_engine.close()
    await app_db.close()


def get_settings(request: Request) -> Settings:
    """Get settings from app state."""
    return request.app.state.settings  # type: ignore[no-any-return]


def get_pipeline(request: Request) -> ExportPipeline:
    """Get the export pipeline from app state."""
    return request.app.state.pipeline  # type: ignore[no-any-return]


def get_query_engine(request: Request) -> SqlAlchemyQueryEngine:
    """Get the query engine from app state."""
    return request.app.state.query_engine  # type: ignore[no-any-return]


def get_notifier(request: Request) -> EmailNotifier | None:
    """Get the email notifier, or None when email is not configured."""
    return request.app.state.notifier  # type: ignore[no-any-return]


def get_history_repo(request: Request) -> RequestHistoryRepository:
    """Get the request history repository."""
    return request.app.state.history  # type: ignore[no-any-return]


def get_user_repo(request: Request) -> UserRepository:
    """Get a user repository bound to the app database."""
    return UserRepository(request.app.state.app_db.sessionmaker)


def get_admin_log_repo(request: Request) -> AdminLogRepository:
    """Get an admin log repository bound to the app database."""
    return AdminLogRepository(request.app.state.app_db.sessionmaker)


def get_data_request_repo(request: Request) -> DataRequestRepository:
    """Get a data request repository bound to the app database."""
    return DataRequestRepository(request.app.state.app_db.sessionmaker)


# Annotated types for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
PipelineDep = Annotated[ExportPipeline, Depends(get_pipeline)]
QueryEngineDep = Annotated[SqlAlchemyQueryEngine, Depends(get_query_engine)]
NotifierDep = Annotated[EmailNotifier | None, Depends(get_notifier)]
HistoryRepoDep = Annotated[RequestHistoryRepository, Depends(get_history_repo)]
UserRepoDep = Annotated[UserRepository, Depends(get_user_repo)]
AdminLogRepoDep = Annotated[AdminLogRepository, Depends(get_admin_log_repo)]
DataRequestRepoDep = Annotated[DataRequestRepository, Depends(get_data_request_repo)]
