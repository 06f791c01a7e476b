"""API route modules."""

from fastapi import APIRouter

from datadesk.entrypoints.api.routes.admin_logs import router as admin_logs_router
from datadesk.entrypoints.api.routes.analytics import router as analytics_router
from datadesk.entrypoints.api.routes.auth import router as auth_router
from datadesk.entrypoints.api.routes.data_requests import router as data_requests_router
from datadesk.entrypoints.api.routes.email import router as email_router
from datadesk.entrypoints.api.routes.history import router as history_router
from datadesk.entrypoints.api.routes.sql import router as sql_router
from datadesk.entrypoints.api.routes.table_info import router as table_info_router

# Create combined router
api_router = APIRouter()

api_router.include_router(auth_router)
api_router.include_router(sql_router)
api_router.include_router(table_info_router)
api_router.include_router(email_router)
api_router.include_router(history_router)
api_router.include_router(data_requests_router)
api_router.include_router(admin_logs_router)
api_router.include_router(analytics_router)

__all__ = ["api_router"]
