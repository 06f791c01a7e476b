"""Repositories over the application database."""

from datadesk.adapters.repositories.admin_logs import AdminLogRepository
from datadesk.adapters.repositories.data_requests import (
    DataRequestRepository,
    InvalidSortError,
)
from datadesk.adapters.repositories.email_history import EmailHistoryRepository
from datadesk.adapters.repositories.history import RequestHistoryRepository
from datadesk.adapters.repositories.users import UserRepository

__all__ = [
    "AdminLogRepository",
    "DataRequestRepository",
    "EmailHistoryRepository",
    "InvalidSortError",
    "RequestHistoryRepository",
    "UserRepository",
]
