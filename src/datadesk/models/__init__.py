"""SQLAlchemy models for the application database."""

from datadesk.models.base import BaseModel
from datadesk.models.user import User
from datadesk.models.request_history import RequestHistory
from datadesk.models.admin_log import AdminLog
from datadesk.models.data_request import DataRequest, DataRequestStatus
from datadesk.models.email_history import EmailHistory

__all__ = [
    "BaseModel",
    "User",
    "RequestHistory",
    "AdminLog",
    "DataRequest",
    "DataRequestStatus",
    "EmailHistory",
]
