"""Trail of admin API calls."""

from uuid import UUID

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from datadesk.models.base import BaseModel


class AdminLog(BaseModel):
    """Admin API call entry."""

    __tablename__ = "admin_logs"

    admin_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    action: Mapped[str] = mapped_column(String(255), nullable=False, default="")  # HTTP method
    endpoint: Mapped[str] = mapped_column(String(255), nullable=False, default="")
