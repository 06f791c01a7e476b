"""Data request submitted by a student."""

from enum import Enum

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from datadesk.models.base import BaseModel


class DataRequestStatus(str, Enum):
    """Lifecycle of a data request."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"


class DataRequest(BaseModel):
    """A request for a data extract, reviewed by an admin."""

    __tablename__ = "data_requests"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    nim: Mapped[str] = mapped_column(String(50), nullable=False)  # student number
    phone_number: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    format: Mapped[str] = mapped_column(String(20), nullable=False)
    purpose: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DataRequestStatus.PENDING.value, index=True
    )

    year_from: Mapped[int | None] = mapped_column(Integer, nullable=True)
    year_to: Mapped[int | None] = mapped_column(Integer, nullable=True)
    table: Mapped[str | None] = mapped_column(String(255), nullable=True)
    columns: Mapped[str | None] = mapped_column(Text, nullable=True)
    sql_query: Mapped[str | None] = mapped_column(Text, nullable=True)
