"""Audit record of executed exports."""

from datetime import datetime

from sqlalchemy import DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from datadesk.models.base import BaseModel


class RequestHistory(BaseModel):
    """One row per successful export: the SQL text and when it ran."""

    __tablename__ = "request_histories"

    sql: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
