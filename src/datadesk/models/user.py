"""User model."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from datadesk.models.base import BaseModel


class User(BaseModel):
    """An account that can sign in; only ``ADMIN`` users reach the admin API."""

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="USER")
    password_hash: Mapped[str | None] = mapped_column("password", String(255), nullable=True)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    verification_token: Mapped[UUID | None] = mapped_column(nullable=True)
