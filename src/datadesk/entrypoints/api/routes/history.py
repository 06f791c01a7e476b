"""Request history routes."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict

from datadesk.entrypoints.api.deps import HistoryRepoDep
from datadesk.entrypoints.api.middleware.jwt_auth import RequireAdmin
from datadesk.entrypoints.api.params import parse_date_param

router = APIRouter(prefix="/request-history", tags=["history"])


class RequestHistoryResponse(BaseModel):
    """One executed export."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sql: str
    date: datetime


@router.get("", response_model=list[RequestHistoryResponse])
async def list_request_history(
    history: HistoryRepoDep,
    admin: RequireAdmin,
    start_date: str | None = None,
    end_date: str | None = None,
) -> list[RequestHistoryResponse]:
    """List executed exports, oldest first.

    Args:
        history: Request history repository.
        admin: The calling admin.
        start_date: Inclusive lower bound, RFC 3339 or YYYY-MM-DD.
        end_date: Inclusive upper bound, RFC 3339 or YYYY-MM-DD.
    """
    start = parse_date_param(start_date, "start_date")
    end = parse_date_param(end_date, "end_date")
    records = await history.list(start=start, end=end)
    return [RequestHistoryResponse.model_validate(r) for r in records]
