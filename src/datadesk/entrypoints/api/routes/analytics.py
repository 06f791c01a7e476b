"""Analytics dashboard route."""

from fastapi import APIRouter

from datadesk.core.analytics import AnalyticsReport, build_analytics
from datadesk.entrypoints.api.deps import DataRequestRepoDep
from datadesk.entrypoints.api.middleware.jwt_auth import RequireAdmin
from datadesk.entrypoints.api.params import parse_date_param

router = APIRouter(tags=["analytics"])


@router.get("/analytics", response_model=AnalyticsReport)
async def get_analytics(
    repo: DataRequestRepoDep,
    admin: RequireAdmin,
    date_from: str | None = None,
    date_to: str | None = None,
) -> AnalyticsReport:
    """Aggregates for the admin dashboard."""
    return await build_analytics(
        repo,
        date_from=parse_date_param(date_from, "date_from"),
        date_to=parse_date_param(date_to, "date_to"),
    )
