"""Dashboard aggregates over data requests."""

from __future__ import annotations

import calendar
from collections import Counter
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from datadesk.adapters.repositories import DataRequestRepository

DAILY_WINDOW_DAYS = 30
MONTHLY_WINDOW_MONTHS = 12
RECENT_LIMIT = 10
YEAR_RANGE_LIMIT = 10


class MonthlyTrend(BaseModel):
    """Requests created in one calendar month."""

    month: str  # "Jan"
    year: int
    count: int


class DailyTrend(BaseModel):
    """Requests created on one day."""

    date: date
    count: int


class YearRange(BaseModel):
    """How often a (year_from, year_to) range was requested."""

    year_from: int
    year_to: int
    count: int


class RecentRequest(BaseModel):
    """Summary of a recently created request."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    format: str
    status: str
    created_at: datetime


class AnalyticsReport(BaseModel):
    """Everything the admin dashboard shows."""

    total_requests: int
    status_distribution: dict[str, int]
    format_distribution: dict[str, int]
    monthly_trends: list[MonthlyTrend]
    daily_trends: list[DailyTrend]
    recent_requests: list[RecentRequest]
    average_processing_time_hours: float
    popular_year_ranges: list[YearRange]


def _months_back(today: date, months: int) -> date:
    month_index = today.year * 12 + (today.month - 1) - (months - 1)
    return date(month_index // 12, month_index % 12 + 1, 1)


def monthly_trends(daily: list[tuple[date, int]]) -> list[MonthlyTrend]:
    """Fold per-day counts into per-month counts, oldest month first."""
    totals: Counter[tuple[int, int]] = Counter()
    for day, count in daily:
        totals[(day.year, day.month)] += count
    return [
        MonthlyTrend(month=calendar.month_abbr[month], year=year, count=count)
        for (year, month), count in sorted(totals.items())
    ]


def average_hours(spans: list[tuple[datetime, datetime]]) -> float:
    """Mean of ``updated - created`` in hours; 0.0 when there are none."""
    if not spans:
        return 0.0
    seconds = sum((updated - created).total_seconds() for created, updated in spans)
    return seconds / len(spans) / 3600


async def build_analytics(
    repo: DataRequestRepository,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    now: datetime | None = None,
) -> AnalyticsReport:
    """Collect the dashboard aggregates.

    The date window narrows the total and the distributions. Trends always
    cover the last 30 days and the last 12 months relative to ``now``.

    Args:
        repo: Data request repository.
        date_from: Only count requests created at or after this moment.
        date_to: Only count requests created at or before this moment.
        now: Reference time for the trend windows.

    Returns:
        AnalyticsReport for the dashboard.
    """
    now = now or datetime.now(UTC)
    monthly_start = _months_back(now.date(), MONTHLY_WINDOW_MONTHS)
    daily_start = now.date() - timedelta(days=DAILY_WINDOW_DAYS)

    total = await repo.count(date_from, date_to)
    by_status = await repo.count_by("status", date_from, date_to)
    by_format = await repo.count_by("format", date_from, date_to)
    daily = await repo.daily_counts(datetime.combine(monthly_start, datetime.min.time(), UTC))
    recent = await repo.recent(RECENT_LIMIT)
    spans = await repo.completed_spans()
    ranges = await repo.year_range_counts(YEAR_RANGE_LIMIT)

    daily_recent = [
        DailyTrend(date=day, count=count) for day, count in daily if day >= daily_start
    ]

    return AnalyticsReport(
        total_requests=total,
        status_distribution=by_status,
        format_distribution=by_format,
        monthly_trends=monthly_trends(daily),
        daily_trends=list(reversed(daily_recent)),
        recent_requests=[RecentRequest.model_validate(r) for r in recent],
        average_processing_time_hours=average_hours(spans),
        popular_year_ranges=[
            YearRange(year_from=a, year_to=b, count=c) for a, b, c in ranges
        ],
    )
