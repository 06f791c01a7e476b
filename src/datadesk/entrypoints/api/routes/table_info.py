"""Fixed table description route."""

from typing import Any

import structlog
from fastapi import APIRouter, HTTPException

from datadesk.core.exceptions import QueryExecutionError
from datadesk.entrypoints.api.deps import QueryEngineDep, SettingsDep

logger = structlog.get_logger()

router = APIRouter(tags=["table-info"])


@router.get("/table-info")
async def get_table_info(settings: SettingsDep, engine: QueryEngineDep) -> dict[str, Any]:
    """List the columns of the table simple requests are built against."""
    if not settings.fixed_table:
        raise HTTPException(status_code=400, detail="FIXED_TABLE env not set")

    try:
        columns = await engine.describe_table(settings.fixed_table)
    except QueryExecutionError as e:
        logger.error("table_info_failed", table=settings.fixed_table, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch columns") from None

    return {
        "table": settings.fixed_table,
        "columns": [{"column_name": c.column_name, "data_type": c.data_type} for c in columns],
    }
