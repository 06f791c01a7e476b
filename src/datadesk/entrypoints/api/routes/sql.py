"""SQL export and preview routes."""

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, HTTPException, Path
from fastapi.encoders import jsonable_encoder
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field
from starlette.background import BackgroundTask

from datadesk.core.exceptions import (
    ArtifactNotFoundError,
    ArtifactWriteError,
    ForbiddenStatementError,
    HistoryPersistError,
    QueryExecutionError,
)
from datadesk.entrypoints.api.deps import PipelineDep
from datadesk.entrypoints.api.middleware.jwt_auth import RequireAdmin

logger = structlog.get_logger()

router = APIRouter(prefix="/sql", tags=["sql"])

DOWNLOAD_CHUNK_SIZE = 64 * 1024


class SqlRequest(BaseModel):
    """Body of an export or preview request."""

    sql: str = Field(..., min_length=1)


class ExportResponse(BaseModel):
    """Identifier of a new CSV artifact."""

    csv_id: str
    warning: str | None = None


class PreviewResponse(BaseModel):
    """Header row followed by data rows with JSON-typed cells."""

    table: list[list[Any]]
    truncated: bool = False


@router.post("", response_model=ExportResponse, response_model_exclude_none=True)
async def export_sql(
    body: SqlRequest,
    pipeline: PipelineDep,
    admin: RequireAdmin,
) -> ExportResponse:
    """Run a read-only query and store its result as a CSV artifact.

    If the artifact was written but the history record failed, the
    artifact id is still returned together with a warning.
    """
    try:
        result = await pipeline.submit(body.sql)
    except ForbiddenStatementError as e:
        raise HTTPException(status_code=403, detail=str(e)) from None
    except (QueryExecutionError, ArtifactWriteError) as e:
        raise HTTPException(status_code=500, detail=str(e)) from None
    except HistoryPersistError as e:
        return ExportResponse(csv_id=e.artifact_id, warning=str(e))

    logger.info("sql_export_requested", admin_id=str(admin.id), artifact_id=result.artifact_id)
    return ExportResponse(csv_id=result.artifact_id)


@router.post("/preview", response_model=PreviewResponse)
async def preview_sql(
    body: SqlRequest,
    pipeline: PipelineDep,
    admin: RequireAdmin,
) -> PreviewResponse:
    """Run a read-only query and return its first rows as JSON."""
    try:
        preview = await pipeline.preview(body.sql)
    except ForbiddenStatementError as e:
        raise HTTPException(status_code=403, detail=str(e)) from None
    except QueryExecutionError as e:
        raise HTTPException(status_code=500, detail=str(e)) from None

    # NULL stays null; numbers, booleans and timestamps keep their JSON types
    rows = jsonable_encoder(preview.rows)
    return PreviewResponse(table=[preview.columns, *rows], truncated=preview.truncated)


@router.get("/{name}")
async def download_csv(
    name: Annotated[str, Path(max_length=128)],
    pipeline: PipelineDep,
) -> StreamingResponse:
    """Download a CSV artifact as an attachment."""
    try:
        stream = pipeline.fetch(name)
    except ArtifactNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None

    return StreamingResponse(
        iter(lambda: stream.read(DOWNLOAD_CHUNK_SIZE), b""),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="req-{name}.csv"'},
        background=BackgroundTask(stream.close),
    )
