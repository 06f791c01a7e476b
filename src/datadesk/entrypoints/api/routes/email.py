"""Route for emailing CSV download links."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, EmailStr

from datadesk.core.naming import is_valid_artifact_name
from datadesk.entrypoints.api.deps import NotifierDep, SettingsDep
from datadesk.entrypoints.api.middleware.jwt_auth import RequireAdmin

router = APIRouter(tags=["email"])


class EmailRequest(BaseModel):
    """Recipient and artifact to link to."""

    target: EmailStr
    csv_id: str


@router.post("/email")
async def send_download_email(
    body: EmailRequest,
    settings: SettingsDep,
    notifier: NotifierDep,
    admin: RequireAdmin,
) -> dict[str, str]:
    """Email the download link of an artifact to ``target``."""
    if not settings.base_url:
        raise HTTPException(status_code=500, detail="BASE_URL not configured")
    if notifier is None:
        raise HTTPException(status_code=500, detail="Email is not configured")
    if not is_valid_artifact_name(body.csv_id):
        raise HTTPException(status_code=400, detail="Invalid csv_id")

    link = f"{settings.base_url.rstrip('/')}/sql/{body.csv_id}"
    if not await notifier.send_download_link(body.target, link):
        raise HTTPException(status_code=500, detail="Failed to send email")

    return {"message": "Email sent successfully"}
