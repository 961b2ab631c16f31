from typing import Literal

from pydantic import BaseModel

NotificationKind = Literal["success", "warning", "error", "info"]


class Notification(BaseModel):
    kind: NotificationKind
    message: str


class ErrorResponse(BaseModel):
    error_code: str
    message: str
    missing: list[str] | None = None
    notifications: list[Notification] = []


class StatusResponse(BaseModel):
    storage_api: str
    open_drafts: int
    open_response_sessions: int
