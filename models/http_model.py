from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class StatusMessageResponse(BaseModel):
    status: str
    message: str


class ListResponse(StatusMessageResponse):
    objects: List[str]


class HealthResponse(BaseModel):
    status: str
    uptime_seconds: Optional[float] = None


class StatusResponse(BaseModel):
    current_operation: str
    active_tasks: int
    details: Dict[str, Any] = {}
