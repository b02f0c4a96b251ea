from datetime import datetime

from pydantic import BaseModel

from app.schemas.lookup import LookupStatus


class LookupResponse(BaseModel):
    phone: str
    name: str
    status: LookupStatus
    timestamp: datetime


class LookupErrorResponse(BaseModel):
    phone: str
    name: str = ""
    status: LookupStatus = LookupStatus.error
    error: str


class HealthResponse(BaseModel):
    status: str
    cache_size: int
    uptime: float


class CacheClearResponse(BaseModel):
    message: str
    cleared: int
    cache_size: int
