from typing import Annotated

from fastapi import Depends, Request

from app.cache import ResultCache
from app.config import Settings
from app.services.lookup import LookupService


def get_lookup_service(request: Request) -> LookupService:
    return request.app.state.lookup_service


def get_result_cache(request: Request) -> ResultCache:
    return request.app.state.result_cache


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_started_at(request: Request) -> float:
    return request.app.state.started_at


LookupDep = Annotated[LookupService, Depends(get_lookup_service)]
CacheDep = Annotated[ResultCache, Depends(get_result_cache)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
StartedAtDep = Annotated[float, Depends(get_started_at)]
