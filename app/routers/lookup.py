import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse, PlainTextResponse

from app.dependencies import LookupDep, SettingsDep
from app.schemas.responses import LookupErrorResponse, LookupResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/api/lookup",
    response_model=LookupResponse,
    responses={500: {"model": LookupErrorResponse}},
)
@router.get("/api/zalo", response_model=LookupResponse, include_in_schema=False)
async def lookup_phone(service: LookupDep, phone: str | None = None):
    result = await service.lookup(phone)
    if result.is_error:
        body = LookupErrorResponse(phone=result.phone, error=result.error or "Lookup failed")
        return JSONResponse(status_code=500, content=body.model_dump(mode="json"))
    return LookupResponse(
        phone=result.phone,
        name=result.name,
        status=result.status,
        timestamp=result.timestamp,
    )


@router.get("/api/debug", response_class=PlainTextResponse)
async def debug_page(service: LookupDep, settings: SettingsDep, phone: str | None = None):
    if service.fetcher.name != "static":
        return JSONResponse(
            status_code=404,
            content={"error": "Debug endpoint is only available with the static fetch strategy"},
        )
    doc = await service.fetch_document(phone)
    logger.info("Debug fetch of %s returned %d chars", doc.url, len(doc.html))
    return PlainTextResponse(doc.html[: settings.debug_preview_chars])
