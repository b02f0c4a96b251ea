from datetime import datetime, timezone
from enum import StrEnum

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, Field


class LookupStatus(StrEnum):
    exists = "Exists"
    not_found = "Not Found"
    unknown = "Unknown"
    error = "Error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExtractionOutcome(BaseModel):
    """What a single extraction rule concluded about a document."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    status: LookupStatus
    method: str


class LookupResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    phone: str
    name: str = ""
    status: LookupStatus
    method: str = "none"  # which extraction rule fired
    timestamp: datetime = Field(default_factory=_utcnow)
    error: str | None = None

    @property
    def is_error(self) -> bool:
        return self.status == LookupStatus.error


class FetchedDocument(BaseModel):
    """A profile page as returned by a fetch strategy. Lives for one lookup."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    url: str
    html: str
    title: str | None = None  # document.title after render
    dom: BeautifulSoup | None = None  # rendered strategy only
