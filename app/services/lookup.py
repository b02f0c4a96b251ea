import logging

from app.cache import ResultCache
from app.exceptions.custom import ExtractionError, FetchError
from app.schemas.lookup import FetchedDocument, LookupResult, LookupStatus
from app.services.extractor import Extractor
from app.services.fetcher import PageFetcher
from app.services.phone import normalize_phone

logger = logging.getLogger(__name__)


class LookupService:
    def __init__(
        self,
        fetcher: PageFetcher,
        extractor: Extractor,
        cache: ResultCache,
        country_prefix: str = "+84",
        local_prefix: str = "0",
    ):
        self._fetcher = fetcher
        self._extractor = extractor
        self._cache = cache
        self._country_prefix = country_prefix
        self._local_prefix = local_prefix

    @property
    def fetcher(self) -> PageFetcher:
        return self._fetcher

    def normalize(self, raw: str | None) -> str:
        """Raises InvalidInputError when ``raw`` is missing."""
        return normalize_phone(raw, self._country_prefix, self._local_prefix)

    async def lookup(self, raw_phone: str | None) -> LookupResult:
        """Resolve a phone number to its profile name and existence status.

        Fetch and extraction failures come back as an ``Error`` result and
        are not cached. Every other outcome, ``Unknown`` included, is.
        """
        phone = self.normalize(raw_phone)

        cached = self._cache.get(phone)
        if cached is not None:
            logger.info("Cache hit for %s", phone)
            return cached

        logger.info("Scraping profile for %s via %s fetch", phone, self._fetcher.name)
        try:
            doc = await self._fetcher.fetch(phone)
            outcome = self._extractor.extract(doc)
        except (FetchError, ExtractionError) as exc:
            logger.error("Lookup failed for %s: %s", phone, exc.message)
            return LookupResult(
                phone=phone,
                status=LookupStatus.error,
                method="error",
                error=exc.message,
            )

        result = LookupResult(
            phone=phone,
            name=outcome.name,
            status=outcome.status,
            method=outcome.method,
        )
        self._cache.put(phone, result)
        logger.info(
            "Result for %s: name=%r status=%s method=%s",
            phone, result.name, result.status, result.method,
        )
        return result

    async def fetch_document(self, raw_phone: str | None) -> FetchedDocument:
        """Fetch the raw profile page without extracting or caching."""
        phone = self.normalize(raw_phone)
        return await self._fetcher.fetch(phone)
