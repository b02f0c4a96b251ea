"""Ordered extraction rules for profile pages.

Each rule looks at a fetched document and either returns an
``ExtractionOutcome`` or ``None`` to hand over to the next rule. The order
follows how reliably each source is populated: the per-profile ``<title>`` is
set before any client script runs, rendered selectors only exist after a
browser render, and meta tags are the weakest signal.
"""

import logging
import re
from collections.abc import Callable, Iterable, Sequence

from bs4 import BeautifulSoup

from app.exceptions.custom import ExtractionError
from app.schemas.lookup import ExtractionOutcome, FetchedDocument, LookupStatus

logger = logging.getLogger(__name__)

TITLE_SEPARATOR = " - "

ExtractionRule = Callable[[FetchedDocument, BeautifulSoup], ExtractionOutcome | None]

UNKNOWN = ExtractionOutcome(name="", status=LookupStatus.unknown, method="none")


def _is_plausible_name(candidate: str, brand: str) -> bool:
    return len(candidate) > 1 and candidate.casefold() != brand.casefold()


def pick_name(text: str | None, brand: str) -> str | None:
    """First plausible part of a ``"A - B"`` style title, skipping the brand."""
    if not text or TITLE_SEPARATOR not in text:
        return None
    for part in text.split(TITLE_SEPARATOR):
        candidate = " ".join(part.split())
        if _is_plausible_name(candidate, brand):
            return candidate
    return None


def _exists(name: str, method: str) -> ExtractionOutcome:
    return ExtractionOutcome(name=name, status=LookupStatus.exists, method=method)


class TitleRule:
    method = "title"

    def __init__(self, brand: str):
        self._brand = brand

    def __call__(self, doc: FetchedDocument, soup: BeautifulSoup) -> ExtractionOutcome | None:
        title = doc.title
        if title is None and soup.title is not None:
            title = soup.title.get_text()
        name = pick_name(title, self._brand)
        return _exists(name, self.method) if name else None


class SelectorRule:
    """Probe rendered DOM selectors; inert for statically fetched pages."""

    def __init__(self, selectors: Sequence[str]):
        self._selectors = tuple(selectors)

    def __call__(self, doc: FetchedDocument, soup: BeautifulSoup) -> ExtractionOutcome | None:
        if doc.dom is None:
            return None
        for selector in self._selectors:
            element = doc.dom.select_one(selector)
            if element is None:
                continue
            text = element.get_text().strip()
            if text:
                return _exists(text, selector)
        return None


class NotFoundRule:
    method = "not_found"

    def __init__(self, phrases: Iterable[str]):
        self._phrases = tuple(p.casefold() for p in phrases if p)

    def __call__(self, doc: FetchedDocument, soup: BeautifulSoup) -> ExtractionOutcome | None:
        body = doc.html.casefold()
        for phrase in self._phrases:
            if phrase in body:
                return ExtractionOutcome(name="", status=LookupStatus.not_found, method=self.method)
        return None


class MetaTitleRule:
    method = "og:title"

    def __init__(self, brand: str):
        self._brand = brand

    def __call__(self, doc: FetchedDocument, soup: BeautifulSoup) -> ExtractionOutcome | None:
        tag = soup.find("meta", attrs={"property": "og:title"})
        if tag is None:
            return None
        name = pick_name(tag.get("content"), self._brand)
        return _exists(name, self.method) if name else None


class MetaDescriptionRule:
    """Name following ``"<brand> - "`` (or ``:``/``|``) in the description."""

    method = "description"

    def __init__(self, brand: str):
        self._brand = brand
        self._pattern = re.compile(
            rf"{re.escape(brand)}\s*[-:|–]\s*(.+)", re.IGNORECASE | re.DOTALL
        )

    def __call__(self, doc: FetchedDocument, soup: BeautifulSoup) -> ExtractionOutcome | None:
        tag = soup.find("meta", attrs={"name": "description"})
        if tag is None:
            return None
        match = self._pattern.search(tag.get("content") or "")
        if not match:
            return None
        candidate = " ".join(match.group(1).split())
        if not _is_plausible_name(candidate, self._brand):
            return None
        return _exists(candidate, self.method)


def default_rules(
    brand: str,
    selectors: Sequence[str],
    not_found_phrases: Iterable[str],
) -> list[ExtractionRule]:
    return [
        TitleRule(brand),
        SelectorRule(selectors),
        NotFoundRule(not_found_phrases),
        MetaTitleRule(brand),
        MetaDescriptionRule(brand),
    ]


class Extractor:
    """Runs rules in order and returns the first conclusive outcome."""

    def __init__(self, rules: Sequence[ExtractionRule]):
        self._rules = list(rules)

    def extract(self, doc: FetchedDocument) -> ExtractionOutcome:
        soup = doc.dom if doc.dom is not None else BeautifulSoup(doc.html, "html.parser")
        for rule in self._rules:
            try:
                outcome = rule(doc, soup)
            except Exception as exc:
                method = getattr(rule, "method", None) or getattr(rule, "__name__", type(rule).__name__)
                raise ExtractionError(f"Rule {method} failed: {exc}", method=method) from exc
            if outcome is not None:
                return outcome
        logger.debug("No extraction rule matched %s", doc.url)
        return UNKNOWN
