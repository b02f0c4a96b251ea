import re

from app.exceptions.custom import InvalidInputError

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_phone(
    raw: str | None,
    country_prefix: str = "+84",
    local_prefix: str = "0",
) -> str:
    """Canonical cache/URL key for a phone number.

    Strips all whitespace and rewrites a leading international prefix to the
    local leading digit. Malformed numbers pass through untouched.
    """
    if raw is None or not str(raw).strip():
        raise InvalidInputError("phone")
    phone = _WHITESPACE_RE.sub("", str(raw))
    if country_prefix and phone.startswith(country_prefix):
        phone = local_prefix + phone[len(country_prefix):]
    return phone
