"""Per-line token extraction and canonicalisation."""

from __future__ import annotations

import re

ACE_PREFIX = "xn--"


class Extractor:
    """Pull the candidate token out of a single listing line."""

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        self.regex = re.compile(pattern)

    def extract(self, line: str) -> str | None:
        match = self.regex.search(line)
        if match is None:
            return None
        return match.group(0) or None


def normalize(token: str) -> str | None:
    """Return the canonical form of ``token`` or ``None`` if it is rejected.

    The token is stripped of surrounding whitespace and lower-cased; an empty
    result is rejected.

    Punycode (``xn--``) entries are dropped: the decoded form is expected in
    the same listing, so the encoded variant would only be a duplicate.
    """

    tld = token.strip().lower()
    if not tld or tld.startswith(ACE_PREFIX):
        return None
    return tld


__all__ = ["ACE_PREFIX", "Extractor", "normalize"]
