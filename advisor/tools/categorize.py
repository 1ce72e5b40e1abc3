from __future__ import annotations

import logging
import re
from typing import Optional, Pattern, Sequence, Tuple

from advisor.core.models import CategoryResult


logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "breadth"

# Characters kept on each side of the bulletin hit.
CONTEXT_RADIUS = 2000

# Order matters: the first pattern found in the context wins.
BULLETIN_PATTERNS: Sequence[Tuple[Pattern[str], str]] = (
    (re.compile(r"Computer Science", re.IGNORECASE), "cs"),
    (re.compile(r"Business", re.IGNORECASE), "business"),
    (re.compile(r"Capstone|Integrated Learning Experience", re.IGNORECASE), "capstone"),
    (re.compile(r"Foundation Course Requirements", re.IGNORECASE), "foundation"),
    (re.compile(r"Breadth|Free Electives", re.IGNORECASE), "breadth"),
    (re.compile(r"Natural Sciences|NSM", re.IGNORECASE), "capstone"),
    (re.compile(r"College Writing", re.IGNORECASE), "capstone"),
)

PREFIX_CATEGORIES = {
    "MATH": "foundation",
    "DAT": "business",
    "FIN": "business",
    "MEC": "business",
    "MKT": "business",
    "SCOT": "business",
    "ACCT": "business",
    "OB": "business",
    "MGT": "business",
    "CSE": "cs",
    "ESE": "cs",
    "CWP": "capstone",
    "NSM": "capstone",
}

_PREFIX_RE = re.compile(r"^[A-Z]+")


def _normalize_code(code: str) -> str:
    return " ".join(code.split())


def guess_category_by_prefix(code: str) -> str:
    match = _PREFIX_RE.match(code)
    prefix = match.group(0) if match else ""
    return PREFIX_CATEGORIES.get(prefix, DEFAULT_CATEGORY)


class CategoryClassifier:
    """Best-effort curriculum category guesser.

    The bulletin text is authoritative when the course code appears in it;
    the prefix table is the always-available fallback.
    """

    def __init__(self, bulletin_text: str = "") -> None:
        self._bulletin_text = bulletin_text or ""

    @property
    def bulletin_text(self) -> str:
        return self._bulletin_text

    def guess_from_bulletin(self, code: str) -> Optional[str]:
        if not self._bulletin_text:
            return None
        needle = _normalize_code(code)
        if not needle:
            return None

        hit = re.search(re.escape(needle), self._bulletin_text, re.IGNORECASE)
        if hit is None:
            return None

        idx = hit.start()
        start = max(0, idx - CONTEXT_RADIUS)
        context = self._bulletin_text[start: idx + CONTEXT_RADIUS]
        for pattern, category in BULLETIN_PATTERNS:
            if pattern.search(context):
                return category
        return None

    def classify(self, code: str = "", name: str = "") -> CategoryResult:
        if not code and not name:
            return CategoryResult(category=DEFAULT_CATEGORY, source="default")

        try:
            from_bulletin = self.guess_from_bulletin(code)
            if from_bulletin:
                return CategoryResult(category=from_bulletin, source="bulletin")
            return CategoryResult(category=guess_category_by_prefix(code), source="prefix")
        except Exception:
            logger.exception("Category guess failed for code=%r name=%r", code, name)
            return CategoryResult(category=DEFAULT_CATEGORY, source="error")
