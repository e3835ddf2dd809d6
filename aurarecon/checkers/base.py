"""Abstract base for all content checkers."""

from abc import ABC, abstractmethod
from typing import List, Optional, Pattern, Tuple
import re

from aurarecon.core.models import VulnerabilityFinding

EXCERPT_LIMIT = 120

_WS = re.compile(r"\s+")


class BaseChecker(ABC):
    """Every checker must declare its metadata and implement get_patterns()."""

    id: str = "AURA-000"
    name: str = "Unnamed Checker"
    description: str = ""
    severity: str = "info"
    category: str = "misc"
    recommendation: str = ""

    # ── public API ──────────────────────────────────────────────

    @abstractmethod
    def get_patterns(self) -> List[Pattern]:
        """Return the compiled patterns this checker looks for."""
        ...

    def find_matches(self, text: str) -> List[str]:
        """
        All non-overlapping matches of every pattern, in text order.
        Overlapping hits from different patterns count once.
        """
        spans: List[Tuple[int, int]] = []
        for rx in self.get_patterns():
            spans.extend(m.span() for m in rx.finditer(text))
        spans.sort()

        matches: List[str] = []
        last_end = -1
        for start, end in spans:
            if start < last_end:
                continue
            matches.append(text[start:end])
            last_end = end
        return matches

    def check(self, text: str) -> Optional[VulnerabilityFinding]:
        """Return one finding summarising every match in *text*, or None."""
        if not text:
            return None
        matches = self.find_matches(text)
        if not matches:
            return None
        return VulnerabilityFinding(
            id=self.id,
            name=self.name,
            description=self.description,
            severity=self.severity,
            category=self.category,
            matched_excerpt=self.excerpt(matches[0]),
            recommendation=self.recommendation,
            occurrence_count=len(matches),
        )

    # ── shared helpers ──────────────────────────────────────────

    @staticmethod
    def excerpt(snippet: str, limit: int = EXCERPT_LIMIT) -> str:
        """Whitespace-collapsed snippet, cut to *limit* characters."""
        flat = _WS.sub(" ", snippet).strip()
        if len(flat) <= limit:
            return flat
        return flat[:limit - 3] + "..."
