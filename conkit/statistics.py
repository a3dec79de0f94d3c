"""Per-key request statistics for the hello server."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Report:
    """Outcome of one request; ``key`` is ``None`` for an invalid request."""

    id: int
    key: str | None


@dataclass
class Statistics:
    """Number of requests seen for each key."""

    hits: Counter = field(default_factory=Counter)

    def add_report(self, report: Report) -> None:
        """Count one more request for the report's key."""
        self.hits[report.key] += 1