from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class IndexReport:
    """Outcome of one indexing pass over the rule catalogue."""

    indexed: int = 0
    skipped: int = 0
    failed: int = 0
    failed_ids: tuple[str, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return self.indexed + self.skipped + self.failed
