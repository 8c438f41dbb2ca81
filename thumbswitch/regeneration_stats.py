"""
RegenerationStats - Statistics for a regeneration run.
"""

import time
from dataclasses import dataclass, field
from typing import List


@dataclass
class RegenerationStats:
    """
    Statistics for a regeneration run.

    Attributes:
        total: Image attachments known at the last batch
        regenerated: Attachments whose sizes were rebuilt
        skipped: Attachments without a readable original
        errors: Attachments that failed
        batches: Batches processed
        start_time: Start timestamp
        error_details: List of error messages
    """
    total: int = 0
    regenerated: int = 0
    skipped: int = 0
    errors: int = 0
    batches: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)

    def add(self, page: "RegenerationStats") -> None:
        """Fold the counts of one batch into this run."""
        self.total = page.total
        self.regenerated += page.regenerated
        self.skipped += page.skipped
        self.errors += page.errors
        self.batches += page.batches
        self.error_details.extend(page.error_details)

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def completed_count(self) -> int:
        """Total completed (regenerated + skipped + errors)."""
        return self.regenerated + self.skipped + self.errors

    @property
    def rate_per_minute(self) -> float:
        """Attachments handled per minute."""
        if self.elapsed_seconds > 0:
            return self.completed_count / self.elapsed_seconds * 60
        return 0.0
