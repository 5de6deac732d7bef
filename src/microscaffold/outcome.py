"""Step outcomes reported by the creation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

StepStatus = Literal["applied", "unchanged", "skipped_missing", "skipped_unrecognized"]

APPLIED: StepStatus = "applied"
UNCHANGED: StepStatus = "unchanged"  # file present, nothing left to do
SKIPPED_MISSING: StepStatus = "skipped_missing"
SKIPPED_UNRECOGNIZED: StepStatus = "skipped_unrecognized"


@dataclass(frozen=True)
class StepOutcome:
    """Result of one pipeline step."""

    step: str
    status: StepStatus
    path: Path | None = None
    detail: str = ""

    @property
    def skipped(self) -> bool:
        return self.status in (SKIPPED_MISSING, SKIPPED_UNRECOGNIZED)

    def describe(self) -> str:
        where = f" ({self.path})" if self.path else ""
        extra = f": {self.detail}" if self.detail else ""
        return f"[{self.status}] {self.step}{where}{extra}"
