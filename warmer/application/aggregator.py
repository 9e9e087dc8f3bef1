from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from warmer.domain.models import WarmOutcome


@dataclass
class ResultAggregator:
    """Folds per-item outcomes of a batch into counts.

    Only ``success_count`` is reported back to the driver.
    """

    success_count: int = 0
    failure_count: int = 0
    failed_tokens: list[str] = field(default_factory=list)

    def add(self, outcome: WarmOutcome) -> None:
        if outcome.success:
            self.success_count += 1
        else:
            self.failure_count += 1
            self.failed_tokens.append(outcome.key.token)

    def extend(self, outcomes: Iterable[WarmOutcome]) -> None:
        for outcome in outcomes:
            self.add(outcome)

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count

    def summary(self) -> dict[str, int]:
        return {
            "total": self.total,
            "succeeded": self.success_count,
            "failed": self.failure_count,
        }
