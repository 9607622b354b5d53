from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from .types import Outcome, RunOutcome


@dataclass
class RunReport:
    """Ordered outcomes of one batch.

    A report is appended to while its batch runs and becomes read-only once
    ``finalize`` is called.
    """

    name: str = "batch"
    outcomes: list[RunOutcome] = field(default_factory=list)
    aborted: Optional[str] = None
    finalized: bool = False

    def add(self, outcome: RunOutcome) -> None:
        if self.finalized:
            raise RuntimeError(f"report '{self.name}' is finalized")
        self.outcomes.append(outcome)

    def abort(self, reason: str) -> None:
        if self.finalized:
            raise RuntimeError(f"report '{self.name}' is finalized")
        self.aborted = reason

    def finalize(self) -> "RunReport":
        self.finalized = True
        return self

    def __len__(self) -> int:
        return len(self.outcomes)

    def __iter__(self) -> Iterator[RunOutcome]:
        return iter(self.outcomes)


@dataclass(frozen=True)
class Summary:
    installed_count: int
    skipped_count: int
    failed_count: int
    failed_names: tuple[str, ...]

    @property
    def total(self) -> int:
        return self.installed_count + self.skipped_count + self.failed_count


def summarize(report: RunReport) -> Summary:
    installed = skipped = failed = 0
    failed_names: list[str] = []
    for outcome in report:
        if outcome.status is Outcome.INSTALLED:
            installed += 1
        elif outcome.status is Outcome.ALREADY_PRESENT:
            skipped += 1
        else:
            failed += 1
            failed_names.append(outcome.name)
    return Summary(
        installed_count=installed,
        skipped_count=skipped,
        failed_count=failed,
        failed_names=tuple(failed_names),
    )
