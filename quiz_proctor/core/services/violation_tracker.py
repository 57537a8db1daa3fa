"""Service for tallying integrity violations during an active attempt."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from quiz_proctor.core.models import Violation, ViolationKind, utc_now

logger = logging.getLogger(__name__)

ViolationReporter = Callable[[Violation], None]


class ViolationTracker:
    """Accumulates violations and decides when the cap is exceeded.

    A cap of ``N`` tolerates exactly ``N`` violations; the ``N + 1``-th one
    puts the tracker over the limit. Every recorded violation is also handed
    to the optional reporter, whose failures never affect local state.
    """

    def __init__(
        self,
        max_violations: int,
        reporter: ViolationReporter | None = None,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        if max_violations < 0:
            raise ValueError("max_violations must be zero or greater.")
        self._max_violations = max_violations
        self._reporter = reporter
        self._now = now
        self._violations: list[Violation] = []

    @property
    def max_violations(self) -> int:
        return self._max_violations

    @property
    def count(self) -> int:
        return len(self._violations)

    def record(self, kind: ViolationKind | str) -> Violation:
        """Append a timestamped violation. Repeated events are all counted."""
        tag = kind.value if isinstance(kind, ViolationKind) else str(kind)
        violation = Violation(kind=tag, timestamp=self._now())
        self._violations.append(violation)
        logger.info("Violation recorded: %s (%d/%d)", tag, self.count, self._max_violations)
        self._report(violation)
        return violation

    def is_over_limit(self) -> bool:
        return self.count > self._max_violations

    def get_violations(self) -> list[Violation]:
        return list(self._violations)

    def count_of(self, kind: ViolationKind | str) -> int:
        tag = kind.value if isinstance(kind, ViolationKind) else str(kind)
        return sum(1 for v in self._violations if v.kind == tag)

    def _report(self, violation: Violation) -> None:
        if self._reporter is None:
            return
        try:
            self._reporter(violation)
        except Exception:  # reporting is advisory; the submission carries the list
            logger.warning("Failed to report violation %s", violation.kind, exc_info=True)
