"""
Per-operation outcomes and the reporter that logs them.

Upload and delete steps never raise on remote or filesystem errors; they
return an OperationOutcome instead. The reporter is the only place that turns
outcomes into log lines.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationOutcome:
    action: str  # "upload", "delete", "list" or "read"
    target: str
    ok: bool
    reason: Optional[str] = None

    @classmethod
    def success(cls, action: str, target: str) -> "OperationOutcome":
        return cls(action, target, True)

    @classmethod
    def failure(cls, action: str, target: str, reason: str) -> "OperationOutcome":
        return cls(action, target, False, reason)


class OutcomeReporter:
    """Logs outcomes and keeps them in order"""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger
        self.outcomes: List[OperationOutcome] = []

    def report(self, outcome: OperationOutcome) -> OperationOutcome:
        self.outcomes.append(outcome)
        if outcome.ok:
            self.log.info(f"{outcome.action} succeeded: {outcome.target}")
        else:
            self.log.error(f"{outcome.action} failed: {outcome.target} ({outcome.reason})")
        return outcome

    def reset(self) -> None:
        """Forget earlier outcomes; called at the start of every build."""
        self.outcomes.clear()

    @property
    def failures(self) -> List[OperationOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]
