"""Run-scoped tallies for one updater run."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List

logger = logging.getLogger(__name__)


class RewriteStatus(Enum):
    """Outcome of rewriting a single agent document."""
    UPDATED = "updated"
    WOULD_UPDATE = "would_update"
    UNCHANGED = "unchanged"


@dataclass
class UpdateReport:
    """Counters and messages accumulated over a run.

    One instance is created by the orchestrator and handed to every per-agent
    and per-document step, which record into it instead of raising.
    """
    dry_run: bool = False
    updated: int = 0
    would_update: int = 0
    unchanged: int = 0
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    project_config_updated: bool = False

    def record(self, status: RewriteStatus) -> None:
        if status is RewriteStatus.UPDATED:
            self.updated += 1
        elif status is RewriteStatus.WOULD_UPDATE:
            self.would_update += 1
        else:
            self.unchanged += 1

    def add_error(self, message: str) -> None:
        logger.warning(message)
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        logger.info(message)
        self.warnings.append(message)
