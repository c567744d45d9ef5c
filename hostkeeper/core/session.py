"""Session identity and file layout."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

# Sortable, second granularity
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

LOG_PREFIX = "maintenance_"
AUDIT_PREFIX = "audit_"
FINAL_PREFIX = "full_report_"
BACKUP_PREFIX = "backups_"


@dataclass(frozen=True)
class Session:
    """
    One run of the pipeline.

    Every path is derived from the timestamp captured at startup, so two
    sessions never share a file set unless they start in the same second.
    """

    timestamp: str
    log_dir: Path

    @classmethod
    def create(cls, log_dir: Path, now: datetime | None = None) -> "Session":
        """
        Create a session stamped with the current time.

        Args:
            log_dir: Directory holding logs, reports and backups
            now: Override for the current time (for testing)

        Returns:
            New Session
        """
        now = now or datetime.now()
        return cls(timestamp=now.strftime(TIMESTAMP_FORMAT), log_dir=Path(log_dir))

    @property
    def log_path(self) -> Path:
        return self.log_dir / f"{LOG_PREFIX}{self.timestamp}.log"

    @property
    def audit_path(self) -> Path:
        return self.log_dir / f"{AUDIT_PREFIX}{self.timestamp}.txt"

    @property
    def final_report_path(self) -> Path:
        return self.log_dir / f"{FINAL_PREFIX}{self.timestamp}.txt"

    @property
    def backup_dir(self) -> Path:
        return self.log_dir / f"{BACKUP_PREFIX}{self.timestamp}"
