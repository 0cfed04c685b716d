"""Domain models for retention and storage statistics."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ExpiredRecord:
    """Identifiers of a record selected for deletion."""

    id: str
    content_hash: str


@dataclass(frozen=True)
class SweepReport:
    """Counts reported by a retention sweep or batch delete."""

    records_deleted: int
    images_deleted: int
    images_failed: int


@dataclass(frozen=True)
class RetentionStats:
    """Record counts on either side of a retention cutoff."""

    total_records: int
    recent_records: int
    old_records: int
    oldest_record: datetime | None
    newest_record: datetime | None


@dataclass(frozen=True)
class StoreStats:
    """Overall metadata store statistics."""

    total_records: int
    newest_record: datetime | None
    oldest_record: datetime | None
    records_today: int
    records_this_month: int
