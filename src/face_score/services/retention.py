"""Retention sweep and retention reporting."""

import calendar
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from face_score.domain.retention import RetentionStats, StoreStats, SweepReport
from face_score.services.images import ImageService
from face_score.services.scores import ScoreRepository

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class RetentionService:
    """Deletes results older than the retention horizon."""

    repository: ScoreRepository
    image_service: ImageService
    retention_months: int = 6
    batch_size: int = 100
    clock: Callable[[], datetime] = field(default=_utcnow)

    def cutoff(self) -> datetime:
        """Return the oldest creation time that is still retained."""
        return subtract_months(self.clock(), self.retention_months)

    def sweep(self, cutoff: datetime | None = None) -> SweepReport:
        """Delete every record created before the cutoff, one batch at a time.

        For each batch, images go first and each failure is counted, not
        raised. The batch's metadata rows are then removed in one statement
        restricted to rows still older than the cutoff, so orphaned images
        are possible but a row is never deleted without its image being
        attempted.
        """
        resolved_cutoff = cutoff or self.cutoff()
        records_deleted = 0
        images_deleted = 0
        images_failed = 0
        while True:
            batch = self.repository.list_created_before(
                resolved_cutoff, self.batch_size
            )
            if not batch:
                break
            # A record re-submitted between listing and deleting keeps its
            # refreshed row but loses the image until the same bytes are
            # submitted again.
            deleted, failed = self.image_service.delete_many(
                [record.content_hash for record in batch]
            )
            images_deleted += deleted
            images_failed += failed
            removed = self.repository.delete_expired(
                [record.id for record in batch], resolved_cutoff
            )
            records_deleted += removed
            if removed == 0 or len(batch) < self.batch_size:
                break
        _logger.info(
            "Retention sweep: records=%s images deleted=%s failed=%s cutoff=%s",
            records_deleted,
            images_deleted,
            images_failed,
            resolved_cutoff.isoformat(),
        )
        return SweepReport(
            records_deleted=records_deleted,
            images_deleted=images_deleted,
            images_failed=images_failed,
        )

    def retention_stats(self) -> tuple[RetentionStats, datetime]:
        """Return counts inside/outside the retention window and the cutoff."""
        cutoff = self.cutoff()
        return self.repository.retention_stats(cutoff), cutoff

    def store_stats(self) -> StoreStats:
        """Return overall record statistics."""
        return self.repository.store_stats(self.clock())

    def pending_deletion(self) -> tuple[int, datetime]:
        """Return how many records the next sweep would delete."""
        cutoff = self.cutoff()
        return self.repository.count_created_before(cutoff), cutoff


def subtract_months(moment: datetime, months: int) -> datetime:
    """Step back whole calendar months, clamping to the end of short months."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month_zero = divmod(month_index, 12)
    month = month_zero + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)
