"""Scoring pipeline and score record management."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from face_score.domain.faces import FaceAttributes
from face_score.domain.retention import (
    ExpiredRecord,
    RetentionStats,
    StoreStats,
    SweepReport,
)
from face_score.domain.scores import Gender, ScorePage, ScoreQuery, ScoreRecord
from face_score.errors import NotFoundError
from face_score.services.comments import CommentService
from face_score.services.faces import FaceService
from face_score.services.images import (
    ImageService,
    content_hash,
    encode_image,
    image_url,
    record_id,
)

_logger = logging.getLogger(__name__)


class ScoreRepository(Protocol):
    """Persistence interface for score metadata."""

    def upsert(self, record: ScoreRecord) -> None:
        """Insert a record or update the row with the same content hash."""

    def get(self, record_id: str) -> ScoreRecord | None:
        """Return a record by id, if present."""

    def get_many(self, record_ids: list[str]) -> list[ScoreRecord]:
        """Return the records that exist among the given ids."""

    def list_page(self, query: ScoreQuery) -> ScorePage:
        """Return one filtered, ordered page of records."""

    def delete_many(self, record_ids: list[str]) -> int:
        """Delete records by id in one statement and return the count."""

    def list_created_before(self, cutoff: datetime, limit: int) -> list[ExpiredRecord]:
        """Return up to limit of the oldest records created before the cutoff."""

    def count_created_before(self, cutoff: datetime) -> int:
        """Return the exact number of records created before the cutoff."""

    def delete_expired(self, record_ids: list[str], cutoff: datetime) -> int:
        """Delete the given records that are still older than the cutoff.

        Runs as one statement; rows refreshed past the cutoff are kept.
        """

    def retention_stats(self, cutoff: datetime) -> RetentionStats:
        """Return record counts on either side of the cutoff."""

    def store_stats(self, now: datetime) -> StoreStats:
        """Return overall record statistics."""


@dataclass(frozen=True)
class ScoreResult:
    """Score returned to the submitter."""

    score: float
    comment: str
    gender: Gender
    age: int
    key: str | None
    image_url: str | None
    steps: list[str]


@dataclass(frozen=True)
class FortuneResult:
    """Temperament report returned to the submitter."""

    comment: str
    face: FaceAttributes
    image_url: str | None


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ScoreService:
    """Scores submitted images and manages stored results."""

    face_service: FaceService
    comment_service: CommentService
    image_service: ImageService
    repository: ScoreRepository
    clock: Callable[[], datetime] = field(default=_utcnow)

    async def submit(self, image_bytes: bytes) -> ScoreResult:
        """Score an image, then store it and its metadata on a best-effort basis.

        Face analysis errors propagate. Comment and storage failures do not:
        the caller always receives the computed score.
        """
        steps: list[str] = []
        face = await self.face_service.analyze(encode_image(image_bytes))
        score = face.beauty_score
        steps.append(f"face detected: gender={face.gender} age={face.age}")
        comment = await self.comment_service.score_comment(face)
        steps.append("comment generated")

        digest = content_hash(image_bytes)
        record = ScoreRecord(
            id=record_id(digest),
            content_hash=digest,
            score=score,
            comment=comment,
            gender=Gender.parse(face.gender),
            age=face.age,
            created_at=self.clock(),
            image_ref=image_url(digest),
        )
        stored_key, stored_url = self._persist(image_bytes, record, steps)
        return ScoreResult(
            score=score,
            comment=comment,
            gender=record.gender,
            age=record.age,
            key=stored_key,
            image_url=stored_url,
            steps=steps,
        )

    async def fortune(self, image_bytes: bytes) -> FortuneResult:
        """Produce a temperament report and store the image best-effort."""
        face = await self.face_service.analyze(encode_image(image_bytes))
        report = await self.comment_service.temperament_report(face)
        stored_url = None
        try:
            stored_url = image_url(self.image_service.save(image_bytes))
        except Exception:
            _logger.exception("Failed to store fortune image")
        return FortuneResult(comment=report, face=face, image_url=stored_url)

    def get_record(self, record_id: str) -> ScoreRecord:
        """Return a record or raise NotFoundError."""
        record = self.repository.get(record_id)
        if record is None:
            raise NotFoundError(code="record_not_found", message="Record not found")
        return record

    def list_records(self, query: ScoreQuery) -> ScorePage:
        """Return one page of stored results."""
        return self.repository.list_page(query)

    def delete_records(self, record_ids: list[str]) -> SweepReport:
        """Delete records and their images, tolerating image delete failures."""
        records = self.repository.get_many(record_ids)
        images_deleted, images_failed = self.image_service.delete_many(
            [record.content_hash for record in records]
        )
        deleted = self.repository.delete_many([record.id for record in records])
        _logger.info(
            "Deleted %s records (images deleted=%s failed=%s)",
            deleted,
            images_deleted,
            images_failed,
        )
        return SweepReport(
            records_deleted=deleted,
            images_deleted=images_deleted,
            images_failed=images_failed,
        )

    def _persist(
        self, image_bytes: bytes, record: ScoreRecord, steps: list[str]
    ) -> tuple[str | None, str | None]:
        """Write the image first, then upsert metadata that points at it."""
        try:
            self.image_service.save(image_bytes)
        except Exception:
            _logger.exception("Failed to store image %s", record.content_hash)
            steps.append("image storage failed")
            return None, None
        steps.append(f"image stored: {record.content_hash}")
        try:
            self.repository.upsert(record)
        except Exception:
            _logger.exception("Failed to store score metadata %s", record.id)
            steps.append("metadata storage failed")
            return None, record.image_ref
        steps.append(f"metadata stored: {record.id}")
        return record.id, record.image_ref
