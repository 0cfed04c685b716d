"""Supabase-backed score metadata repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from face_score.domain.retention import ExpiredRecord, RetentionStats, StoreStats
from face_score.domain.scores import Gender, ScorePage, ScoreQuery, ScoreRecord
from face_score.services.scores import ScoreRepository

_TABLE = "face_scores"
_COLUMNS = "id, content_hash, score, comment, gender, age, created_at, image_url"
_SORT_COLUMNS = {"timestamp": "created_at", "score": "score"}


@dataclass
class SupabaseScoreRepository(ScoreRepository):
    """Supabase implementation for score records."""

    client: Client

    def upsert(self, record: ScoreRecord) -> None:
        """Insert or update by content hash, refreshing created_at."""
        self.client.table(_TABLE).upsert(
            {
                "id": record.id,
                "content_hash": record.content_hash,
                "score": record.score,
                "comment": record.comment,
                "gender": record.gender.value,
                "age": record.age,
                "created_at": record.created_at.isoformat(),
                "image_url": record.image_ref,
            },
            on_conflict="content_hash",
        ).execute()

    def get(self, record_id: str) -> ScoreRecord | None:
        """Return a record by id, if present."""
        response = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .eq("id", record_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_record(response.data[0])

    def get_many(self, record_ids: list[str]) -> list[ScoreRecord]:
        """Return existing records among the given ids."""
        if not record_ids:
            return []
        response = (
            self.client.table(_TABLE).select(_COLUMNS).in_("id", record_ids).execute()
        )
        return [_to_record(row) for row in response.data or []]

    def list_page(self, query: ScoreQuery) -> ScorePage:
        """Return a filtered, ordered page with an exact total count."""
        request = self.client.table(_TABLE).select(_COLUMNS, count="exact")
        if query.date_from is not None:
            request = request.gte("created_at", query.date_from.isoformat())
        if query.date_to is not None:
            request = request.lte("created_at", query.date_to.isoformat())
        column = _SORT_COLUMNS.get(query.sort_by, "created_at")
        response = (
            request.order(column, desc=query.order != "asc")
            .range(query.offset, query.offset + query.limit - 1)
            .execute()
        )
        records = [_to_record(row) for row in response.data or []]
        return ScorePage(
            records=records,
            total=response.count or 0,
            page=query.page,
            limit=query.limit,
        )

    def delete_many(self, record_ids: list[str]) -> int:
        """Delete records by id in a single statement."""
        if not record_ids:
            return 0
        response = self.client.table(_TABLE).delete().in_("id", record_ids).execute()
        return len(response.data or [])

    def list_created_before(self, cutoff: datetime, limit: int) -> list[ExpiredRecord]:
        """Return ids and hashes of the oldest records before the cutoff."""
        response = (
            self.client.table(_TABLE)
            .select("id, content_hash")
            .lt("created_at", cutoff.isoformat())
            .order("created_at")
            .limit(limit)
            .execute()
        )
        return [
            ExpiredRecord(id=row["id"], content_hash=row["content_hash"])
            for row in response.data or []
        ]

    def count_created_before(self, cutoff: datetime) -> int:
        """Count records older than the cutoff without fetching them."""
        response = (
            self.client.table(_TABLE)
            .select("id", count="exact")
            .lt("created_at", cutoff.isoformat())
            .limit(1)
            .execute()
        )
        return response.count or 0

    def delete_expired(self, record_ids: list[str], cutoff: datetime) -> int:
        """Delete listed records that are still older than the cutoff."""
        if not record_ids:
            return 0
        response = (
            self.client.table(_TABLE)
            .delete()
            .in_("id", record_ids)
            .lt("created_at", cutoff.isoformat())
            .execute()
        )
        return len(response.data or [])

    def retention_stats(self, cutoff: datetime) -> RetentionStats:
        """Count records before and after the cutoff."""
        old = (
            self.client.table(_TABLE)
            .select("created_at", count="exact")
            .lt("created_at", cutoff.isoformat())
            .order("created_at")
            .limit(1)
            .execute()
        )
        recent = (
            self.client.table(_TABLE)
            .select("created_at", count="exact")
            .gte("created_at", cutoff.isoformat())
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        old_count = old.count or 0
        recent_count = recent.count or 0
        return RetentionStats(
            total_records=old_count + recent_count,
            recent_records=recent_count,
            old_records=old_count,
            oldest_record=_first_timestamp(old.data),
            newest_record=_first_timestamp(recent.data),
        )

    def store_stats(self, now: datetime) -> StoreStats:
        """Return totals, extremes and today/this-month counts."""
        newest = (
            self.client.table(_TABLE)
            .select("created_at", count="exact")
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        oldest = (
            self.client.table(_TABLE)
            .select("created_at")
            .order("created_at")
            .limit(1)
            .execute()
        )
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        start_of_month = start_of_day.replace(day=1)
        return StoreStats(
            total_records=newest.count or 0,
            newest_record=_first_timestamp(newest.data),
            oldest_record=_first_timestamp(oldest.data),
            records_today=self._count_since(start_of_day),
            records_this_month=self._count_since(start_of_month),
        )

    def _count_since(self, start: datetime) -> int:
        response = (
            self.client.table(_TABLE)
            .select("id", count="exact")
            .gte("created_at", start.isoformat())
            .limit(1)
            .execute()
        )
        return response.count or 0


def _to_record(row: dict[str, object]) -> ScoreRecord:
    return ScoreRecord(
        id=str(row["id"]),
        content_hash=str(row["content_hash"]),
        score=float(row["score"]),
        comment=str(row["comment"]),
        gender=Gender.parse(row.get("gender")),
        age=int(row["age"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        image_ref=str(row["image_url"]),
    )


def _first_timestamp(rows: list[dict[str, object]] | None) -> datetime | None:
    if not rows:
        return None
    value = rows[0].get("created_at")
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None
