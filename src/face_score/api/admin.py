"""Session-protected admin endpoints for stored results and retention."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Request

from face_score.api.dependencies import get_container, rate_limit, require_session
from face_score.api.models import DeleteImagesRequest
from face_score.domain.scores import ScoreQuery, ScoreRecord
from face_score.errors import ValidationError

if TYPE_CHECKING:
    from face_score.containers import AppContainer

router = APIRouter(prefix="/api", tags=["admin"])


@router.get(
    "/images",
    dependencies=[Depends(rate_limit("/api/images")), Depends(require_session)],
)
async def list_images(  # noqa: PLR0913
    request: Request,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    sort_by: str = "timestamp",
    order: str = "desc",
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> dict[str, object]:
    """Return a page of stored results."""
    container: AppContainer = get_container(request)
    start = _as_utc(date_from)
    end = _as_utc(date_to)
    if start and end and start > end:
        raise ValidationError(
            code="invalid_date_range", message="date_from must not be after date_to"
        )
    query = ScoreQuery(
        page=page,
        limit=limit,
        sort_by=sort_by if sort_by in {"timestamp", "score"} else "timestamp",
        order="asc" if order.lower() == "asc" else "desc",
        date_from=start,
        date_to=end,
    )
    result = container.score_service.list_records(query)
    return {
        "data": [_serialize_record(record) for record in result.records],
        "pagination": {
            "page": result.page,
            "limit": result.limit,
            "total": result.total,
            "total_pages": result.total_pages,
            "has_next": result.has_next,
            "has_prev": result.has_prev,
        },
    }


@router.get(
    "/images/{record_id}",
    dependencies=[Depends(rate_limit("/api/images")), Depends(require_session)],
)
async def get_image_record(record_id: str, request: Request) -> dict[str, object]:
    """Return one stored result by record id."""
    container: AppContainer = get_container(request)
    record = container.score_service.get_record(record_id)
    return {"success": True, "data": _serialize_record(record)}


@router.delete(
    "/images",
    dependencies=[Depends(rate_limit("/api/images")), Depends(require_session)],
)
async def delete_images(
    body: DeleteImagesRequest, request: Request
) -> dict[str, object]:
    """Delete records and their images."""
    container: AppContainer = get_container(request)
    report = container.score_service.delete_records(body.ids)
    return {
        "success": True,
        "deleted": report.records_deleted,
        "images_deleted": report.images_deleted,
        "images_failed": report.images_failed,
    }


@router.get(
    "/verify",
    dependencies=[Depends(rate_limit("/api/verify")), Depends(require_session)],
)
async def verify(request: Request, action: str = "retention") -> dict[str, object]:
    """Report retention compliance, store statistics or pending deletions."""
    container: AppContainer = get_container(request)
    retention = container.retention_service
    if action == "retention":
        stats, cutoff = retention.retention_stats()
        return {
            "success": True,
            "action": action,
            "compliant": stats.old_records == 0,
            "statistics": {
                "totalRecords": stats.total_records,
                "recentRecords": stats.recent_records,
                "oldRecords": stats.old_records,
                "oldestRecord": _iso(stats.oldest_record),
                "newestRecord": _iso(stats.newest_record),
                "cutoffDate": cutoff.isoformat(),
            },
        }
    if action == "stats":
        store = retention.store_stats()
        return {
            "success": True,
            "action": action,
            "statistics": {
                "totalRecords": store.total_records,
                "newestRecord": _iso(store.newest_record),
                "oldestRecord": _iso(store.oldest_record),
                "recordsToday": store.records_today,
                "recordsThisMonth": store.records_this_month,
            },
        }
    if action == "cleanup-status":
        pending, cutoff = retention.pending_deletion()
        return {
            "success": True,
            "action": action,
            "status": "ready",
            "pendingDeletion": pending,
            "nextCleanupCutoff": cutoff.isoformat(),
        }
    raise ValidationError(code="invalid_action", message=f"Invalid action: {action}")


@router.api_route(
    "/cleanup",
    methods=["GET", "POST"],
    dependencies=[Depends(rate_limit("/api/cleanup")), Depends(require_session)],
)
async def cleanup(request: Request) -> dict[str, object]:
    """Run the retention sweep with the configured retention window."""
    container: AppContainer = get_container(request)
    cutoff = container.retention_service.cutoff()
    report = container.retention_service.sweep(cutoff)
    return {
        "success": True,
        "message": f"Cleanup finished, deleted {report.records_deleted} records",
        "deletedCount": report.records_deleted,
        "deletedImages": report.images_deleted,
        "failedImages": report.images_failed,
        "cutoffDate": cutoff.isoformat(),
    }


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _serialize_record(record: ScoreRecord) -> dict[str, object]:
    return {
        "id": record.id,
        "content_hash": record.content_hash,
        "score": record.score,
        "comment": record.comment,
        "gender": record.gender.value,
        "age": record.age,
        "timestamp": record.created_at.isoformat(),
        "image_url": record.image_ref,
    }
