"""Domain models for score records."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class Gender(StrEnum):
    """Gender reported by the face analysis provider."""

    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: object) -> "Gender":
        """Map a provider value onto a known gender, defaulting to OTHER."""
        for member in cls:
            if member.value == value:
                return member
        return cls.OTHER


@dataclass(frozen=True)
class ScoreRecord:
    """Persisted result of scoring one distinct image."""

    id: str
    content_hash: str
    score: float
    comment: str
    gender: Gender
    age: int
    created_at: datetime
    image_ref: str


@dataclass(frozen=True)
class ScoreQuery:
    """Listing filters, ordering and pagination."""

    page: int = 1
    limit: int = 10
    sort_by: str = "timestamp"
    order: str = "desc"
    date_from: datetime | None = None
    date_to: datetime | None = None

    @property
    def offset(self) -> int:
        """Return the row offset for the requested page."""
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class ScorePage:
    """One page of score records plus the total match count."""

    records: list[ScoreRecord]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        """Return the number of pages for the current limit."""
        return -(-self.total // self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        """Return whether a later page exists."""
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        """Return whether an earlier page exists."""
        return self.page > 1
