"""Domain models for admin sessions."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AdminSession:
    """Server-side session for an authenticated admin."""

    id: str
    username: str
    provider: str
    created_at: datetime
    last_activity: datetime
    expires_at: datetime
