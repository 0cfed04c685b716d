"""Supabase-backed admin session repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from face_score.domain.sessions import AdminSession
from face_score.services.auth import SessionRepository


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for admin sessions."""

    client: Client

    def create_session(self, session: AdminSession) -> None:
        """Insert a session row."""
        response = (
            self.client.table("admin_sessions")
            .insert(
                {
                    "id": session.id,
                    "username": session.username,
                    "provider": session.provider,
                    "created_at": session.created_at.isoformat(),
                    "last_activity": session.last_activity.isoformat(),
                    "expires_at": session.expires_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create session")

    def get_session(self, session_id: str) -> AdminSession | None:
        """Return a session by id, if present."""
        response = (
            self.client.table("admin_sessions")
            .select("id, username, provider, created_at, last_activity, expires_at")
            .eq("id", session_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return AdminSession(
            id=row["id"],
            username=row["username"],
            provider=row.get("provider") or "password",
            created_at=datetime.fromisoformat(row["created_at"]),
            last_activity=datetime.fromisoformat(row["last_activity"]),
            expires_at=datetime.fromisoformat(row["expires_at"]),
        )

    def touch_session(
        self, session_id: str, last_activity: datetime, expires_at: datetime
    ) -> None:
        """Refresh last activity and expiry."""
        self.client.table("admin_sessions").update(
            {
                "last_activity": last_activity.isoformat(),
                "expires_at": expires_at.isoformat(),
            }
        ).eq("id", session_id).execute()

    def delete_session(self, session_id: str) -> None:
        """Delete a session row."""
        self.client.table("admin_sessions").delete().eq("id", session_id).execute()

    def delete_expired_sessions(self, now: datetime) -> int:
        """Delete every session whose expiry has passed."""
        response = (
            self.client.table("admin_sessions")
            .delete()
            .lt("expires_at", now.isoformat())
            .execute()
        )
        return len(response.data or [])
