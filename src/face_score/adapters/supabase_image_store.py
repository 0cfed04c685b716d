"""Supabase Storage image store."""

from dataclasses import dataclass

from storage3.exceptions import StorageApiError
from supabase import Client

from face_score.services.images import ImageStore


@dataclass
class SupabaseImageStore(ImageStore):
    """Stores image objects in a Supabase Storage bucket."""

    client: Client
    bucket: str

    def put(self, key: str, data: bytes, content_type: str) -> None:
        """Upload bytes, replacing any object with the same key."""
        self.client.storage.from_(self.bucket).upload(
            path=key,
            file=data,
            file_options={
                "content-type": content_type,
                "cache-control": "31536000",
                "upsert": "true",
            },
        )

    def get(self, key: str) -> bytes | None:
        """Download an object, returning None when it does not exist."""
        try:
            return self.client.storage.from_(self.bucket).download(key)
        except StorageApiError as exc:
            if _is_not_found(exc):
                return None
            raise

    def delete(self, key: str) -> None:
        """Remove an object; Storage ignores keys that do not exist."""
        self.client.storage.from_(self.bucket).remove([key])


def _is_not_found(exc: StorageApiError) -> bool:
    status = str(getattr(exc, "status", ""))
    message = str(getattr(exc, "message", exc)).lower()
    return status == "404" or "not found" in message
