"""Content-addressed image storage."""

import base64
import binascii
import hashlib
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from face_score.errors import NotFoundError, ValidationError

MAX_IMAGE_BYTES = 10 * 1024 * 1024
MIN_BASE64_LENGTH = 100

_DATA_URI = re.compile(r"^data:image/(jpeg|jpg|png|gif|webp);base64,")
_BASE64_BODY = re.compile(r"^[A-Za-z0-9+/=]+$")
_CONTENT_HASH = re.compile(r"^[0-9a-f]{64}$")

_logger = logging.getLogger(__name__)


class ImageStore(Protocol):
    """Object store for raw image bytes."""

    def put(self, key: str, data: bytes, content_type: str) -> None:
        """Store bytes under key, overwriting any existing object."""

    def get(self, key: str) -> bytes | None:
        """Return the bytes stored under key, or None when absent."""

    def delete(self, key: str) -> None:
        """Delete the object under key; absent objects are not an error."""


@dataclass(frozen=True)
class StoredImage:
    """Image bytes loaded from the object store."""

    content_hash: str
    data: bytes
    content_type: str


@dataclass
class ImageService:
    """Stores images under keys derived from their content."""

    store: ImageStore

    def save(self, data: bytes) -> str:
        """Store image bytes and return their content hash."""
        digest = content_hash(data)
        self.store.put(image_key(digest), data, detect_mime_type(data))
        return digest

    def load(self, digest: str) -> StoredImage:
        """Load a stored image by content hash."""
        validate_content_hash(digest)
        data = self.store.get(image_key(digest))
        if data is None:
            raise NotFoundError(code="image_not_found", message="Image not found")
        return StoredImage(
            content_hash=digest, data=data, content_type=detect_mime_type(data)
        )

    def delete(self, digest: str) -> None:
        """Delete a stored image; deleting a missing image is a no-op."""
        self.store.delete(image_key(digest))

    def delete_many(self, digests: list[str]) -> tuple[int, int]:
        """Delete images one by one and return (deleted, failed) counts.

        A failure on one image does not stop the remaining deletions.
        """
        deleted = 0
        failed = 0
        for digest in digests:
            try:
                self.delete(digest)
            except Exception:
                failed += 1
                _logger.exception("Failed to delete image %s", digest)
            else:
                deleted += 1
        return deleted, failed


def content_hash(data: bytes) -> str:
    """Return the full SHA-256 hex digest of the image bytes."""
    return hashlib.sha256(data).hexdigest()


def record_id(digest: str) -> str:
    """Return the score record id for a content hash."""
    return f"face_{digest}"


def image_key(digest: str) -> str:
    """Return the object store key for a content hash."""
    return f"images/{digest}"


def image_url(digest: str) -> str:
    """Return the public URL that serves the image."""
    return f"/api/image?id={digest}"


def validate_content_hash(digest: str) -> None:
    """Reject anything that is not a lowercase SHA-256 hex digest."""
    if not _CONTENT_HASH.match(digest or ""):
        raise ValidationError(code="invalid_image_id", message="Invalid image id")


def decode_image_payload(payload: str | None) -> bytes:
    """Decode a base64 image payload, optionally wrapped in a data URI."""
    if not payload or not isinstance(payload, str):
        raise ValidationError(code="missing_image", message="Image data is required")
    body = _DATA_URI.sub("", payload, count=1)
    if not _BASE64_BODY.match(body):
        raise ValidationError(
            code="invalid_image", message="Image must be base64 encoded"
        )
    if len(body) < MIN_BASE64_LENGTH:
        raise ValidationError(code="image_too_small", message="Image data is too small")
    if len(body) * 3 // 4 > MAX_IMAGE_BYTES:
        raise ValidationError(
            code="image_too_large", message="Image exceeds the 10MB limit"
        )
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError(
            code="invalid_image", message="Image must be base64 encoded"
        ) from exc


def encode_image(data: bytes) -> str:
    """Encode image bytes as base64 text."""
    return base64.b64encode(data).decode("utf-8")


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes.startswith((b"GIF87a", b"GIF89a")):
        return "image/gif"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
