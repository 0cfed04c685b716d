"""Face analysis via the third-party detection provider."""

from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from face_score.domain.faces import FaceAnalysis, FaceAttributes
from face_score.errors import UpstreamError, ValidationError

RETURN_ATTRIBUTES = (
    "age,gender,smiling,headpose,facequality,blur,eyestatus,"
    "emotion,ethnicity,beauty,mouthstatus,eyegaze,skinstatus"
)


class FaceAnalysisClient(Protocol):
    """Interface for the face detection provider."""

    async def detect(self, image_base64: str, return_attributes: str) -> dict[str, object]:
        """Detect faces in an image and return the raw provider payload."""


@dataclass
class FaceService:
    """Runs face detection and normalizes the provider payload."""

    client: FaceAnalysisClient

    async def analyze(self, image_base64: str) -> FaceAttributes:
        """Return the attributes of the first detected face.

        Raises ValidationError when no face is found and UpstreamError when
        the provider payload cannot be understood.
        """
        raw = await self.client.detect(image_base64, RETURN_ATTRIBUTES)
        analysis = parse_detection(raw)
        if not analysis.faces:
            raise ValidationError(
                code="no_face_detected", message="No face detected in the image"
            )
        return analysis.faces[0]


def parse_detection(raw: dict[str, object]) -> FaceAnalysis:
    """Convert a raw detection payload into a FaceAnalysis."""
    faces = raw.get("faces") if isinstance(raw, dict) else None
    if faces is None:
        faces = []
    if not isinstance(faces, list):
        raise UpstreamError(
            code="upstream_malformed", message="Face analysis returned bad data"
        )
    try:
        return FaceAnalysis(faces=[_parse_face(face) for face in faces])
    except (KeyError, TypeError, AttributeError, PydanticValidationError) as exc:
        raise UpstreamError(
            code="upstream_malformed", message="Face analysis returned bad data"
        ) from exc


def _parse_face(face: dict) -> FaceAttributes:
    attributes = face["attributes"]
    eyes = attributes.get("eyestatus") or {}
    skin = attributes.get("skinstatus") or {}
    blur = attributes.get("blur") or {}
    return FaceAttributes(
        gender=attributes["gender"]["value"],
        age=attributes["age"]["value"],
        male_score=attributes["beauty"]["male_score"],
        female_score=attributes["beauty"]["female_score"],
        smile=(attributes.get("smile") or {}).get("value", 0.0),
        emotion=attributes.get("emotion") or {},
        skin_health=skin.get("health", 0.0),
        left_eye_closed=(eyes.get("left_eye_status") or {}).get(
            "no_glass_eye_close", 0.0
        ),
        right_eye_closed=(eyes.get("right_eye_status") or {}).get(
            "no_glass_eye_close", 0.0
        ),
        face_quality=(attributes.get("facequality") or {}).get("value", 0.0),
        blur=(blur.get("blurness") or {}).get("value", 0.0),
    )
