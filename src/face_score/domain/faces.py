"""Models for face analysis results."""

from pydantic import BaseModel, Field


class FaceAttributes(BaseModel):
    """Attributes of the primary detected face."""

    gender: str
    age: int = Field(ge=0)
    male_score: float = Field(ge=0.0, le=100.0)
    female_score: float = Field(ge=0.0, le=100.0)
    smile: float = 0.0
    emotion: dict[str, float] = Field(default_factory=dict)
    skin_health: float = 0.0
    left_eye_closed: float = 0.0
    right_eye_closed: float = 0.0
    face_quality: float = 0.0
    blur: float = 0.0

    @property
    def beauty_score(self) -> float:
        """Return the beauty score matching the detected gender."""
        if self.gender == "Male":
            return self.male_score
        return self.female_score

    def top_emotions(self, count: int = 2) -> list[tuple[str, float]]:
        """Return the most probable emotions, highest first."""
        ranked = sorted(self.emotion.items(), key=lambda item: item[1], reverse=True)
        return ranked[:count]


class FaceAnalysis(BaseModel):
    """All faces detected in an image."""

    faces: list[FaceAttributes]
