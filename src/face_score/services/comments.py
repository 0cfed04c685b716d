"""Playful comment generation with a deterministic fallback."""

import logging
from dataclasses import dataclass
from typing import Protocol

from face_score.domain.faces import FaceAttributes

_logger = logging.getLogger(__name__)

REPORT_FALLBACK = (
    "Our analyst is still writing your report. Please try again in a moment."
)


class TextClient(Protocol):
    """Interface for a generative text provider."""

    async def complete(self, prompt: str) -> str:
        """Return free text for a natural-language prompt."""


@dataclass
class CommentService:
    """Builds prompts from face attributes and asks the text provider."""

    client: TextClient | None

    async def score_comment(self, face: FaceAttributes) -> str:
        """Return a short playful comment about the beauty score."""
        fallback = fallback_comment(face.beauty_score)
        return await self._generate(build_score_prompt(face), fallback)

    async def temperament_report(self, face: FaceAttributes) -> str:
        """Return a short temperament report for the face."""
        return await self._generate(build_report_prompt(face), REPORT_FALLBACK)

    async def _generate(self, prompt: str, fallback: str) -> str:
        if self.client is None:
            _logger.warning("Text provider not configured, using fallback comment")
            return fallback
        try:
            text = await self.client.complete(prompt)
        except Exception:
            _logger.exception("Comment generation failed, using fallback comment")
            return fallback
        if not isinstance(text, str) or not text.strip():
            _logger.warning("Comment generation returned no text, using fallback")
            return fallback
        return text.strip()


def fallback_comment(score: float) -> str:
    """Return the deterministic comment used when generation fails."""
    return f"Wow, a beauty score of {score:.1f}! Impressive!"


def build_score_prompt(face: FaceAttributes) -> str:
    """Describe the face and ask for a 20-50 word playful comment."""
    who = {"Male": "a handsome guy", "Female": "a lovely lady"}.get(
        face.gender, "an adorable kitty"
    )
    emotions = ", ".join(
        f"{name} ({value:.1f}%)" for name, value in face.top_emotions()
    )
    mood = "smiling brightly" if face.smile > 50 else "looking calm"
    return (
        f"Meow~ we detected {who}, about {face.age} years old, "
        f"with a beauty score of {face.beauty_score:.1f}. "
        f"They are {mood}; face quality {face.face_quality:.2f}, "
        f"blur {face.blur:.2f}, main emotions: {emotions or 'unknown'}. "
        "Write a playful 20-50 word comment about their looks. Be warm and "
        "funny, tease a little, and do not repeat any of the numbers."
    )


def build_report_prompt(face: FaceAttributes) -> str:
    """Describe the face and ask for a ~100 word temperament report."""
    who = "gentleman" if face.gender == "Male" else "lady"
    if face.skin_health > 80:
        complexion = "radiant complexion"
    elif face.skin_health > 60:
        complexion = "healthy glow"
    else:
        complexion = "a little tired, needs rest"
    eye_open = 100 - face.left_eye_closed
    eyes = "bright, piercing gaze" if eye_open > 90 else "soft gaze"
    if face.smile > 80:
        social = "beaming smile, very approachable"
    elif face.smile > 50:
        social = "friendly expression"
    else:
        social = "composed and dignified"
    top = face.top_emotions(1)
    emotion = top[0][0] if top else "neutral"
    return (
        "You are an aesthetics and personality analyst. Based on these facial "
        f"traits of a {who} (about {face.age} years old), write a temperament "
        "report:\n"
        f"1. Complexion: {face.skin_health:.1f} ({complexion})\n"
        f"2. Eyes: {eyes}\n"
        f"3. Emotion: {emotion}\n"
        f"4. Approachability: {face.smile:.1f} ({social})\n"
        f"5. Base beauty score: {face.beauty_score:.1f}\n"
        "Write about 100 words: sum up their temperament in 3-4 words, "
        "describe their charm and first impression, and end with one warm "
        "styling or social tip. Avoid fortune-telling language. Return only "
        "the report."
    )
