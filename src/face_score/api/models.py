"""Request models for the public and admin APIs."""

from pydantic import BaseModel, Field, field_validator


class ImageSubmission(BaseModel):
    """Image submitted for scoring or a temperament report."""

    image: str | None = None
    turnstile_response: str | None = None
    app_type: str | None = None
    debug: bool = False


class LoginRequest(BaseModel):
    """Password login credentials."""

    username: str
    password: str


class DeleteImagesRequest(BaseModel):
    """Batch of record ids to delete."""

    ids: list[str] = Field(min_length=1, max_length=100)

    @field_validator("ids")
    @classmethod
    def _ids_not_blank(cls, value: list[str]) -> list[str]:
        cleaned = [item.strip() for item in value]
        if any(not item for item in cleaned):
            raise ValueError("ids must be non-empty strings")
        return cleaned
