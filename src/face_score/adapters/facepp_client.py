"""Face++ detection API client."""

from dataclasses import dataclass

import httpx

from face_score.errors import UpstreamError
from face_score.services.faces import FaceAnalysisClient


@dataclass
class HttpxFaceppClient(FaceAnalysisClient):
    """HTTPX-backed Face++ client."""

    api_key: str
    api_secret: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15.0

    @classmethod
    def create(
        cls, api_key: str, api_secret: str, base_url: str, timeout: float = 15.0
    ) -> "HttpxFaceppClient":
        """Create a Face++ client with a managed httpx session."""
        return cls(
            api_key=api_key,
            api_secret=api_secret,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def detect(self, image_base64: str, return_attributes: str) -> dict[str, object]:
        """Call the detect endpoint and return the raw payload."""
        try:
            response = await self.http_client.post(
                f"{self.base_url}/detect",
                data={
                    "api_key": self.api_key,
                    "api_secret": self.api_secret,
                    "image_base64": image_base64,
                    "return_attributes": return_attributes,
                },
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            raise UpstreamError(
                code="upstream_timeout",
                message="Face analysis timed out",
                timeout=True,
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(
                code="upstream_unavailable", message="Face analysis unavailable"
            ) from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError(
                code="upstream_malformed", message="Face analysis returned bad data"
            ) from exc
        if response.is_error:
            message = "Face analysis request failed"
            if isinstance(payload, dict) and payload.get("error_message"):
                message = str(payload["error_message"])
            raise UpstreamError(
                code="upstream_rejected",
                message=message,
                details={"status": response.status_code},
            )
        return payload

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
