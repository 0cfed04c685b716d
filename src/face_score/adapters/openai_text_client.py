"""OpenAI Responses API client for short text generation."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from face_score.services.comments import TextClient


@dataclass
class OpenAITextClient(TextClient):
    """Text client backed by the OpenAI Responses API."""

    client: AsyncOpenAI
    model: str

    @classmethod
    def create(cls, api_key: str, model: str, timeout: float) -> "OpenAITextClient":
        """Create an OpenAI text client."""
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout), model=model)

    async def complete(self, prompt: str) -> str:
        """Return the model's text output for a prompt."""
        response = await self.client.responses.create(
            model=self.model,
            input=[{"role": "user", "content": prompt}],
            store=False,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying OpenAI client."""
        await self.client.close()
