"""OpenAI Responses API client for pantry photo reading."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from pantry_coach.services.scan import ScanClient


@dataclass
class OpenAIScanClient(ScanClient):
    """Scan client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIScanClient":
        """Create an OpenAI scan client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def read_pantry(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        prompt: str,
    ) -> str:
        """Call OpenAI Responses API and return plain text output."""
        request_payload: dict[str, object] = {
            "model": model,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {"type": "input_image", "image_url": image_data_url},
                    ],
                }
            ],
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        try:
            response = await self.client.responses.create(**request_payload)
        except OpenAIError as exc:
            raise RuntimeError("OpenAI request failed") from exc
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()
