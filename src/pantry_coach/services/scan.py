"""Pantry photo import using LLM vision."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from pantry_coach.domain.models import OperationResult
from pantry_coach.services.importer import AI_IMPORT_PROMPT
from pantry_coach.services.inventory import InventoryService

_logger = logging.getLogger(__name__)

CODE_FENCE = "```"


class ScanClient(Protocol):
    """Interface for LLM pantry photo reading."""

    async def read_pantry(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        prompt: str,
    ) -> str:
        """Return the model's CSV text for a pantry photo."""


@dataclass
class PantryScanService:
    """Service that turns a pantry photo into imported inventory rows."""

    client: ScanClient
    inventory_service: InventoryService
    model: str
    reasoning_effort: str | None
    store: bool

    async def scan(self, image_bytes: bytes, merge: bool = True) -> OperationResult:
        """Read items from a photo and import them into the inventory."""
        data_url = _to_data_url(image_bytes)
        try:
            raw = await self.client.read_pantry(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                image_data_url=data_url,
                prompt=AI_IMPORT_PROMPT,
            )
        except RuntimeError:
            _logger.exception("Pantry scan failed")
            return OperationResult(success=False, message="Failed to read pantry photo")
        return self.inventory_service.import_from_csv(strip_code_fences(raw), merge)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code block from model output."""
    lines = [
        line for line in text.strip().splitlines() if not line.startswith(CODE_FENCE)
    ]
    return "\n".join(lines).strip()


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
