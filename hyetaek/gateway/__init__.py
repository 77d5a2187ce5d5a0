"""AI gateway base class, image payload type, and factory."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .. import prompts
from ..models import ReceiptAnalysisResult, ReceiptData, Store
from ..normalize import (
    parse_analysis,
    parse_receipt,
    parse_recommendations,
    parse_stores,
)

if TYPE_CHECKING:
    from ..config import AppConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImagePart:
    data: bytes
    mime_type: str  # image/jpeg, image/png, ...


class AIGateway(ABC):
    """Builds prompts, issues one request per call, and normalizes replies.

    Upstream failures and unparseable replies never propagate: they are
    logged and returned as an empty result ([] or None).
    """

    @abstractmethod
    async def _generate(self, prompt: str, image: ImagePart | None = None) -> str:
        """Send one request and return the model's raw text reply."""
        ...

    def _ensure_configured(self) -> None:
        """Raise ValueError when the backend cannot make requests at all."""

    async def _request(
        self, operation: str, prompt: str, image: ImagePart | None = None
    ) -> str | None:
        self._ensure_configured()
        try:
            return await self._generate(prompt, image)
        except ImportError:
            raise
        except Exception:
            logger.exception("AI request failed: %s", operation)
            return None

    async def seed_catalog(self) -> list[Store]:
        """Generate the initial store catalog."""
        text = await self._request("seed_catalog", prompts.catalog_prompt())
        if text is None:
            return []
        return parse_stores(text)

    async def recommend(self, preferences: str, stores: Sequence[Store]) -> list[Store]:
        """Return the stores the model picks for *preferences*."""
        if not stores:
            return []
        text = await self._request(
            "recommend", prompts.recommendation_prompt(preferences, stores)
        )
        if text is None:
            return []
        return parse_recommendations(text, stores)

    async def parse_receipt_text(self, receipt_text: str) -> ReceiptData | None:
        """Extract a receipt from free text typed by the user."""
        text = await self._request(
            "parse_receipt_text", prompts.receipt_text_prompt(receipt_text)
        )
        if text is None:
            return None
        return parse_receipt(text)

    async def analyze_receipt_image(
        self, data: bytes, mime_type: str
    ) -> ReceiptAnalysisResult | None:
        """Analyze a receipt photo and suggest immediate and future benefits."""
        text = await self._request(
            "analyze_receipt_image",
            prompts.receipt_image_prompt(),
            ImagePart(data=data, mime_type=mime_type),
        )
        if text is None:
            return None
        return parse_analysis(text)


def create_gateway(config: AppConfig) -> AIGateway:
    """Create an AI gateway based on configuration."""
    backend_name = config.gateway.backend

    match backend_name:
        case "gemini":
            from .gemini import GeminiGateway

            return GeminiGateway(
                api_key=config.gateway.gemini.api_key,
                model=config.gateway.gemini.model,
            )
        case "claude":
            from .claude import ClaudeGateway

            return ClaudeGateway(
                api_key=config.gateway.claude.api_key,
                model=config.gateway.claude.model,
            )
        case _:
            raise ValueError(
                f"알 수 없는 AI 백엔드: {backend_name!r}  "
                f"(gemini / claude 중에서 선택해주세요)"
            )
