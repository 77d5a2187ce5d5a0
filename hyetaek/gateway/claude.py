"""Claude API backend for the AI gateway."""

from __future__ import annotations

import base64

from . import AIGateway, ImagePart


class ClaudeGateway(AIGateway):
    """Talk to Claude; JSON-only output is requested in the prompt itself."""

    def __init__(self, api_key: str = "", model: str = "claude-sonnet-4-5-20250929") -> None:
        self._api_key = api_key
        self._model = model

    def _ensure_configured(self) -> None:
        if not self._api_key:
            raise ValueError(
                "Anthropic API 키가 설정되지 않았습니다. "
                "설정 파일 또는 ANTHROPIC_API_KEY 환경 변수를 확인해주세요."
            )

    async def _generate(self, prompt: str, image: ImagePart | None = None) -> str:
        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        content: list[dict] = []
        if image is not None:
            content.append(
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": image.mime_type,
                        "data": base64.standard_b64encode(image.data).decode(),
                    },
                }
            )
        content.append({"type": "text", "text": prompt})

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        response = await client.messages.create(
            model=self._model,
            max_tokens=4096,
            messages=[{"role": "user", "content": content}],
        )
        return response.content[0].text
