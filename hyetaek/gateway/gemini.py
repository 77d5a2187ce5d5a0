"""Gemini API backend for the AI gateway."""

from __future__ import annotations

from . import AIGateway, ImagePart


class GeminiGateway(AIGateway):
    """Talk to Google Gemini with JSON-only responses."""

    def __init__(self, api_key: str = "", model: str = "gemini-2.5-flash") -> None:
        self._api_key = api_key
        self._model = model

    def _ensure_configured(self) -> None:
        if not self._api_key:
            raise ValueError(
                "Gemini API 키가 설정되지 않았습니다. "
                "설정 파일 또는 GEMINI_API_KEY 환경 변수를 확인해주세요."
            )

    async def _generate(self, prompt: str, image: ImagePart | None = None) -> str:
        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from None

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(
            self._model,
            generation_config={"response_mime_type": "application/json"},
        )

        parts: list = []
        if image is not None:
            parts.append({"mime_type": image.mime_type, "data": image.data})
        parts.append(prompt)

        response = await model.generate_content_async(parts)
        return response.text
