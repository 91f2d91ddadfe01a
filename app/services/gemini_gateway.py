"""Gateway to the Gemini ``generateContent`` REST endpoint."""

import logging
from typing import Any

import httpx

from app.core.config import Settings
from app.exceptions.ai import UpstreamError
from app.schemas.generation import Part, Turn, TurnRole

logger = logging.getLogger(__name__)


class GeminiGateway:
    """Performs the outbound generation call and normalizes the reply.

    One POST per call, no retries. The API key travels only in the
    ``x-goog-api-key`` header and is never logged.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        """Initialize the gateway.

        Args:
            settings: Application settings (model name, base URL, timeout).
            transport: Optional httpx transport, used by tests to stub the API.
        """
        self.model = settings.gemini_model
        self.endpoint = f"{settings.gemini_api_base_url.rstrip('/')}/models/{self.model}:generateContent"
        self.timeout = settings.ai_request_timeout
        self._transport = transport

    async def generate(self, turns: list[Turn], api_key: str) -> str:
        """Send the assembled turns and return the reply text.

        Args:
            turns: Assembled conversation, system turn first if any
            api_key: Gemini API key

        Returns:
            The first candidate's text parts joined by newlines, or an empty
            string when the API returns no candidate.

        Raises:
            UpstreamError: On transport failure, non-success status or an
                unreadable response body.
        """
        payload = self.build_request_body(turns)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    json=payload,
                    headers={"Content-Type": "application/json", "x-goog-api-key": api_key},
                )
        except httpx.HTTPError as e:
            logger.error(f"Gemini request failed: {type(e).__name__}: {str(e)}")
            raise UpstreamError("Generation failed: could not reach the model API") from e

        if not response.is_success:
            body = response.text
            logger.error(f"Gemini error {response.status_code}: {body}")
            raise UpstreamError(
                f"Gemini API error: {body}",
                upstream_status=response.status_code,
                upstream_body=body,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Gemini returned a non-JSON body: {response.text[:500]}")
            raise UpstreamError("Generation failed: malformed response from the model API") from e

        return self.extract_reply(data)

    def build_request_body(self, turns: list[Turn]) -> dict[str, Any]:
        """Serialize turns into the ``generateContent`` request shape.

        ``system`` turns go to ``systemInstruction``; the API only accepts
        ``user`` and ``model`` roles inside ``contents``.
        """
        system_parts: list[dict[str, Any]] = []
        contents: list[dict[str, Any]] = []

        for turn in turns:
            parts = [self._serialize_part(part) for part in turn.parts]
            if turn.role == TurnRole.SYSTEM:
                system_parts.extend(parts)
            else:
                contents.append({"role": turn.role.value, "parts": parts})

        body: dict[str, Any] = {"contents": contents}
        if system_parts:
            body["systemInstruction"] = {"parts": system_parts}
        return body

    @staticmethod
    def _serialize_part(part: Part) -> dict[str, Any]:
        if part.inline_data is not None:
            return {
                "inlineData": {
                    "mimeType": part.inline_data.mime_type,
                    "data": part.inline_data.data,
                }
            }
        return {"text": part.text or ""}

    @staticmethod
    def extract_reply(data: Any) -> str:
        """Join the first candidate's text parts; no candidate yields ``""``."""
        if not isinstance(data, dict):
            raise UpstreamError("Generation failed: malformed response from the model API")

        candidates = data.get("candidates") or []
        if not candidates:
            return ""

        try:
            content = candidates[0].get("content") or {}
            parts = content.get("parts") or []
            return "\n".join(part.get("text") or "" for part in parts)
        except (AttributeError, TypeError) as e:
            raise UpstreamError("Generation failed: malformed response from the model API") from e
