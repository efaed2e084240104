"""Gemini vision client — equipment classification from a photo via the REST API."""

from __future__ import annotations

import asyncio
import base64
import logging
import time

import httpx

from medassess.classifiers.base import Classifier
from medassess.classifiers.parsing import parse_model_text
from medassess.errors import MalformedResponse, ModelUnavailable
from medassess.models import AnalysisRequest, RawClassification

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://generativelanguage.googleapis.com/v1"
DEFAULT_MODEL = "gemini-2.0-flash"
PLACEHOLDER_API_KEY = "your_actual_gemini_api_key_here"

CLASSIFY_PROMPT = """You are a medical equipment expert. Analyze this image of medical equipment and provide a detailed assessment.

IMPORTANT: Respond ONLY with valid JSON in this exact format:
{
  "equipment": "specific equipment name",
  "condition": "excellent/good/fair/poor",
  "description": "detailed condition description",
  "visibleIssues": ["issue1", "issue2", "issue3"],
  "confidence": "high/medium/low"
}

Equipment types to consider: microscope, stethoscope, defibrillator, ultrasound machine, patient monitor, wheelchair, hospital bed, surgical tools, medical cart, etc.

Condition guidelines:
- Excellent: Like new, minimal wear, fully functional
- Good: Minor wear, fully operational, some cosmetic issues
- Fair: Significant wear, may need maintenance, some functional limitations
- Poor: Major issues, requires repair/replacement, safety concerns

Be specific about what you see in the image."""


class GeminiVisionClassifier(Classifier):
    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 45.0,
        temperature: float = 0.1,
        max_output_tokens: int = 1000,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if not self._client:
            self._client = httpx.AsyncClient(
                base_url=self._api_url, timeout=self._timeout, transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def build_request_body(self, image: bytes, mime_type: str = "image/jpeg") -> dict:
        return {
            "contents": [
                {
                    "parts": [
                        {"text": CLASSIFY_PROMPT},
                        {
                            "inline_data": {
                                "mime_type": mime_type or "image/jpeg",
                                "data": base64.b64encode(image).decode("ascii"),
                            }
                        },
                    ]
                }
            ],
            "generationConfig": {
                "temperature": self._temperature,
                "maxOutputTokens": self._max_output_tokens,
            },
        }

    async def classify(self, request: AnalysisRequest) -> RawClassification:
        text = await self.generate(request.data, request.mime_type)
        return parse_model_text(text)

    async def generate(self, image: bytes, mime_type: str = "image/jpeg") -> str:
        """Send the image and return the model's raw text."""
        client = self._get_client()
        body = self.build_request_body(image, mime_type)
        start = time.monotonic()
        logger.info("Sending %d-byte image to %s", len(image), self._model)

        try:
            resp = await asyncio.wait_for(
                client.post(
                    f"/models/{self._model}:generateContent",
                    params={"key": self._api_key},
                    json=body,
                ),
                timeout=self._timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise ModelUnavailable(f"{self._model} timed out after {self._timeout:.0f}s") from e
        except httpx.HTTPError as e:
            raise ModelUnavailable(f"{self._model} request failed: {e}") from e

        if not resp.is_success:
            raise ModelUnavailable(
                f"{self._model} returned HTTP {resp.status_code}", status_code=resp.status_code,
            )

        text = _extract_text(resp)
        logger.info(
            "Model response: model=%s chars=%d latency=%dms",
            self._model, len(text), int((time.monotonic() - start) * 1000),
        )
        logger.debug("Raw model text: %s", text)
        return text

    def name(self) -> str:
        return "gemini"

    def model_name(self) -> str:
        return self._model

    def is_available(self) -> bool:
        return bool(self._api_key) and self._api_key != PLACEHOLDER_API_KEY


def _extract_text(resp: httpx.Response) -> str:
    """Pull ``candidates[0].content.parts[0].text`` out of a generateContent reply."""
    try:
        payload = resp.json()
    except ValueError as e:
        raise MalformedResponse("Model response body is not JSON") from e

    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponse("Invalid response envelope from model") from e

    if not isinstance(text, str):
        raise MalformedResponse("Model response text is not a string")
    return text
