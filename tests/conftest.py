"""Shared test doubles: fake Gemini endpoints (httpx.MockTransport) and a stub classifier."""

from __future__ import annotations

import json

import httpx
import pytest

from medassess.classifiers.base import Classifier
from medassess.classifiers.gemini import GeminiVisionClassifier
from medassess.models import AnalysisRequest, RawClassification


def gemini_reply(text: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        json={"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]},
    )


def make_classifier(handler, api_key: str = "test-key", timeout: float = 5.0) -> GeminiVisionClassifier:
    return GeminiVisionClassifier(
        api_key,
        api_url="https://gemini.test/v1",
        timeout=timeout,
        transport=httpx.MockTransport(handler),
    )


class RecordingHandler:
    """MockTransport handler that remembers every request it served."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    @property
    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def jpeg_bytes() -> bytes:
    return b"\xff\xd8\xff\xe0" + b"\x00" * 2048 + b"\xff\xd9"


class StubVision(Classifier):
    """Vision classifier double returning (or raising) a fixed outcome."""

    def __init__(self, outcome, available: bool = True) -> None:
        self.outcome = outcome
        self.available = available
        self.calls = 0

    async def classify(self, request: AnalysisRequest) -> RawClassification:
        self.calls += 1
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return self.outcome

    def name(self) -> str:
        return "stub"

    def is_available(self) -> bool:
        return self.available
