"""Analysis pipeline — vision model first, heuristic fallback, then assembly."""

from __future__ import annotations

import logging
import time

from medassess.assembler import assemble
from medassess.classifiers.base import Classifier
from medassess.errors import MalformedResponse, ModelUnavailable, NoInputProvided
from medassess.models import AnalysisRequest, AnalysisResult, RawClassification
from medassess.observability.metrics import MetricsCollector

logger = logging.getLogger(__name__)


class AnalysisPipeline:
    """Runs one upload through the preferred classifier and the assembler.

    ``ModelUnavailable`` and ``MalformedResponse`` from the vision client are
    downgraded to a heuristic result and never reach the caller. The model call
    is not retried. Anything else propagates.
    """

    def __init__(
        self,
        vision: Classifier,
        heuristic: Classifier,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.vision = vision
        self.heuristic = heuristic
        self.metrics = metrics or MetricsCollector()

    @property
    def model_configured(self) -> bool:
        return self.vision.is_available()

    @property
    def model_name(self) -> str:
        return self.vision.model_name()

    async def analyze(self, request: AnalysisRequest | None) -> AnalysisResult:
        if request is None or not request.data:
            raise NoInputProvided("No image file provided")

        start = time.monotonic()
        logger.info("Analyzing %s (%d bytes)", request.filename, request.size)

        classification = await self.classify(request)
        result = assemble(classification)

        latency_ms = int((time.monotonic() - start) * 1000)
        self.metrics.record_analysis(classification.source.value, latency_ms)
        logger.info(
            "Analysis done: source=%s type=%s condition=%s latency=%dms",
            classification.source.value, classification.equipment,
            classification.condition.value, latency_ms,
        )
        return result

    async def classify(self, request: AnalysisRequest) -> RawClassification:
        if not self.vision.is_available():
            logger.info("No valid model credential, using %s classifier", self.heuristic.name())
            self.metrics.record_fallback("not_configured")
            return await self.heuristic.classify(request)

        try:
            return await self.vision.classify(request)
        except ModelUnavailable as e:
            logger.warning("Vision model unavailable, falling back to heuristic: %s", e)
            self.metrics.record_fallback("model_unavailable")
        except MalformedResponse as e:
            logger.warning("Vision model response malformed, falling back to heuristic: %s", e)
            self.metrics.record_fallback("malformed_response")
        return await self.heuristic.classify(request)

    async def close(self) -> None:
        await self.vision.close()
        await self.heuristic.close()
