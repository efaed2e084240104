"""Classifier abstraction."""

from __future__ import annotations

import abc

from medassess.models import AnalysisRequest, RawClassification


class Classifier(abc.ABC):
    """Anything that turns an uploaded image into a RawClassification."""

    @abc.abstractmethod
    async def classify(self, request: AnalysisRequest) -> RawClassification:
        """Classify the equipment and its condition."""

    @abc.abstractmethod
    def name(self) -> str:
        """Classifier identifier."""

    def model_name(self) -> str:
        """Backing model, for status reporting."""
        return self.name()

    def is_available(self) -> bool:
        """True if the classifier can be used right now."""
        return True

    async def close(self) -> None:
        """Release held resources (optional override)."""
