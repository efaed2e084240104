"""Pipeline error taxonomy."""

from __future__ import annotations


class AnalysisError(Exception):
    """Base class for every error raised by the analysis pipeline."""


class ModelUnavailable(AnalysisError):
    """The vision model could not be reached: network, auth, timeout or non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(AnalysisError):
    """The model answered, but not with the expected content envelope."""


class NoInputProvided(AnalysisError):
    """No image was given to the pipeline."""


class InternalAssemblyError(AnalysisError):
    """A classification reached the assembler without its required fields."""
