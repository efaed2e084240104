"""Read-only status object for the health endpoint."""

from __future__ import annotations

from datetime import datetime, timezone

from medassess.pipeline import AnalysisPipeline


def service_status(pipeline: AnalysisPipeline) -> dict:
    configured = pipeline.model_configured
    return {
        "status": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "modelConfigured": configured,
        "model": pipeline.model_name,
        "apiStatus": (
            f"Google Gemini AI ({pipeline.model_name}) - Configured"
            if configured else "Google Gemini AI - Not configured, using demo analysis"
        ),
    }
