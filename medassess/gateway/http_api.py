"""HTTP REST API — image upload in, condition assessment out."""

from __future__ import annotations

import logging

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import JSONResponse

from medassess.errors import NoInputProvided
from medassess.gateway.uploads import UploadRejected, stored_upload
from medassess.models import AnalysisRequest, AnalysisResult
from medassess.observability.health import service_status
from medassess.pipeline import AnalysisPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])

DEFAULT_MAX_BYTES = 10 * 1024 * 1024

# The pipeline is injected at app startup
_pipeline: AnalysisPipeline | None = None
_max_bytes = DEFAULT_MAX_BYTES
_upload_dir = ""


def set_pipeline(pipeline: AnalysisPipeline, max_bytes: int = DEFAULT_MAX_BYTES, upload_dir: str = "") -> None:
    global _pipeline, _max_bytes, _upload_dir
    _pipeline = pipeline
    _max_bytes = max_bytes
    _upload_dir = upload_dir


def _error(status_code: int, error: str, message: str | None = None) -> JSONResponse:
    body = {"error": error}
    if message is not None:
        body["message"] = message
    return JSONResponse(status_code=status_code, content=body)


@router.post("/analyze-equipment", response_model=AnalysisResult, response_model_by_alias=True)
async def analyze_equipment(image: UploadFile | None = File(None)):
    if not _pipeline:
        return _error(503, "Analyzer not initialized")

    try:
        if image is None:
            return await _pipeline.analyze(None)

        async with stored_upload(image, _max_bytes, _upload_dir) as stored:
            logger.info("Processing image: %s", stored.filename)
            request = AnalysisRequest.from_bytes(stored.read(), stored.filename, stored.mime_type)
            return await _pipeline.analyze(request)
    except NoInputProvided as e:
        return _error(400, str(e))
    except UploadRejected as e:
        return _error(e.status_code, str(e))
    except Exception as e:
        logger.exception("Analysis endpoint error")
        return _error(500, "Analysis failed", str(e))


@router.get("/health")
async def health():
    if not _pipeline:
        return _error(503, "Analyzer not initialized")
    return service_status(_pipeline)
