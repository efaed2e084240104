"""FastAPI application factory — wires everything together."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from medassess import __version__
from medassess.classifiers.gemini import GeminiVisionClassifier
from medassess.classifiers.heuristic import HeuristicClassifier
from medassess.config import MedAssessConfig
from medassess.gateway.http_api import router as api_router, set_pipeline
from medassess.observability.metrics import MetricsCollector
from medassess.pipeline import AnalysisPipeline

logger = logging.getLogger(__name__)


def build_pipeline(config: MedAssessConfig, metrics: MetricsCollector | None = None) -> AnalysisPipeline:
    vision = GeminiVisionClassifier(
        config.gemini_api_key,
        model=config.gemini_model,
        api_url=config.gemini_api_url,
        timeout=config.gemini_timeout_seconds,
        temperature=config.gemini_temperature,
        max_output_tokens=config.gemini_max_output_tokens,
    )
    return AnalysisPipeline(vision, HeuristicClassifier(), metrics)


def create_app(config: MedAssessConfig | None = None, pipeline: AnalysisPipeline | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    if config is None:
        config = MedAssessConfig.from_yaml()

    metrics = pipeline.metrics if pipeline else MetricsCollector()
    if pipeline is None:
        pipeline = build_pipeline(config, metrics)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("MedAssess %s started on %s:%d", __version__, config.host, config.port)
        if pipeline.model_configured:
            logger.info("Vision model: %s configured and ready", pipeline.model_name)
        else:
            logger.warning("Vision model not configured, using demo analysis")
        yield
        await pipeline.close()

    app = FastAPI(title="MedAssess", version=__version__, docs_url="/docs", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware, allow_origins=config.cors_origins, allow_methods=["*"], allow_headers=["*"],
    )

    # -- Wire HTTP API --
    set_pipeline(pipeline, max_bytes=config.upload_max_bytes, upload_dir=config.upload_dir)
    app.include_router(api_router)

    @app.get("/metrics")
    async def get_metrics():
        return metrics.summary()

    @app.get("/")
    async def root():
        return {
            "name": "MedAssess",
            "version": __version__,
            "modelConfigured": pipeline.model_configured,
        }

    # Store references for testing
    app.state.config = config
    app.state.pipeline = pipeline
    app.state.metrics = metrics

    return app
