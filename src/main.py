"""
News Verification Service
Two-stage pipeline: heuristic pre-filter, then cross-referenced compartment analysis
"""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
import logging
import os
import time
from datetime import datetime, timezone
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load environment variables early so Settings picks them up
load_dotenv()

from newsverify.config import get_settings
from newsverify.errors import (
    InputValidationError,
    PaymentRequiredError,
    RateLimitError,
    UpstreamError,
)
from newsverify.models import AnalysisReport, NewsVerificationResult, Stage1Decision, ViralityAssessment
from newsverify.pipeline import NewsVerificationPipeline
from newsverify.stage1 import first_line


settings = get_settings()

# Logging configuration
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler('logs/newsverify.log') if os.path.exists('logs') else logging.NullHandler()
    ]
)

logger = logging.getLogger(__name__)

VERSION = "1.0.0"
TITLE = "News Verification Service"
DESCRIPTION = "Stage 1 pre-filter and Stage 2 three-compartment news verification"


class Metrics:
    """Track service metrics"""

    def __init__(self):
        self.total_requests = 0
        self.successful_requests = 0
        self.failed_requests = 0
        self.blocked_articles = 0
        self.total_processing_time = 0.0
        self.start_time = time.time()

    def record_request(self, success: bool, processing_time: float):
        """Record request outcome"""
        self.total_requests += 1
        if success:
            self.successful_requests += 1
        else:
            self.failed_requests += 1
        self.total_processing_time += processing_time

    def get_stats(self) -> Dict[str, Any]:
        """Get current metrics"""
        uptime = time.time() - self.start_time
        avg_time = self.total_processing_time / self.total_requests if self.total_requests > 0 else 0

        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "blocked_articles": self.blocked_articles,
            "success_rate": f"{(self.successful_requests / self.total_requests * 100):.1f}%" if self.total_requests > 0 else "N/A",
            "average_processing_time": f"{avg_time:.2f}s",
            "uptime_seconds": int(uptime)
        }


metrics = Metrics()
pipeline = NewsVerificationPipeline()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info("=" * 60)
    logger.info(f"Starting {TITLE} v{VERSION}")
    logger.info("=" * 60)
    logger.info(f"  LLM gateway: {settings.llm_gateway_url} ({settings.llm_model})")
    logger.info(f"  LLM key configured: {bool(settings.llm_api_key)}")
    logger.info(f"  News search: {settings.news_api_url}")
    logger.info(f"  News key configured: {bool(settings.news_api_key)}")
    logger.info("Service ready")

    yield

    logger.info("Shutdown complete")


app = FastAPI(
    title=TITLE,
    version=VERSION,
    description=DESCRIPTION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(InputValidationError)
async def input_validation_handler(request: Request, exc: InputValidationError):
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))


@app.exception_handler(RateLimitError)
async def rate_limit_handler(request: Request, exc: RateLimitError):
    logger.warning(f"Rate limited on {request.url.path}: {exc}")
    return _error_response(status.HTTP_429_TOO_MANY_REQUESTS, str(exc))


@app.exception_handler(PaymentRequiredError)
async def payment_required_handler(request: Request, exc: PaymentRequiredError):
    logger.warning(f"Payment required on {request.url.path}: {exc}")
    return _error_response(status.HTTP_402_PAYMENT_REQUIRED, str(exc))


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    logger.error(f"Upstream failure on {request.url.path}: {exc}")
    return _error_response(status.HTTP_502_BAD_GATEWAY, str(exc))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc) if settings.debug else "An error occurred"
        }
    )


# Request models
class ArticleRequest(BaseModel):
    """Article submitted for verification"""

    content: str = Field("", max_length=200000, description="Article text; the first line is the headline")
    source_url: Optional[str] = Field(None, description="Source URL if available")


class ViralityRequest(BaseModel):
    headline: Optional[str] = Field(None, description="Headline; defaults to the first line of content")
    content: str = Field("", max_length=200000)


@app.get("/")
async def root():
    """Root endpoint with service information"""
    return {
        "service": TITLE,
        "version": VERSION,
        "status": "operational",
        "endpoints": {
            "stage1": "POST /stage1",
            "virality": "POST /stage1/virality",
            "stage2": "POST /stage2",
            "analyze": "POST /analyze",
            "health": "GET /health",
            "metrics": "GET /metrics"
        }
    }


@app.get("/health")
async def health_check():
    """Configuration-level health check; collaborators are not probed"""
    llm_ready = bool(settings.llm_api_key)
    news_ready = bool(settings.news_api_key)
    return {
        "status": "healthy" if llm_ready and news_ready else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": {
            "api": "healthy",
            "stage1": "healthy",
            "llm_gateway": "configured" if llm_ready else "missing-key",
            "news_search": "configured" if news_ready else "missing-key"
        },
        "metrics": metrics.get_stats()
    }


@app.get("/metrics")
async def get_metrics():
    """Get service metrics"""
    return {
        "service": TITLE,
        "version": VERSION,
        "metrics": metrics.get_stats()
    }


@app.post("/stage1", response_model=Stage1Decision)
async def stage1(request_body: ArticleRequest):
    """Cheap authenticity and quality pre-filter"""
    start_time = time.time()
    try:
        decision = pipeline.stage1(request_body.content, request_body.source_url)
    except InputValidationError:
        metrics.record_request(False, time.time() - start_time)
        raise
    if not decision.ready_for_stage2:
        metrics.blocked_articles += 1
    metrics.record_request(True, time.time() - start_time)
    return decision


@app.post("/stage1/virality", response_model=ViralityAssessment)
async def stage1_virality(request_body: ViralityRequest):
    """LLM assessment of the article's viral potential"""
    if not request_body.content.strip():
        raise InputValidationError("News content is required")
    headline = request_body.headline or first_line(request_body.content)
    return await pipeline.engine.llm.assess_virality(headline, request_body.content)


@app.post("/stage2", response_model=NewsVerificationResult)
async def stage2(request_body: ArticleRequest):
    """Full three-compartment verification; callers run /stage1 first"""
    start_time = time.time()
    try:
        result = await pipeline.stage2(request_body.content, request_body.source_url)
    except Exception:
        metrics.record_request(False, time.time() - start_time)
        raise
    metrics.record_request(True, time.time() - start_time)
    return result


@app.post("/analyze", response_model=AnalysisReport)
async def analyze(request_body: ArticleRequest):
    """Stage 1, then Stage 2 when the article passes"""
    start_time = time.time()
    try:
        report = await pipeline.analyze(request_body.content, request_body.source_url)
    except Exception:
        metrics.record_request(False, time.time() - start_time)
        raise
    if report.stage2 is None:
        metrics.blocked_articles += 1
    metrics.record_request(True, time.time() - start_time)
    logger.info(
        f"Analysis finished: {report.stage1.decision}"
        + (f" -> {report.stage2.overall_verdict} ({report.stage2.overall_score})" if report.stage2 else "")
    )
    return report


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8001")), reload=settings.debug)
