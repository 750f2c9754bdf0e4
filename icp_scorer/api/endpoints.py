"""
FastAPI Endpoints for ICP Lead Scorer
=====================================
RESTful API for ICP configuration and business scoring.

Base URL: http://localhost:8000

Endpoints:
- GET  /                                  - API info
- GET  /api/health                        - Health check
- GET  /api/stats                         - Engine statistics
- GET  /api/icp-configs                   - List ICP configs (seeds defaults)
- GET  /api/icp-configs/{id}              - Get ICP config
- POST /api/icp-configs                   - Create ICP config
- PUT  /api/icp-configs/{id}              - Update ICP config
- POST /api/icp-configs/reset             - Reset ICP configs to defaults
- GET  /api/businesses                    - List businesses
- POST /api/businesses                    - Create or replace a business
- GET  /api/businesses/{id}               - Get business
- POST /api/icp-score/preview             - Score an ad-hoc business, nothing stored
- POST /api/icp-score/bulk-calculate      - Score every stored business
- POST /api/icp-score/{business_id}       - Score one stored business
- POST /api/website-analysis              - Analyze homepage HTML or fetch a website
"""

import logging
from datetime import datetime
from typing import Any, Dict, List

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .. import __version__
from ..models.schemas import (
    Business,
    BusinessScore,
    BulkScoreRequest,
    BulkScoreSummary,
    ICPConfigResponse,
    PreviewRequest,
    ResetResponse,
    ScoreRequest,
    ScoreResult,
    WebsiteAnalysis,
    WebsiteAnalysisRequest,
)
from ..models.icp_config import ICPConfig
from ..engine import ICPScoringEngine
from ..exceptions import DuplicateConfigError, NotFoundError, WebsiteFetchError

logger = logging.getLogger(__name__)


# =============================================================================
# FastAPI App Initialization
# =============================================================================

app = FastAPI(
    title="ICP Lead Scorer API",
    description="""
## Ideal-Customer-Profile Scoring for Local Businesses

Scores restaurants, bars and cafés against configurable ICP profiles.

### Features:
- **Weighted Factors**: locations, website, SEO, WhatsApp, reservations,
  direct ordering, geography, delivery and booking categories
- **Website Analysis**: homepage signals extracted automatically
- **Bulk Scoring**: score every stored business in one call

### Quick Start:
1. `GET /api/icp-configs` to install the default profiles
2. `POST /api/businesses` to register a business
3. `POST /api/icp-score/{business_id}` with `{"icp_type": "independent"}`
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - Allow all origins for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Engine Initialization
# =============================================================================

# In-memory storage (replace with database in production)
engine = ICPScoringEngine()


def get_engine() -> ICPScoringEngine:
    return engine


# =============================================================================
# Health & Info Endpoints
# =============================================================================

@app.get("/", tags=["Info"])
async def root():
    """API information and available endpoints"""
    return {
        "service": "ICP Lead Scorer",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "endpoints": {
            "ICP Configs": "GET /api/icp-configs",
            "Score Business": "POST /api/icp-score/{business_id}",
            "Bulk Score": "POST /api/icp-score/bulk-calculate",
            "Preview Score": "POST /api/icp-score/preview",
            "Website Analysis": "POST /api/website-analysis",
            "Health": "GET /api/health",
        },
    }


@app.get("/api/health", tags=["Info"])
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "service": "ICP Lead Scorer",
        "version": __version__,
        "timestamp": datetime.utcnow().isoformat(),
    }


@app.get("/api/stats", tags=["Info"])
async def get_stats():
    """Get engine statistics"""
    return get_engine().get_stats()


# =============================================================================
# ICP Configuration Endpoints
# =============================================================================

@app.get("/api/icp-configs", response_model=List[ICPConfigResponse], tags=["Configuration"])
async def list_configs():
    """List ICP configurations, creating the defaults on first use"""
    configs = get_engine().configs.ensure_defaults()
    return [ICPConfigResponse.from_config(c) for c in configs]


@app.post("/api/icp-configs/reset", response_model=ResetResponse, tags=["Configuration"])
async def reset_configs():
    """Replace all ICP configurations with the defaults"""
    configs = get_engine().configs.reset()
    return ResetResponse(configs=[ICPConfigResponse.from_config(c) for c in configs])


@app.get("/api/icp-configs/{config_id}", response_model=ICPConfigResponse, tags=["Configuration"])
async def get_config(config_id: str):
    """Get an ICP configuration by ID"""
    return ICPConfigResponse.from_config(get_engine().configs.get(config_id))


@app.post("/api/icp-configs", response_model=ICPConfigResponse, tags=["Configuration"])
async def create_config(config: ICPConfig):
    """Create an ICP configuration"""
    created = get_engine().configs.create(config)
    return ICPConfigResponse.from_config(created)


@app.put("/api/icp-configs/{config_id}", response_model=ICPConfigResponse, tags=["Configuration"])
async def update_config(config_id: str, changes: Dict[str, Any] = Body(...)):
    """Update an ICP configuration; factor changes are merged per factor"""
    try:
        updated = get_engine().configs.update(config_id, changes)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False))
    return ICPConfigResponse.from_config(updated)


# =============================================================================
# Business Endpoints
# =============================================================================

@app.get("/api/businesses", response_model=List[Business], tags=["Businesses"])
async def list_businesses():
    return get_engine().businesses.list()


@app.post("/api/businesses", response_model=Business, tags=["Businesses"])
async def upsert_business(business: Business):
    """Create or replace a business. Existing ICP scores are kept unless new ones are sent."""
    return get_engine().businesses.upsert(business)


@app.get("/api/businesses/{business_id}", response_model=Business, tags=["Businesses"])
async def get_business(business_id: str):
    return get_engine().businesses.get(business_id)


# =============================================================================
# Scoring Endpoints
# =============================================================================

@app.post("/api/icp-score/preview", response_model=ScoreResult, tags=["Scoring"])
async def preview_score(request: PreviewRequest):
    """Score an ad-hoc business against an ad-hoc configuration without storing anything"""
    return get_engine().scoring_stage.process(request.business, request.config)


@app.post("/api/icp-score/bulk-calculate", response_model=BulkScoreSummary, tags=["Scoring"])
def bulk_calculate(request: BulkScoreRequest):
    """Score every stored business against one ICP type or both"""
    return get_engine().score_batch(request.icp_type)


@app.post("/api/icp-score/{business_id}", response_model=BusinessScore, tags=["Scoring"])
def score_business(business_id: str, request: ScoreRequest):
    """
    Score one stored business.

    The website is re-analyzed first when the stored analysis is missing
    or older than the configured maximum age (set `refresh_analysis: false`
    to skip this).
    """
    return get_engine().score_business(
        business_id,
        request.icp_type,
        refresh_analysis=request.refresh_analysis,
    )


@app.post("/api/website-analysis", response_model=WebsiteAnalysis, tags=["Scoring"])
def analyze_website(request: WebsiteAnalysisRequest):
    """Analyze raw homepage HTML, or fetch and analyze `website` when no HTML is given"""
    stage = get_engine().website_stage
    if request.html is not None:
        return stage.analyze(request.html, request.website)
    if request.website:
        return stage.fetch_and_analyze(request.website)
    raise HTTPException(status_code=422, detail="Either html or website is required")


# =============================================================================
# Error Handlers
# =============================================================================

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"error": f"{exc.kind} not found", "detail": str(exc)})


@app.exception_handler(DuplicateConfigError)
async def duplicate_handler(request: Request, exc: DuplicateConfigError):
    return JSONResponse(status_code=409, content={"error": "Conflict", "detail": str(exc)})


@app.exception_handler(WebsiteFetchError)
async def fetch_error_handler(request: Request, exc: WebsiteFetchError):
    logger.warning("Website fetch failed: %s", exc)
    return JSONResponse(status_code=502, content={"error": "Website fetch failed", "detail": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "type": type(exc).__name__,
        },
    )
