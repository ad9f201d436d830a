"""
Reliability demonstration endpoints.

Provides endpoints for:
- Minimum sample size for a reliability/confidence target
- Confidence achieved by a test
- Reliability demonstrated by a test
- Confidence-versus-sample-size curve
"""
from fastapi import APIRouter, Depends, HTTPException, status
import logging

from vibration_wizard.config import Settings, get_settings
from vibration_wizard.core.reliability_demo import (
    achieved_confidence,
    confidence_curve,
    plan_sample_size,
    solve_demonstrated_reliability,
)
from vibration_wizard.schemas.reliability import (
    ConfidenceCurveRequest,
    ConfidenceCurveResponse,
    ConfidenceRequest,
    ConfidenceResponse,
    CurvePoint,
    DemonstratedReliabilityRequest,
    DemonstratedReliabilityResponse,
    ReliabilityDemoSchema,
    SampleSizeResponse,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reliability", tags=["reliability"])


@router.post("/sample-size", response_model=SampleSizeResponse)
async def sample_size(
    request: ReliabilityDemoSchema,
    settings: Settings = Depends(get_settings)
):
    """
    Minimum units to test so that at most ``c_allowed`` failures demonstrate
    ``r_target`` at confidence ``cl``.
    """
    try:
        return SampleSizeResponse.model_validate(
            plan_sample_size(request.to_domain(), settings.sample_size_cap)
        )
    except Exception as e:
        logger.error(f"Error solving sample size: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Sample size solve failed: {str(e)}"
        )


@router.post("/confidence", response_model=ConfidenceResponse)
async def confidence(request: ConfidenceRequest):
    """Confidence demonstrated by ``n`` units with at most ``c_allowed`` failures."""
    return ConfidenceResponse(
        n=request.n,
        c_allowed=request.c_allowed,
        r_target=request.r_target,
        confidence=achieved_confidence(request.n, request.c_allowed, request.r_target),
    )


@router.post("/reliability", response_model=DemonstratedReliabilityResponse)
async def demonstrated_reliability(request: DemonstratedReliabilityRequest):
    """Reliability demonstrated at confidence ``cl``; null when not solvable."""
    try:
        return DemonstratedReliabilityResponse(
            n=request.n,
            c_allowed=request.c_allowed,
            cl=request.cl,
            reliability=solve_demonstrated_reliability(request.n, request.c_allowed, request.cl),
        )
    except Exception as e:
        logger.error(f"Error solving demonstrated reliability: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Reliability solve failed: {str(e)}"
        )


@router.post("/curve", response_model=ConfidenceCurveResponse)
async def curve(request: ConfidenceCurveRequest):
    points = confidence_curve(
        request.c_allowed, request.r_target, request.n_center, request.spread, request.max_points
    )
    return ConfidenceCurveResponse(points=[CurvePoint(n=n, confidence=c) for n, c in points])
