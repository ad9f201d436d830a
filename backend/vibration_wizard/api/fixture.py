"""
Fixture feasibility endpoint.
"""
from fastapi import APIRouter, HTTPException, status
import logging

from vibration_wizard.core.fixture import evaluate_fixture
from vibration_wizard.core.types import DamageBand
from vibration_wizard.schemas.fixture import FixtureEvaluationResponse, FixtureRequest


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fixture", tags=["fixture"])


@router.post("/evaluate", response_model=FixtureEvaluationResponse)
async def evaluate(request: FixtureRequest):
    """
    Derive fixture frequency, mass and stiffness targets for a DUT.

    Implausible inputs are reported as Critical warnings rather than rejected.
    """
    try:
        bands = [DamageBand(**b.model_dump()) for b in request.damage_bands]
        evaluation = evaluate_fixture(request.dut.to_domain(), bands)
        return FixtureEvaluationResponse.model_validate(evaluation)
    except Exception as e:
        logger.error(f"Error evaluating fixture: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Fixture evaluation failed: {str(e)}"
        )
