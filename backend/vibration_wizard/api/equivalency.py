"""
Field-to-test vibration equivalency endpoint.
"""
from fastapi import APIRouter, Depends, HTTPException, status
import logging

from vibration_wizard.api.deps import get_template_library
from vibration_wizard.config import Settings, get_settings
from vibration_wizard.core.equivalency import solve_equivalency
from vibration_wizard.core.psd import PsdTemplateLibrary
from vibration_wizard.schemas.equivalency import EquivalencyRequest, EquivalencyResponse


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/equivalency", tags=["equivalency"])


@router.post("/solve", response_model=EquivalencyResponse)
async def solve(
    request: EquivalencyRequest,
    library: PsdTemplateLibrary = Depends(get_template_library),
    settings: Settings = Depends(get_settings)
):
    """
    Solve the equivalent accelerated test.

    The field PSDs are merged into one damage-equivalent spectrum and
    the PSD multiplier (solve_for=k_scale), the test duration
    (solve_for=t_test) or both together (solve_for=both) are solved so the
    test reproduces the field damage.
    States with unknown templates or zero duration are skipped and reported
    in ``notes``.
    """
    try:
        states = [s.to_domain() for s in request.states]
        result = solve_equivalency(states, request.accel.to_domain(settings), library)
        return EquivalencyResponse.model_validate(result)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error solving equivalency: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Equivalency solve failed: {str(e)}"
        )
