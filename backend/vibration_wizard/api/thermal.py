"""
Mission-representative thermal cycle endpoint.
"""
from fastapi import APIRouter, Depends, HTTPException, status
import logging

from vibration_wizard.config import Settings, get_settings
from vibration_wizard.core.thermal import build_mission_representative_thermal_cycle
from vibration_wizard.schemas.thermal import ThermalCycleRequest, ThermalCycleResponse


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/thermal", tags=["thermal"])


@router.post("/cycle", response_model=ThermalCycleResponse)
async def build_cycle(
    request: ThermalCycleRequest,
    settings: Settings = Depends(get_settings)
):
    """
    Compress the mission thermal exposure into the test duration.

    Each state gets a share of one representative cycle proportional to its
    field hours; the cycle is repeated to fill the test.
    """
    try:
        cycle = build_mission_representative_thermal_cycle(
            [s.to_domain() for s in request.states],
            request.t_test_h,
            request.min_cycles if request.min_cycles is not None else settings.thermal_min_cycles,
            request.min_segment_min if request.min_segment_min is not None else settings.thermal_min_segment_min,
        )
        return ThermalCycleResponse.from_domain(cycle)
    except Exception as e:
        logger.error(f"Error building thermal cycle: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Thermal cycle synthesis failed: {str(e)}"
        )
