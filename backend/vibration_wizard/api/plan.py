"""
Test-plan endpoint.
"""
from fastapi import APIRouter, Depends, HTTPException, status
import logging

from vibration_wizard.api.deps import get_template_library
from vibration_wizard.config import Settings, get_settings
from vibration_wizard.core.planner import VibrationPlan, build_vibration_plan
from vibration_wizard.core.psd import PsdTemplateLibrary
from vibration_wizard.schemas.plan import PlanRequest, PlanResponse


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/plan", tags=["plan"])


def plan_from_request(
    request: PlanRequest,
    library: PsdTemplateLibrary,
    settings: Settings
) -> VibrationPlan:
    """Build the domain plan for a request, filling engine defaults from settings."""
    profile = request.profile.to_domain()
    if request.rescale_to_intended_life:
        profile = profile.rescaled_to_intended_life()

    return build_vibration_plan(
        profile,
        request.accel.to_domain(settings),
        request.reliability.to_domain(),
        library,
        dut=request.dut.to_domain() if request.dut is not None else None,
        octave_fraction=request.octave_fraction or settings.octave_fraction,
        octave_tolerance=settings.octave_tolerance,
        sample_size_cap=settings.sample_size_cap,
        min_cycles=settings.thermal_min_cycles,
        min_segment_min=settings.thermal_min_segment_min,
    )


@router.post("", response_model=PlanResponse)
async def create_plan(
    request: PlanRequest,
    library: PsdTemplateLibrary = Depends(get_template_library),
    settings: Settings = Depends(get_settings)
):
    """
    Build a complete accelerated vibration test plan.

    Returns the equivalent test PSD and duration, the thermal cycle laid out
    over the test duration, the sample size and acceptance rule, the damage
    bands of the test PSD and, when a DUT is given, the fixture evaluation.
    """
    try:
        plan = plan_from_request(request, library, settings)
        return PlanResponse.from_domain(plan)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error building plan: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Plan build failed: {str(e)}"
        )
