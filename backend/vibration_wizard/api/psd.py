"""
PSD endpoints.

Provides endpoints for:
- Listing library templates
- Resolving template references and uploaded tables into points
- Band integration and gRMS
- 1/N-octave resampling with energy check
- Damage-band scoring
"""
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from typing import List
import logging
import math

from vibration_wizard.api.deps import get_template_library
from vibration_wizard.config import Settings, get_settings
from vibration_wizard.core.banding import build_bands, top_damage_bands
from vibration_wizard.core.octave import grms, integrate_psd, integrate_psd_over_band, psd_to_octave
from vibration_wizard.core.psd import (
    PsdTemplateLibrary,
    UnknownTemplateError,
    normalize_psd,
    parse_psd_csv,
    resolve_psd,
)
from vibration_wizard.schemas.psd import (
    BandsRequest,
    BandsResponse,
    DamageBandSchema,
    IntegrateRequest,
    IntegrateResponse,
    OctaveRequest,
    OctaveResponse,
    PsdCurveResponse,
    PsdPointSchema,
    PsdTemplateResponse,
    PsdUploadResponse,
    ResolvePsdRequest,
    points_to_domain,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/psd", tags=["psd"])


def _curve(points) -> dict:
    return {
        "points": [PsdPointSchema.model_validate(p) for p in points],
        "area": integrate_psd(points),
        "grms": grms(points),
    }


@router.get("/templates", response_model=List[PsdTemplateResponse])
async def list_templates(library: PsdTemplateLibrary = Depends(get_template_library)):
    """List library PSD templates with their overall gRMS."""
    return [
        PsdTemplateResponse(
            id=t.id,
            name=t.name,
            points=[PsdPointSchema.model_validate(p) for p in t.points],
            grms=grms(t.points),
        )
        for t in library
    ]


@router.post("/resolve", response_model=PsdCurveResponse)
async def resolve_definition(
    request: ResolvePsdRequest,
    library: PsdTemplateLibrary = Depends(get_template_library)
):
    """Resolve a template reference or CSV definition into PSD points."""
    try:
        points = resolve_psd(request.definition.to_domain(), library)
        return PsdCurveResponse(**_curve(points))
    except UnknownTemplateError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(f"Error resolving PSD: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"PSD resolution failed: {str(e)}"
        )


@router.post("/upload", response_model=PsdUploadResponse)
async def upload_psd(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings)
):
    """
    Parse an uploaded PSD table.

    Expected columns: frequency in Hz, then density in g²/Hz. The separator
    (comma, tab or semicolon) is sniffed from the first rows and an optional
    header row is skipped.
    Invalid rows are dropped.
    """
    try:
        content = await file.read()
        if len(content) > settings.max_upload_size:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File exceeds {settings.max_upload_size} bytes"
            )

        points = parse_psd_csv(content.decode("utf-8-sig", errors="replace"))
        if not points:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No valid PSD rows"
            )

        logger.info(f"Parsed {len(points)} PSD rows from '{file.filename}'")
        return PsdUploadResponse(name=file.filename or "upload.csv", rows=len(points), **_curve(points))

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error parsing PSD upload: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"PSD upload failed: {str(e)}"
        )


@router.post("/integrate", response_model=IntegrateResponse)
async def integrate_band(request: IntegrateRequest):
    """Area and gRMS of a PSD over ``[f1, f2]`` using log-log interpolation."""
    try:
        points = normalize_psd(points_to_domain(request.points))
        if len(points) < 2:
            raise ValueError("At least 2 distinct PSD points are required")

        f1 = request.f1 if request.f1 is not None else points[0].f_hz
        f2 = request.f2 if request.f2 is not None else points[-1].f_hz
        area = integrate_psd_over_band(points, f1, f2)
        return IntegrateResponse(f1=f1, f2=f2, area=area, grms=math.sqrt(area) if area > 0 else 0.0)

    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error integrating PSD: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Integration failed: {str(e)}"
        )


@router.post("/octave", response_model=OctaveResponse)
async def octave_resample(
    request: OctaveRequest,
    settings: Settings = Depends(get_settings)
):
    """
    Resample a PSD onto 1/N-octave bands.

    A warning is returned when the band gRMS deviates from the raw curve by
    more than the tolerance.
    """
    try:
        tolerance = request.tolerance if request.tolerance is not None else settings.octave_tolerance
        result = psd_to_octave(points_to_domain(request.points), request.fraction, request.ref_hz, tolerance)

        response = OctaveResponse.model_validate(result)
        if result.exceeds_tolerance:
            response.warning = (
                f"1/{request.fraction}-octave gRMS deviates {result.deviation * 100:.1f}% "
                f"from the raw curve (limit {tolerance * 100:.1f}%)"
            )
        return response

    except Exception as e:
        logger.error(f"Error computing octave bands: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Octave resampling failed: {str(e)}"
        )


@router.post("/bands", response_model=BandsResponse)
async def damage_bands(request: BandsRequest):
    """Score log-spaced bands by energy and frequency weight."""
    try:
        points = points_to_domain(request.points)
        bands = build_bands(points, request.band_count)
        top = top_damage_bands(points, request.top, request.band_count)
        return BandsResponse(
            bands=[DamageBandSchema.model_validate(b) for b in bands],
            top_bands=[DamageBandSchema.model_validate(b) for b in top],
        )
    except Exception as e:
        logger.error(f"Error scoring damage bands: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Band scoring failed: {str(e)}"
        )
