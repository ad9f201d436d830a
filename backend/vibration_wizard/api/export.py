"""
Export endpoints for vibration test plans.

Provides endpoints for:
- PSD playlist CSV (every resolved point of every mission state)
- Test PSD CSV
- JSON snapshot of inputs and results
- Printable fixture requirements page
- Excel workbook with charts

Each export rebuilds the plan from the request. While the fixture check
reports Critical warnings, export needs an acknowledgment with a reason;
otherwise the request is refused with HTTP 409.
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
import logging

from vibration_wizard.api.deps import get_template_library
from vibration_wizard.api.plan import plan_from_request
from vibration_wizard.config import Settings, get_settings
from vibration_wizard.core.export import (
    ExcelGenerator,
    ExportBlockedError,
    build_fixture_html,
    build_playlist_csv,
    build_psd_csv,
    build_snapshot,
    build_snapshot_json,
    ensure_export_allowed,
)
from vibration_wizard.core.export.artifacts import (
    FIXTURE_HTML_FILENAME,
    PLAYLIST_FILENAME,
    SNAPSHOT_FILENAME,
    TEST_PSD_FILENAME,
    WORKBOOK_FILENAME,
)
from vibration_wizard.core.export.excel_generator import ExcelConfig
from vibration_wizard.core.planner import VibrationPlan
from vibration_wizard.core.psd import PsdTemplateLibrary
from vibration_wizard.schemas.export import ExportRequest


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/export", tags=["export"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _attachment(content, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


def _gated_plan(
    request: ExportRequest,
    library: PsdTemplateLibrary,
    settings: Settings
) -> VibrationPlan:
    plan = plan_from_request(request, library, settings)
    warnings = plan.fixture.warnings if plan.fixture is not None else ()
    try:
        ensure_export_allowed(warnings, request.acknowledgment_domain(), settings.ack_min_reason_length)
    except ExportBlockedError as e:
        logger.warning(f"Export blocked for '{plan.profile.name}': {e}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if request.acknowledgment is not None and plan.has_critical_warnings:
        logger.info(
            f"Critical fixture warnings acknowledged for '{plan.profile.name}': "
            f"{request.acknowledgment.reason.strip()}"
        )
    return plan


def _export_failed(kind: str, e: Exception) -> HTTPException:
    logger.error(f"Error exporting {kind}: {e}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"{kind} export failed: {str(e)}"
    )


@router.post("/csv/playlist")
async def export_playlist_csv(
    request: ExportRequest,
    library: PsdTemplateLibrary = Depends(get_template_library),
    settings: Settings = Depends(get_settings)
) -> Response:
    """Export ``state,f_hz,g2_per_hz`` rows for every mission state."""
    try:
        plan = _gated_plan(request, library, settings)
        content = build_playlist_csv(plan.profile.states, library)
        return _attachment(content, "text/csv", PLAYLIST_FILENAME)
    except HTTPException:
        raise
    except Exception as e:
        raise _export_failed("Playlist CSV", e)


@router.post("/csv/test-psd")
async def export_test_psd_csv(
    request: ExportRequest,
    library: PsdTemplateLibrary = Depends(get_template_library),
    settings: Settings = Depends(get_settings)
) -> Response:
    """Export the equivalent test PSD as ``f_hz,g2_per_hz``."""
    try:
        plan = _gated_plan(request, library, settings)
        content = build_psd_csv(plan.equivalency.test_psd)
        return _attachment(content, "text/csv", TEST_PSD_FILENAME)
    except HTTPException:
        raise
    except Exception as e:
        raise _export_failed("Test PSD CSV", e)


@router.post("/json")
async def export_snapshot_json(
    request: ExportRequest,
    library: PsdTemplateLibrary = Depends(get_template_library),
    settings: Settings = Depends(get_settings)
) -> Response:
    """Export the full snapshot: profile, accel, reliability, sampleSize, equivalency, fixture."""
    try:
        plan = _gated_plan(request, library, settings)
        snapshot = build_snapshot(
            plan.profile,
            plan.accel,
            plan.reliability,
            plan.sample_plan.sample_size,
            plan.equivalency,
            plan.fixture,
        )
        return _attachment(build_snapshot_json(snapshot), "application/json", SNAPSHOT_FILENAME)
    except HTTPException:
        raise
    except Exception as e:
        raise _export_failed("JSON", e)


@router.post("/html/fixture")
async def export_fixture_html(
    request: ExportRequest,
    library: PsdTemplateLibrary = Depends(get_template_library),
    settings: Settings = Depends(get_settings)
) -> Response:
    """Export a printable fixture requirements page. Requires DUT inputs."""
    try:
        if request.dut is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="DUT inputs are required for the fixture export"
            )
        plan = _gated_plan(request, library, settings)
        content = build_fixture_html(plan.fixture, title=request.title or "Fixture Requirements")
        return _attachment(content, "text/html", FIXTURE_HTML_FILENAME)
    except HTTPException:
        raise
    except Exception as e:
        raise _export_failed("Fixture HTML", e)


@router.post("/excel")
async def export_excel(
    request: ExportRequest,
    library: PsdTemplateLibrary = Depends(get_template_library),
    settings: Settings = Depends(get_settings)
) -> Response:
    """
    Export the plan as an Excel workbook.

    Sheets: Summary, Mission Profile, Test PSD, Thermal Cycle and, when DUT
    inputs are given, Fixture.
    """
    try:
        plan = _gated_plan(request, library, settings)
        config = ExcelConfig(title=request.title) if request.title else ExcelConfig()
        content = ExcelGenerator(config=config).generate_vibration_workbook(plan)
        return Response(
            content=content,
            media_type=XLSX_MEDIA_TYPE,
            headers={
                "Content-Disposition": f"attachment; filename={WORKBOOK_FILENAME}",
                "Content-Length": str(len(content))
            }
        )
    except HTTPException:
        raise
    except Exception as e:
        raise _export_failed("Excel", e)
