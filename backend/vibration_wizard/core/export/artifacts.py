"""
Text artifacts for a vibration test plan: CSV, JSON snapshot and printable HTML.

Every export goes through ``ensure_export_allowed``: while the fixture check
reports Critical warnings, export needs an acknowledgment with a written reason.
"""
import csv
import html
import json
import logging
import math
from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from io import StringIO
from typing import Any, Dict, Iterable, Optional, Sequence

from ..psd import PsdTemplateLibrary, UnknownTemplateError, resolve_psd
from ..types import (
    CsvPsd,
    CycleThermal,
    FixtureEvaluation,
    FixtureWarning,
    MissionState,
    PsdPoint,
    SteadyThermal,
    TemplatePsd,
    WarningLevel,
)


logger = logging.getLogger(__name__)

MIN_ACK_REASON_LENGTH = 5

PLAYLIST_FILENAME = "psd_playlist.csv"
TEST_PSD_FILENAME = "psd_test_profile.csv"
SNAPSHOT_FILENAME = "vibration_profile.json"
FIXTURE_HTML_FILENAME = "fixture_requirements.html"
WORKBOOK_FILENAME = "vibration_plan.xlsx"

_VARIANT_KINDS = {
    TemplatePsd: "Template",
    CsvPsd: "Csv",
    SteadyThermal: "Steady",
    CycleThermal: "Cycle",
}


class ExportBlockedError(Exception):
    """Raised when export is attempted with unacknowledged Critical warnings."""
    pass


@dataclass(frozen=True)
class ExportAcknowledgment:
    """User acknowledgment of Critical fixture warnings."""
    acknowledged: bool = False
    reason: str = ""


def is_export_allowed(
    warnings: Iterable[FixtureWarning],
    acknowledgment: Optional[ExportAcknowledgment] = None,
    min_reason_length: int = MIN_ACK_REASON_LENGTH
) -> bool:
    """True when there is no Critical warning or it has been acknowledged with a reason."""
    if not any(w.level == WarningLevel.CRITICAL for w in warnings):
        return True
    if acknowledgment is None or not acknowledgment.acknowledged:
        return False
    return len(acknowledgment.reason.strip()) >= min_reason_length


def ensure_export_allowed(
    warnings: Iterable[FixtureWarning],
    acknowledgment: Optional[ExportAcknowledgment] = None,
    min_reason_length: int = MIN_ACK_REASON_LENGTH
) -> None:
    """Raise ``ExportBlockedError`` unless ``is_export_allowed``."""
    warnings = list(warnings)
    if not is_export_allowed(warnings, acknowledgment, min_reason_length):
        critical = sum(1 for w in warnings if w.level == WarningLevel.CRITICAL)
        raise ExportBlockedError(
            f"{critical} critical fixture warning(s) must be acknowledged with a reason "
            f"of at least {min_reason_length} characters before export"
        )


def _csv_writer(output: StringIO):
    return csv.writer(output, lineterminator="\n")


def build_psd_csv(points: Sequence[PsdPoint]) -> str:
    """``f_hz,g2_per_hz`` table of a PSD."""
    output = StringIO()
    writer = _csv_writer(output)
    writer.writerow(["f_hz", "g2_per_hz"])
    for p in points:
        writer.writerow([p.f_hz, p.g2_per_hz])
    return output.getvalue()


def build_playlist_csv(states: Sequence[MissionState], library: PsdTemplateLibrary) -> str:
    """``state,f_hz,g2_per_hz`` rows for every resolved point of every state.

    States whose template is missing from the library are left out.
    """
    output = StringIO()
    writer = _csv_writer(output)
    writer.writerow(["state", "f_hz", "g2_per_hz"])
    for state in states:
        try:
            points = resolve_psd(state.psd, library)
        except UnknownTemplateError as e:
            logger.warning(f"Playlist export skips state '{state.name}': {e}")
            continue
        for p in points:
            writer.writerow([state.name, p.f_hz, p.g2_per_hz])
    return output.getvalue()


def to_jsonable(obj: Any) -> Any:
    """Convert domain objects into JSON-compatible values.

    Tagged PSD and thermal variants carry a ``kind`` field; non-finite floats
    become ``None``.
    """
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, float):
        return obj if math.isfinite(obj) else None
    if is_dataclass(obj) and not isinstance(obj, type):
        data: Dict[str, Any] = {}
        kind = _VARIANT_KINDS.get(type(obj))
        if kind is not None:
            data["kind"] = kind
        for f in fields(obj):
            data[f.name] = to_jsonable(getattr(obj, f.name))
        return data
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    if hasattr(obj, "tolist"):
        return to_jsonable(obj.tolist())
    return obj


def build_snapshot(
    profile: Any,
    accel: Any,
    reliability: Any,
    sample_size: int,
    equivalency: Any,
    fixture: Optional[FixtureEvaluation]
) -> Dict[str, Any]:
    """Full snapshot of a computed plan with stable top-level keys."""
    return {
        "profile": to_jsonable(profile),
        "accel": to_jsonable(accel),
        "reliability": to_jsonable(reliability),
        "sampleSize": sample_size,
        "equivalency": to_jsonable(equivalency),
        "fixture": to_jsonable(fixture),
    }


def build_snapshot_json(snapshot: Dict[str, Any]) -> str:
    return json.dumps(snapshot, indent=2)


_HTML_STYLE = """
    body { font-family: Arial, sans-serif; padding: 24px; color: #111827; }
    h1 { font-size: 20px; margin-bottom: 8px; }
    h2 { font-size: 14px; margin-top: 20px; }
    .card { border: 1px solid #e5e7eb; padding: 12px; border-radius: 8px; margin-top: 12px; }
    ul { padding-left: 18px; }
    .muted { color: #6b7280; }
    .critical { color: #b91c1c; }
"""


def build_fixture_html(
    fixture: FixtureEvaluation,
    warnings: Optional[Sequence[FixtureWarning]] = None,
    title: str = "Fixture Requirements"
) -> str:
    """Printable HTML page with fixture targets, warnings and checklist."""
    warnings = fixture.warnings if warnings is None else warnings

    targets = [f"<div>Fixture frequency min: {fixture.f_fixture_min_hz:.1f} Hz</div>"]
    if fixture.mass_ratio is not None:
        targets.append(f"<div>Mass ratio: {fixture.mass_ratio:.1f}x</div>")
    targets.append(f"<div>Target fixture mass: {fixture.target_fixture_mass_kg:.1f} kg</div>")
    if fixture.k_fixture_min_n_per_m is not None:
        targets.append(f"<div>Stiffness target: {fixture.k_fixture_min_n_per_m:.2e} N/m</div>")
    if fixture.plate_thickness_mm is not None:
        targets.append(f"<div>Plate thickness estimate: {fixture.plate_thickness_mm:.1f} mm</div>")
    if fixture.plate_mass_estimate_kg is not None:
        targets.append(f"<div>Plate mass estimate: {fixture.plate_mass_estimate_kg:.2f} kg</div>")

    warning_items = "".join(
        f'<li class="{"critical" if w.level == WarningLevel.CRITICAL else "warning"}">'
        f"<strong>{html.escape(w.level.value)}:</strong> {html.escape(w.message)}</li>"
        for w in warnings
    ) or "<li>No warnings</li>"
    checklist_items = "".join(f"<li>{html.escape(item)}</li>" for item in fixture.checklist)

    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        f"<head><meta charset=\"utf-8\"><title>{html.escape(title)}</title>"
        f"<style>{_HTML_STYLE}</style></head>\n"
        "<body>\n"
        f"<h1>{html.escape(title)}</h1>\n"
        '<div class="muted">Generated by the vibration test planner.</div>\n'
        f'<div class="card"><h2>Targets</h2>{"".join(targets)}</div>\n'
        f'<div class="card"><h2>Warnings</h2><ul>{warning_items}</ul></div>\n'
        f'<div class="card"><h2>Checklist</h2><ul>{checklist_items}</ul></div>\n'
        '<div class="muted" style="margin-top:16px;">Use browser Print -&gt; Save as PDF.</div>\n'
        "</body>\n"
        "</html>\n"
    )
