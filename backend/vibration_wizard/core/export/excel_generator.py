"""
Excel workbook generator for vibration test plans.

Generates Excel files with:
- Summary of the equivalent test and sample plan
- Mission profile states with their acceleration factors
- Field and test PSD tables with a log-log chart
- Representative thermal cycle with a chart
- Fixture targets, warnings and checklist
"""
import logging
from io import BytesIO
from datetime import datetime
from typing import Any, Optional, Sequence
from dataclasses import dataclass

from openpyxl import Workbook
from openpyxl.styles import (
    Font, Alignment, PatternFill, Border, Side
)
from openpyxl.chart import (
    ScatterChart, Reference, Series
)

from ..types import CycleThermal, SteadyThermal, TemplatePsd, WarningLevel


logger = logging.getLogger(__name__)


METHOD_DESCRIPTIONS = {
    "FatigueDamage": "Inverse power law on spectral density, W_test/W_field = (T_field/t_test)^(2/m).",
    "Energy": "Energy equivalence, test g² h equals field g² h.",
    "Hybrid": "Fatigue-damage equivalence with test energy capped at gamma times field energy.",
}


@dataclass
class ExcelConfig:
    """Configuration for Excel workbook generation."""
    author: str = "Vibration Test Planner"
    title: str = "Accelerated Vibration Test Plan"
    include_charts: bool = True
    freeze_headers: bool = True  # Freeze header rows


class ExcelGenerator:
    """
    Excel workbook generator for vibration test plans.

    Generates multi-sheet workbooks with formatted tables and charts.
    """

    # Style definitions
    HEADER_FONT = Font(bold=True, size=11, color="FFFFFF")
    HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center", wrap_text=True)

    TITLE_FONT = Font(bold=True, size=14, color="000000")
    SUBTITLE_FONT = Font(bold=True, size=12, color="4472C4")
    CRITICAL_FONT = Font(bold=True, color="C00000")

    NORMAL_BORDER = Border(
        left=Side(style='thin', color='D0D0D0'),
        right=Side(style='thin', color='D0D0D0'),
        top=Side(style='thin', color='D0D0D0'),
        bottom=Side(style='thin', color='D0D0D0')
    )

    def __init__(self, config: Optional[ExcelConfig] = None):
        """
        Initialize Excel generator.

        Args:
            config: Excel configuration options
        """
        self.config = config or ExcelConfig()

    def generate_vibration_workbook(self, plan: Any, output_path: Optional[str] = None) -> bytes:
        """
        Generate a workbook for a complete vibration test plan.

        Args:
            plan: VibrationPlan from the planner
            output_path: Optional file path to save the Excel file

        Returns:
            Excel file content as bytes
        """
        wb = Workbook()
        wb.remove(wb.active)  # Remove default sheet

        self._create_summary_sheet(wb, plan)
        self._create_mission_profile_sheet(wb, plan)
        self._create_psd_sheet(wb, plan.equivalency)
        self._create_thermal_sheet(wb, plan.thermal_cycle)
        if plan.fixture is not None:
            self._create_fixture_sheet(wb, plan.fixture)

        wb.properties.creator = self.config.author
        wb.properties.title = self.config.title
        wb.properties.created = datetime.now()

        buffer = BytesIO()
        wb.save(buffer)
        buffer.seek(0)

        if output_path:
            with open(output_path, 'wb') as f:
                f.write(buffer.getvalue())

        logger.debug(f"Generated workbook with sheets {wb.sheetnames}")
        return buffer.getvalue()

    def _write_header_row(self, ws, row: int, headers: Sequence[str], start_col: int = 2):
        for col, header in enumerate(headers, start=start_col):
            cell = ws.cell(row=row, column=col)
            cell.value = header
            cell.font = self.HEADER_FONT
            cell.fill = self.HEADER_FILL
            cell.alignment = self.HEADER_ALIGNMENT
            cell.border = self.NORMAL_BORDER

    def _write_row(self, ws, row: int, values: Sequence[Any], start_col: int = 2, number_format: Optional[str] = None):
        for col, value in enumerate(values, start=start_col):
            cell = ws.cell(row=row, column=col, value=value)
            cell.border = self.NORMAL_BORDER
            if number_format and isinstance(value, float):
                cell.number_format = number_format

    def _create_summary_sheet(self, wb: Workbook, plan: Any):
        """Create the summary sheet with key results."""
        ws = wb.create_sheet("Summary", 0)
        eq = plan.equivalency

        ws['B1'] = self.config.title
        ws['B1'].font = self.TITLE_FONT
        ws.merge_cells('B1:E1')

        ws['B2'] = f"Mission: {plan.profile.name}"
        ws['B2'].font = self.SUBTITLE_FONT
        ws.merge_cells('B2:E2')

        ws['B3'] = f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
        ws['B3'].font = Font(size=9, italic=True, color="666666")

        row = 5
        ws[f'B{row}'] = "Equivalent Test"
        ws[f'B{row}'].font = self.SUBTITLE_FONT
        row += 1
        self._write_header_row(ws, row, ["Parameter", "Value", "Unit"])
        row += 1

        method = plan.accel.method.value
        results = [
            ("Method", method, ""),
            ("Base Shape", eq.base_state_id or "Damage-equivalent merge", ""),
            ("Fatigue Exponent", eq.fatigue_exponent, ""),
            ("Field Duration", eq.total_field_h, "h"),
            ("Test Duration", eq.t_test_h, "h"),
            ("Acceleration Factor", eq.acceleration_factor, ""),
            ("PSD Scale (k)", eq.k_scale, ""),
            ("Field gRMS", eq.grms_field, "g"),
            ("Test gRMS", eq.grms_test, "g"),
            ("Damage Ratio", eq.damage_ratio, ""),
            ("Energy Ratio", eq.energy_ratio, ""),
        ]
        for name, value, unit in results:
            self._write_row(ws, row, [name, value, unit], number_format='0.000')
            row += 1

        ws[f'B{row}'] = "Method:"
        ws[f'C{row}'] = METHOD_DESCRIPTIONS.get(method, method)
        row += 2

        ws[f'B{row}'] = "Reliability Demonstration"
        ws[f'B{row}'].font = self.SUBTITLE_FONT
        row += 1
        self._write_header_row(ws, row, ["Parameter", "Value", "Unit"])
        row += 1
        sample = plan.sample_plan
        for name, value, unit in [
            ("Target Reliability", plan.reliability.r_target, ""),
            ("Confidence Level", plan.reliability.cl, ""),
            ("Allowed Failures", plan.reliability.c_allowed, ""),
            ("Sample Size", sample.sample_size, "units"),
            ("Achieved Confidence", sample.achieved_confidence, ""),
        ]:
            self._write_row(ws, row, [name, value, unit], number_format='0.0000')
            row += 1

        row += 1
        ws[f'B{row}'] = "Acceptance:"
        ws[f'C{row}'] = plan.acceptance_rule
        row += 1

        if plan.notes:
            row += 1
            ws[f'B{row}'] = "Notes"
            ws[f'B{row}'].font = self.SUBTITLE_FONT
            row += 1
            for note in plan.notes:
                ws[f'B{row}'] = note
                row += 1

        ws.column_dimensions['B'].width = 25
        ws.column_dimensions['C'].width = 20
        ws.column_dimensions['D'].width = 10

    def _create_mission_profile_sheet(self, wb: Workbook, plan: Any):
        """Create the mission profile sheet."""
        ws = wb.create_sheet("Mission Profile")

        ws['B1'] = "Mission Profile"
        ws['B1'].font = self.TITLE_FONT
        ws.merge_cells('B1:D1')

        ws['B3'] = "Intended Life (h):"
        ws['C3'] = plan.profile.intended_life_h
        ws['B4'] = "Industry:"
        ws['C4'] = plan.profile.industry.value

        row = 6
        self._write_header_row(ws, row, [
            "State", "Duration (h)", "PSD", "Thermal", "Weight",
            "gRMS", "Damage Share", "Accel. Factor", "PSD Factor",
        ])
        row += 1

        contributions = {c.state_id: c for c in plan.equivalency.contributions}
        for state in plan.profile.states:
            c = contributions.get(state.id)
            self._write_row(ws, row, [
                state.name,
                state.duration_h,
                self._describe_psd(state.psd),
                self._describe_thermal(state.thermal),
                c.weight if c else None,
                c.grms if c else None,
                c.damage_fraction if c else None,
                c.acceleration_factor if c else None,
                c.psd_factor if c else None,
            ], number_format='0.000')
            row += 1

        ws.column_dimensions['B'].width = 25
        ws.column_dimensions['C'].width = 14
        ws.column_dimensions['D'].width = 24
        ws.column_dimensions['E'].width = 28

        if self.config.freeze_headers:
            ws.freeze_panes = 'B7'

    def _create_psd_sheet(self, wb: Workbook, eq: Any):
        """Create the field/test PSD sheet with a log-log chart."""
        ws = wb.create_sheet("Test PSD")

        ws['B1'] = "Equivalent PSD"
        ws['B1'].font = self.TITLE_FONT

        row = 3
        self._write_header_row(ws, row, ["Frequency (Hz)", "Field (g²/Hz)", "Test (g²/Hz)"])
        first = row + 1
        for field_point, test_point in zip(eq.field_psd, eq.test_psd):
            row += 1
            self._write_row(ws, row, [field_point.f_hz, field_point.g2_per_hz, test_point.g2_per_hz],
                            number_format='0.000E+00')

        ws.column_dimensions['B'].width = 16
        ws.column_dimensions['C'].width = 16
        ws.column_dimensions['D'].width = 16
        if self.config.freeze_headers:
            ws.freeze_panes = 'B4'

        if self.config.include_charts and row > first:
            chart = ScatterChart()
            chart.title = "Field vs Test PSD"
            chart.style = 13
            chart.x_axis.title = "Frequency (Hz)"
            chart.y_axis.title = "PSD (g²/Hz)"
            chart.x_axis.scaling.logBase = 10
            chart.y_axis.scaling.logBase = 10
            chart.x_axis.delete = False
            chart.y_axis.delete = False
            chart.height = 10
            chart.width = 18

            x_values = Reference(ws, min_col=2, min_row=first, max_row=row)
            for col in (3, 4):
                values = Reference(ws, min_col=col, min_row=first - 1, max_row=row)
                series = Series(values, x_values, title_from_data=True)
                series.marker.symbol = "none"
                chart.series.append(series)

            ws.add_chart(chart, "F3")

    def _create_thermal_sheet(self, wb: Workbook, cycle: Any):
        """Create the representative thermal cycle sheet."""
        ws = wb.create_sheet("Thermal Cycle")

        ws['B1'] = "Representative Thermal Cycle"
        ws['B1'].font = self.TITLE_FONT

        ws['B3'] = "Cycle Length (min):"
        ws['C3'] = cycle.cycle_minutes
        ws['B4'] = "Repeats:"
        ws['C4'] = cycle.repeats

        row = 6
        self._write_header_row(ws, row, [
            "State", "Field Fraction", "Minutes", "T rep (°C)", "T min (°C)",
            "T max (°C)", "Ramp (min)", "Soak (min)",
        ])
        for seg in cycle.segments:
            row += 1
            self._write_row(ws, row, [
                seg.state_name, seg.field_fraction, seg.cycle_minutes, seg.temp_c,
                seg.tmin_c, seg.tmax_c, seg.ramp_minutes, seg.soak_minutes,
            ], number_format='0.00')

        row += 2
        ws[f'B{row}'] = "Profile"
        ws[f'B{row}'].font = self.SUBTITLE_FONT
        row += 1
        self._write_header_row(ws, row, ["Time (min)", "Temperature (°C)"])
        header_row = row
        for t_min, temp_c in cycle.points:
            row += 1
            self._write_row(ws, row, [t_min, temp_c], number_format='0.0')

        ws.column_dimensions['B'].width = 22
        ws.column_dimensions['C'].width = 16

        if self.config.include_charts and row > header_row:
            chart = ScatterChart()
            chart.title = "Thermal Cycle"
            chart.style = 13
            chart.x_axis.title = "Time (min)"
            chart.y_axis.title = "Temperature (°C)"
            chart.x_axis.delete = False
            chart.y_axis.delete = False
            chart.height = 8
            chart.width = 18

            x_values = Reference(ws, min_col=2, min_row=header_row + 1, max_row=row)
            values = Reference(ws, min_col=3, min_row=header_row, max_row=row)
            series = Series(values, x_values, title_from_data=True)
            series.marker.symbol = "none"
            chart.series.append(series)
            ws.add_chart(chart, "K3")

    def _create_fixture_sheet(self, wb: Workbook, fixture: Any):
        """Create the fixture requirements sheet."""
        ws = wb.create_sheet("Fixture")

        ws['B1'] = "Fixture Requirements"
        ws['B1'].font = self.TITLE_FONT

        row = 3
        self._write_header_row(ws, row, ["Target", "Value", "Unit"])
        row += 1
        targets = [
            ("Min Fixture Frequency", fixture.f_fixture_min_hz, "Hz"),
            ("Target Fixture Mass", fixture.target_fixture_mass_kg, "kg"),
            ("Mass Ratio", fixture.mass_ratio, "x"),
            ("Min Stiffness", fixture.k_fixture_min_n_per_m, "N/m"),
            ("Plate Thickness", fixture.plate_thickness_mm, "mm"),
            ("Plate Mass Estimate", fixture.plate_mass_estimate_kg, "kg"),
        ]
        for name, value, unit in targets:
            if value is None:
                continue
            self._write_row(ws, row, [name, value, unit], number_format='0.00')
            row += 1

        row += 1
        ws[f'B{row}'] = "Warnings"
        ws[f'B{row}'].font = self.SUBTITLE_FONT
        row += 1
        if not fixture.warnings:
            ws[f'B{row}'] = "No warnings"
            row += 1
        for warning in fixture.warnings:
            ws[f'B{row}'] = warning.level.value
            ws[f'C{row}'] = warning.message
            if warning.level == WarningLevel.CRITICAL:
                ws[f'B{row}'].font = self.CRITICAL_FONT
            row += 1

        row += 1
        ws[f'B{row}'] = "Checklist"
        ws[f'B{row}'].font = self.SUBTITLE_FONT
        row += 1
        for item in fixture.checklist:
            ws[f'B{row}'] = item
            row += 1

        ws.column_dimensions['B'].width = 25
        ws.column_dimensions['C'].width = 60

    def _describe_psd(self, psd: Any) -> str:
        if isinstance(psd, TemplatePsd):
            return f"{psd.template_id} x{psd.scale:g}"
        return f"CSV: {psd.name}"

    def _describe_thermal(self, thermal: Any) -> str:
        if isinstance(thermal, SteadyThermal):
            return f"Steady {thermal.t_c:g} °C"
        if isinstance(thermal, CycleThermal):
            return (
                f"Cycle {thermal.tmin_c:g}-{thermal.tmax_c:g} °C, "
                f"{thermal.ramp_c_per_min:g} °C/min, {thermal.soak_min:g} min soak"
            )
        return str(thermal)
