"""
Export module for vibration test plans.

This module serializes computed plans to CSV, JSON, printable HTML and
Excel workbooks.
"""
from .artifacts import (
    ExportAcknowledgment,
    ExportBlockedError,
    build_fixture_html,
    build_playlist_csv,
    build_psd_csv,
    build_snapshot,
    build_snapshot_json,
    ensure_export_allowed,
    is_export_allowed,
)
from .excel_generator import ExcelGenerator

__all__ = [
    "ExportAcknowledgment",
    "ExportBlockedError",
    "build_fixture_html",
    "build_playlist_csv",
    "build_psd_csv",
    "build_snapshot",
    "build_snapshot_json",
    "ensure_export_allowed",
    "is_export_allowed",
    "ExcelGenerator",
]
