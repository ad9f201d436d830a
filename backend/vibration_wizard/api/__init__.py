"""
API routes package.

Exports all API routers for inclusion in the main application.
"""
from vibration_wizard.api import psd, missions, equivalency, thermal, reliability, fixture, plan, export

__all__ = [
    "psd",
    "missions",
    "equivalency",
    "thermal",
    "reliability",
    "fixture",
    "plan",
    "export"
]
