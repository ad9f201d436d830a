"""
SQLAlchemy models package.
"""
from vibration_wizard.models.mission_profile import SavedMissionProfile

__all__ = [
    "SavedMissionProfile"
]
