"""
Saved mission profile model.
"""
from sqlalchemy import Column, DateTime, Float, Integer, JSON, String, Text
from datetime import datetime
from vibration_wizard.db.database import Base


class SavedMissionProfile(Base):
    """
    Model for storing user-defined mission profiles.

    Attributes:
        id: Primary key
        name: Profile name
        description: Profile description
        industry: Industry segment
        intended_life_h: Intended field life in hours
        states: JSON list of mission states, each carrying a tagged PSD
            definition and a tagged thermal condition
    """
    __tablename__ = "mission_profiles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    industry = Column(String(50), nullable=False, default="Custom")
    intended_life_h = Column(Float, nullable=False, default=0.0)

    # [{"id": "s1", "name": "...", "duration_h": 1000,
    #   "psd": {"kind": "Template", ...}, "thermal": {"kind": "Steady", ...}}, ...]
    states = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<SavedMissionProfile(id={self.id}, name='{self.name}', industry='{self.industry}')>"
