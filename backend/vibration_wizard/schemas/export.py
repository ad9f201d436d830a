"""
Pydantic schemas for export operations.
"""
from pydantic import Field
from typing import Optional

from vibration_wizard.core.export import ExportAcknowledgment
from vibration_wizard.schemas.plan import AcknowledgmentSchema, PlanRequest


class ExportRequest(PlanRequest):
    """Plan inputs plus the acknowledgment that gates export."""
    acknowledgment: Optional[AcknowledgmentSchema] = Field(
        None,
        description="Required when the fixture check reports Critical warnings"
    )
    title: Optional[str] = Field(None, max_length=200, description="Document title")

    def acknowledgment_domain(self) -> Optional[ExportAcknowledgment]:
        if self.acknowledgment is None:
            return None
        return ExportAcknowledgment(self.acknowledgment.acknowledged, self.acknowledgment.reason)
