from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from statuspage.api.schemas.components import ComponentGroupRead
from statuspage.api.schemas.incidents import IncidentRead
from statuspage.api.schemas.maintenance import MaintenanceRead
from statuspage.db.models import ComponentStatus


class PublicStatus(BaseModel):
    overall_status: ComponentStatus
    component_groups: list[ComponentGroupRead]
    active_incidents: list[IncidentRead]
    recent_incidents: list[IncidentRead]
    active_maintenance: list[MaintenanceRead]
    upcoming_maintenance: list[MaintenanceRead]
    maintenance_mode: bool
    maintenance_mode_message: str | None = None

    model_config = ConfigDict(from_attributes=True)
