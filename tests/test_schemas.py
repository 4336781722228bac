"""
Test the response schemas built from ORM rows.
"""
import pytest

from statuspage.api.schemas.audit import AuditLogRead
from statuspage.api.schemas.automations import AutomationRead
from statuspage.api.schemas.components import ComponentGroupRead, ComponentRead
from statuspage.api.schemas.incidents import IncidentRead, IncidentUpdateRead
from statuspage.api.schemas.maintenance import MaintenanceRead, MaintenanceUpdateRead
from statuspage.api.schemas.public import PublicStatus
from statuspage.api.schemas.roles import RoleRead
from statuspage.api.schemas.settings import SiteSettingRead
from statuspage.api.schemas.users import UserRead
from statuspage.services.roles import RoleService

ORM_SCHEMAS = [
    AuditLogRead,
    AutomationRead,
    ComponentGroupRead,
    ComponentRead,
    IncidentRead,
    IncidentUpdateRead,
    MaintenanceRead,
    MaintenanceUpdateRead,
    PublicStatus,
    RoleRead,
    SiteSettingRead,
    UserRead,
]


@pytest.mark.parametrize("schema", ORM_SCHEMAS, ids=lambda schema: schema.__name__)
def test_reads_from_attributes(schema):
    assert schema.model_config.get("from_attributes") is True
    # no v1-style inner Config class
    assert "Config" not in vars(schema)


async def test_role_read_from_row(session):
    role = await RoleService(session).create(
        name="editor", permissions={"manage_incidents": True}, actor="tester"
    )

    read = RoleRead.model_validate(role)

    assert read.id == role.id
    assert read.name == "editor"
    assert read.permissions == {"manage_incidents": True}
