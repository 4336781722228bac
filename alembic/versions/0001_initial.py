"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


component_status = postgresql.ENUM(
    "operational",
    "degraded",
    "partial_outage",
    "major_outage",
    "under_maintenance",
    name="component_status",
    create_type=False,
)
incident_status = postgresql.ENUM(
    "investigating", "identified", "monitoring", "resolved", name="incident_status", create_type=False
)
incident_impact = postgresql.ENUM("none", "minor", "major", "critical", name="incident_impact", create_type=False)
maintenance_status = postgresql.ENUM(
    "scheduled", "in_progress", "completed", name="maintenance_status", create_type=False
)

ENUMS = (component_status, incident_status, incident_impact, maintenance_status)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def _link_table(name: str, owner_column: str, owner_table: str) -> None:
    op.create_table(
        name,
        sa.Column(
            owner_column,
            sa.Integer(),
            sa.ForeignKey(f"{owner_table}.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "component_id",
            sa.Integer(),
            sa.ForeignKey("components.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )


def upgrade() -> None:
    bind = op.get_bind()
    for enum in ENUMS:
        enum.create(bind, checkfirst=True)

    op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "permissions",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        *_timestamps(),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(length=255), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role_id", sa.Integer(), sa.ForeignKey("roles.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_role_id", "users", ["role_id"], unique=False)

    op.create_table(
        "component_groups",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("collapsed_by_default", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
    )
    op.create_index(
        "ix_component_groups_display_order",
        "component_groups",
        ["display_order"],
        unique=False,
    )

    op.create_table(
        "components",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("status", component_status, nullable=False, server_default="operational"),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("component_groups.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index(
        "ix_components_group_order",
        "components",
        ["group_id", "display_order"],
        unique=False,
    )

    op.create_table(
        "incidents",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("status", incident_status, nullable=False, server_default="investigating"),
        sa.Column("impact", incident_impact, nullable=False),
        sa.Column("impact_description", sa.Text(), nullable=True),
        sa.Column("root_cause", sa.Text(), nullable=True),
        sa.Column("resolved_at", sa.TIMESTAMP(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_incidents_status", "incidents", ["status"], unique=False)
    op.create_index("ix_incidents_created_at", "incidents", ["created_at"], unique=False)
    op.create_index("ix_incidents_resolved_at", "incidents", ["resolved_at"], unique=False)

    op.create_table(
        "incident_updates",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("status", incident_status, nullable=False),
        sa.Column(
            "timestamp",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "incident_id",
            sa.Integer(),
            sa.ForeignKey("incidents.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index(
        "ix_incident_updates_incident_time",
        "incident_updates",
        ["incident_id", "timestamp"],
        unique=False,
    )
    _link_table("incident_affected_components", "incident_id", "incidents")

    op.create_table(
        "maintenance_windows",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_time", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("end_time", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("status", maintenance_status, nullable=False, server_default="scheduled"),
        *_timestamps(),
    )
    op.create_index("ix_maintenance_windows_status", "maintenance_windows", ["status"], unique=False)
    op.create_index("ix_maintenance_windows_start_time", "maintenance_windows", ["start_time"], unique=False)
    op.create_index("ix_maintenance_windows_end_time", "maintenance_windows", ["end_time"], unique=False)

    op.create_table(
        "maintenance_updates",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column(
            "timestamp",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "maintenance_id",
            sa.Integer(),
            sa.ForeignKey("maintenance_windows.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index(
        "ix_maintenance_updates_maintenance_time",
        "maintenance_updates",
        ["maintenance_id", "timestamp"],
        unique=False,
    )
    _link_table("maintenance_affected_components", "maintenance_id", "maintenance_windows")

    op.create_table(
        "automations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("new_status", component_status, nullable=False),
        *_timestamps(),
    )
    _link_table("automation_components", "automation_id", "automations")

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "timestamp",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_audit_logs_timestamp", "audit_logs", ["timestamp"], unique=False)
    op.create_index("ix_audit_logs_username", "audit_logs", ["username"], unique=False)
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"], unique=False)

    op.create_table(
        "site_settings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("key", sa.String(length=255), nullable=False, unique=True),
        sa.Column("value", sa.Text(), nullable=True),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("site_settings")
    op.drop_index("ix_audit_logs_action", table_name="audit_logs")
    op.drop_index("ix_audit_logs_username", table_name="audit_logs")
    op.drop_index("ix_audit_logs_timestamp", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_table("automation_components")
    op.drop_table("automations")
    op.drop_table("maintenance_affected_components")
    op.drop_index("ix_maintenance_updates_maintenance_time", table_name="maintenance_updates")
    op.drop_table("maintenance_updates")
    op.drop_index("ix_maintenance_windows_end_time", table_name="maintenance_windows")
    op.drop_index("ix_maintenance_windows_start_time", table_name="maintenance_windows")
    op.drop_index("ix_maintenance_windows_status", table_name="maintenance_windows")
    op.drop_table("maintenance_windows")
    op.drop_table("incident_affected_components")
    op.drop_index("ix_incident_updates_incident_time", table_name="incident_updates")
    op.drop_table("incident_updates")
    op.drop_index("ix_incidents_resolved_at", table_name="incidents")
    op.drop_index("ix_incidents_created_at", table_name="incidents")
    op.drop_index("ix_incidents_status", table_name="incidents")
    op.drop_table("incidents")
    op.drop_index("ix_components_group_order", table_name="components")
    op.drop_table("components")
    op.drop_index("ix_component_groups_display_order", table_name="component_groups")
    op.drop_table("component_groups")
    op.drop_index("ix_users_role_id", table_name="users")
    op.drop_table("users")
    op.drop_table("roles")

    bind = op.get_bind()
    for enum in reversed(ENUMS):
        enum.drop(bind, checkfirst=True)
