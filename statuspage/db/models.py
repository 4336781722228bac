from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import Boolean, Column, Enum, ForeignKey, Index, Integer, String, Table, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from statuspage.db.types import JSON_TYPE, UTCDateTime, utcnow


class Base(DeclarativeBase):
    pass


class ComponentStatus(str, enum.Enum):
    OPERATIONAL = "operational"
    DEGRADED = "degraded"
    PARTIAL_OUTAGE = "partial_outage"
    MAJOR_OUTAGE = "major_outage"
    UNDER_MAINTENANCE = "under_maintenance"


class IncidentStatus(str, enum.Enum):
    INVESTIGATING = "investigating"
    IDENTIFIED = "identified"
    MONITORING = "monitoring"
    RESOLVED = "resolved"


class IncidentImpact(str, enum.Enum):
    NONE = "none"
    MINOR = "minor"
    MAJOR = "major"
    CRITICAL = "critical"


class MaintenanceStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


def _enum(enum_cls: type[enum.Enum], name: str) -> Enum:
    # persist the lowercase values, not the member names
    return Enum(enum_cls, name=name, values_callable=lambda members: [m.value for m in members])


component_status_enum = _enum(ComponentStatus, "component_status")
incident_status_enum = _enum(IncidentStatus, "incident_status")
incident_impact_enum = _enum(IncidentImpact, "incident_impact")
maintenance_status_enum = _enum(MaintenanceStatus, "maintenance_status")


def _created_at() -> Mapped[datetime]:
    return mapped_column(UTCDateTime(), nullable=False, default=utcnow, server_default=func.now())


def _updated_at() -> Mapped[datetime]:
    return mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )


incident_affected_components = Table(
    "incident_affected_components",
    Base.metadata,
    Column("incident_id", Integer, ForeignKey("incidents.id", ondelete="CASCADE"), primary_key=True),
    Column("component_id", Integer, ForeignKey("components.id", ondelete="CASCADE"), primary_key=True),
)

maintenance_affected_components = Table(
    "maintenance_affected_components",
    Base.metadata,
    Column(
        "maintenance_id",
        Integer,
        ForeignKey("maintenance_windows.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("component_id", Integer, ForeignKey("components.id", ondelete="CASCADE"), primary_key=True),
)

automation_components = Table(
    "automation_components",
    Base.metadata,
    Column("automation_id", Integer, ForeignKey("automations.id", ondelete="CASCADE"), primary_key=True),
    Column("component_id", Integer, ForeignKey("components.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text)
    permissions: Mapped[dict] = mapped_column(JSON_TYPE, nullable=False, default=dict)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()


class User(Base):
    __tablename__ = "users"
    __table_args__ = (Index("ix_users_role_id", "role_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role_id: Mapped[int] = mapped_column(Integer, ForeignKey("roles.id"), nullable=False)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()

    role: Mapped[Role] = relationship(lazy="joined")


class ComponentGroup(Base):
    __tablename__ = "component_groups"
    __table_args__ = (Index("ix_component_groups_display_order", "display_order"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    collapsed_by_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()

    components: Mapped[list["Component"]] = relationship(
        lazy="selectin",
        order_by=lambda: [Component.display_order, Component.id],
    )


class Component(Base):
    __tablename__ = "components"
    __table_args__ = (Index("ix_components_group_order", "group_id", "display_order"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[ComponentStatus] = mapped_column(
        component_status_enum,
        nullable=False,
        default=ComponentStatus.OPERATIONAL,
    )
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    group_id: Mapped[int] = mapped_column(Integer, ForeignKey("component_groups.id"), nullable=False)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()


class Incident(Base):
    __tablename__ = "incidents"
    __table_args__ = (
        Index("ix_incidents_status", "status"),
        Index("ix_incidents_created_at", "created_at"),
        Index("ix_incidents_resolved_at", "resolved_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[IncidentStatus] = mapped_column(
        incident_status_enum,
        nullable=False,
        default=IncidentStatus.INVESTIGATING,
    )
    impact: Mapped[IncidentImpact] = mapped_column(incident_impact_enum, nullable=False)
    impact_description: Mapped[str | None] = mapped_column(Text)
    root_cause: Mapped[str | None] = mapped_column(Text)
    resolved_at: Mapped[datetime | None] = mapped_column(UTCDateTime())
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()

    updates: Mapped[list["IncidentUpdate"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=lambda: [IncidentUpdate.timestamp.desc(), IncidentUpdate.id.desc()],
    )
    affected_components: Mapped[list[Component]] = relationship(
        secondary=incident_affected_components,
        lazy="selectin",
        order_by=lambda: [Component.display_order, Component.id],
    )


class IncidentUpdate(Base):
    __tablename__ = "incident_updates"
    __table_args__ = (Index("ix_incident_updates_incident_time", "incident_id", "timestamp"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[IncidentStatus] = mapped_column(incident_status_enum, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    incident_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("incidents.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()


class MaintenanceWindow(Base):
    __tablename__ = "maintenance_windows"
    __table_args__ = (
        Index("ix_maintenance_windows_status", "status"),
        Index("ix_maintenance_windows_start_time", "start_time"),
        Index("ix_maintenance_windows_end_time", "end_time"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    start_time: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    end_time: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    status: Mapped[MaintenanceStatus] = mapped_column(
        maintenance_status_enum,
        nullable=False,
        default=MaintenanceStatus.SCHEDULED,
    )
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()

    updates: Mapped[list["MaintenanceUpdate"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=lambda: [MaintenanceUpdate.timestamp.desc(), MaintenanceUpdate.id.desc()],
    )
    affected_components: Mapped[list[Component]] = relationship(
        secondary=maintenance_affected_components,
        lazy="selectin",
        order_by=lambda: [Component.display_order, Component.id],
    )


class MaintenanceUpdate(Base):
    __tablename__ = "maintenance_updates"
    __table_args__ = (
        Index("ix_maintenance_updates_maintenance_time", "maintenance_id", "timestamp"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    maintenance_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("maintenance_windows.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()


class Automation(Base):
    __tablename__ = "automations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    new_status: Mapped[ComponentStatus] = mapped_column(component_status_enum, nullable=False)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()

    components: Mapped[list[Component]] = relationship(
        secondary=automation_components,
        lazy="selectin",
        order_by=lambda: [Component.display_order, Component.id],
    )


class AuditLog(Base):
    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_timestamp", "timestamp"),
        Index("ix_audit_logs_username", "username"),
        Index("ix_audit_logs_action", "action"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    timestamp: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    action: Mapped[str] = mapped_column(String(100), nullable=False)
    details: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = _created_at()


class SiteSetting(Base):
    __tablename__ = "site_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    value: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()
