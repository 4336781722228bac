from __future__ import annotations

from typing import Iterable

from statuspage.db.models import ComponentStatus

# under_maintenance ranks below degraded
SEVERITY: dict[ComponentStatus, int] = {
    ComponentStatus.OPERATIONAL: 0,
    ComponentStatus.UNDER_MAINTENANCE: 1,
    ComponentStatus.DEGRADED: 2,
    ComponentStatus.PARTIAL_OUTAGE: 3,
    ComponentStatus.MAJOR_OUTAGE: 4,
}


def overall_status(statuses: Iterable[ComponentStatus]) -> ComponentStatus:
    """Worst status among ``statuses``; operational when there are none."""
    worst = ComponentStatus.OPERATIONAL
    for status in statuses:
        if SEVERITY[status] > SEVERITY[worst]:
            worst = status
    return worst
