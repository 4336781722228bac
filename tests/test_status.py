"""
Test overall status aggregation.
"""
import pytest

from statuspage.db.models import ComponentStatus as S
from statuspage.services.status import overall_status


class TestOverallStatus:
    """Worst status wins under the fixed severity order."""

    def test_empty_is_operational(self):
        assert overall_status([]) == S.OPERATIONAL

    def test_all_operational(self):
        assert overall_status([S.OPERATIONAL, S.OPERATIONAL]) == S.OPERATIONAL

    @pytest.mark.parametrize(
        "statuses, expected",
        [
            ([S.OPERATIONAL, S.DEGRADED, S.PARTIAL_OUTAGE], S.PARTIAL_OUTAGE),
            ([S.OPERATIONAL, S.MAJOR_OUTAGE, S.DEGRADED], S.MAJOR_OUTAGE),
            ([S.OPERATIONAL, S.UNDER_MAINTENANCE], S.UNDER_MAINTENANCE),
            ([S.UNDER_MAINTENANCE, S.DEGRADED], S.DEGRADED),
        ],
    )
    def test_most_severe_status(self, statuses, expected):
        assert overall_status(statuses) == expected

    def test_accepts_any_iterable(self):
        assert overall_status(iter([S.DEGRADED, S.OPERATIONAL])) == S.DEGRADED
