"""Tests for filtering, sorting and exporting the admin registrations table"""

import csv
import io
import uuid
from datetime import datetime, timedelta

import pytest

from regdesk.services.registration_service import RegistrationRow
from regdesk.services.registration_view import (
    SortDirection,
    SortState,
    export_csv,
    filter_registrations,
    sort_registrations,
)

REGION_A = uuid.uuid4()
MINISTRY_A = uuid.uuid4()


def _row(name, referrer="ref@example.com", region_id=None, region_name=None, extra=None, minutes=0):
    return RegistrationRow(
        id=uuid.uuid4(),
        created_at=datetime(2026, 10, 1, 9, 0) + timedelta(minutes=minutes),
        referrer_email=referrer,
        attendee_name=name,
        attendee_email=f"{name.lower()}@example.com",
        attendee_phone="555-0100",
        gender="Female",
        age_group_ministry="Adult Ministry",
        region_id=region_id,
        region_name=region_name,
        ministry_id=MINISTRY_A,
        ministry_name="Choir",
        extra_data=extra or {},
    )


class TestFilter:
    def test_search_matches_name_or_referrer(self):
        rows = [_row("Ama"), _row("Kofi", referrer="AMA.leader@example.com"), _row("Yaw")]
        result = filter_registrations(rows, search="ama")
        assert [r.attendee_name for r in result] == ["Ama", "Kofi"]

    def test_region_and_ministry_exact(self):
        rows = [_row("Ama", region_id=REGION_A), _row("Kofi")]
        assert [r.attendee_name for r in filter_registrations(rows, region_id=REGION_A)] == ["Ama"]
        assert len(filter_registrations(rows, ministry_id=uuid.uuid4())) == 0


class TestSort:
    def test_toggle_same_column_flips(self):
        state = SortState().toggle("attendee_name")
        assert state.direction == SortDirection.ASC
        state = state.toggle("attendee_name")
        assert state.direction == SortDirection.DESC
        state = state.toggle("created_at")
        assert state == SortState(column="created_at", direction=SortDirection.ASC)

    def test_toggle_unknown_column(self):
        with pytest.raises(ValueError):
            SortState().toggle("extra_data")

    @pytest.mark.parametrize("direction", [SortDirection.ASC, SortDirection.DESC])
    def test_nulls_last_in_both_directions(self, direction):
        rows = [
            _row("Ama", region_name=None),
            _row("Kofi", region_name="Central"),
            _row("Yaw", region_name="eastern"),
        ]
        result = sort_registrations(rows, "region_name", direction)
        assert result[-1].attendee_name == "Ama"

    def test_case_insensitive_and_stable(self):
        rows = [_row("b"), _row("A", minutes=1), _row("a", minutes=2)]
        result = sort_registrations(rows, "attendee_name", SortDirection.ASC)
        assert [r.attendee_name for r in result] == ["A", "a", "b"]

    def test_no_column_keeps_order(self):
        rows = [_row("b"), _row("a")]
        assert sort_registrations(rows, None) == rows


class TestExport:
    def test_dynamic_columns_and_empty_cells(self):
        rows = [
            _row("Ama", extra={"shirt_size": "M", "needs_ride": True}),
            _row("Kofi", extra={"dietary_needs": "none"}),
        ]
        content = export_csv(rows)
        parsed = list(csv.reader(io.StringIO(content)))

        header = parsed[0]
        assert header[-3:] == ["dietary_needs", "needs_ride", "shirt_size"]
        kofi = dict(zip(header, parsed[2]))
        assert kofi["shirt_size"] == ""
        assert kofi["dietary_needs"] == "none"
        ama = dict(zip(header, parsed[1]))
        assert ama["needs_ride"] == "true"

    def test_every_value_quoted(self):
        content = export_csv([_row("Ama")])
        first_line = content.splitlines()[0]
        assert first_line.startswith('"Created At","Referrer Email"')

    def test_empty_export_has_header_only(self):
        assert export_csv([]).count("\n") == 1
