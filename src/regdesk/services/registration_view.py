"""Admin view helpers: filter, sort and CSV export of fetched registrations.

Everything here works on the list already loaded by RegistrationService; no
function in this module talks to the database.
"""

import csv
import io
import uuid
from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel

from regdesk.services.registration_service import RegistrationRow

SORTABLE_COLUMNS = [
    "created_at",
    "referrer_email",
    "attendee_name",
    "attendee_email",
    "attendee_phone",
    "gender",
    "age_group_ministry",
    "region_name",
    "ministry_name",
]

# (CSV header, RegistrationRow attribute)
CSV_FIXED_COLUMNS = [
    ("Created At", "created_at"),
    ("Referrer Email", "referrer_email"),
    ("Attendee Name", "attendee_name"),
    ("Email", "attendee_email"),
    ("Phone", "attendee_phone"),
    ("Gender", "gender"),
    ("Age Group", "age_group_ministry"),
    ("Region", "region_name"),
    ("Ministry", "ministry_name"),
]

CSV_FILENAME = "registrations_export.csv"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortState(BaseModel):
    """Current sort column and direction of the registrations table"""

    column: Optional[str] = None
    direction: SortDirection = SortDirection.ASC

    def toggle(self, column: str) -> "SortState":
        """Same column flips the direction; a new column starts ascending"""
        if column not in SORTABLE_COLUMNS:
            raise ValueError(f"Cannot sort by {column!r}")
        if column == self.column:
            flipped = (
                SortDirection.DESC
                if self.direction == SortDirection.ASC
                else SortDirection.ASC
            )
            return SortState(column=column, direction=flipped)
        return SortState(column=column, direction=SortDirection.ASC)


def filter_registrations(
    rows: Iterable[RegistrationRow],
    search: Optional[str] = None,
    region_id: Optional[uuid.UUID] = None,
    ministry_id: Optional[uuid.UUID] = None,
) -> List[RegistrationRow]:
    """
    Filter registrations the way the admin table does.

    Args:
        rows: Registrations as fetched
        search: Case-insensitive substring of attendee name or referrer email
        region_id: Exact region id
        ministry_id: Exact ministry id
    """
    result = list(rows)
    if search:
        needle = search.strip().lower()
        result = [
            r
            for r in result
            if needle in r.referrer_email.lower() or needle in r.attendee_name.lower()
        ]
    if region_id:
        result = [r for r in result if r.region_id == region_id]
    if ministry_id:
        result = [r for r in result if r.ministry_id == ministry_id]
    return result


def _sort_key(value):
    if isinstance(value, str):
        return value.lower()
    return value


def sort_registrations(
    rows: Iterable[RegistrationRow],
    column: Optional[str],
    direction: SortDirection = SortDirection.ASC,
) -> List[RegistrationRow]:
    """
    Stable sort by one column. Rows whose value is None always come last,
    whichever the direction.
    """
    rows = list(rows)
    if not column:
        return rows
    if column not in SORTABLE_COLUMNS:
        raise ValueError(f"Cannot sort by {column!r}")

    present = [r for r in rows if getattr(r, column) is not None]
    missing = [r for r in rows if getattr(r, column) is None]
    present.sort(
        key=lambda r: _sort_key(getattr(r, column)),
        reverse=SortDirection(direction) == SortDirection.DESC,
    )
    return present + missing


def _csv_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def dynamic_columns(rows: Iterable[RegistrationRow]) -> List[str]:
    """Sorted union of extra_data keys across rows"""
    keys = set()
    for row in rows:
        keys.update((row.extra_data or {}).keys())
    return sorted(keys)


def export_csv(rows: Iterable[RegistrationRow]) -> str:
    """
    Render registrations as CSV.

    Header is the fixed columns followed by every extra_data key seen in
    the rows (sorted). Every value is double-quoted; a key missing from a
    row renders as an empty string.
    """
    rows = list(rows)
    extra_keys = dynamic_columns(rows)

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([header for header, _ in CSV_FIXED_COLUMNS] + extra_keys)
    for row in rows:
        extra = row.extra_data or {}
        writer.writerow(
            [_csv_value(getattr(row, attr)) for _, attr in CSV_FIXED_COLUMNS]
            + [_csv_value(extra.get(key)) for key in extra_keys]
        )
    return buffer.getvalue()
