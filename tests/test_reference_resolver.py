"""Tests for resolving region and ministry selections"""

import uuid
from types import SimpleNamespace

import pytest

from regdesk.errors import ResolutionError, ValidationError
from regdesk.services.reference_resolver import (
    FALLBACK_REGIONS,
    Canonical,
    Fallback,
    looks_like_canonical_id,
    ministry_options,
    region_options,
    resolve_ministry,
    resolve_region,
)


def _rows(*names):
    return [SimpleNamespace(id=uuid.uuid4(), name=name) for name in names]


class TestRegions:
    def test_options_from_canonical_rows(self):
        regions = _rows("Central", "Eastern")
        options = region_options(regions)
        assert [o.value for o in options] == [str(r.id) for r in regions]
        assert [o.label for o in options] == ["Central", "Eastern"]

    def test_fallback_options_when_empty(self):
        options = region_options([])
        assert [o.value for o in options] == FALLBACK_REGIONS

    def test_resolve_canonical(self):
        regions = _rows("Central")
        assert resolve_region(str(regions[0].id), regions) == Canonical(id=regions[0].id)

    def test_resolve_fallback(self):
        assert resolve_region("Northern", []) == Fallback(name="Northern")

    def test_fallback_name_rejected_when_seeded(self):
        with pytest.raises(ValidationError) as exc_info:
            resolve_region("Northern", _rows("Northern"))
        assert exc_info.value.codes() == ["unknown_selection"]

    def test_id_shaped_value_rejected_without_rows(self):
        with pytest.raises(ValidationError):
            resolve_region(str(uuid.uuid4()), [])

    def test_blank_is_missing(self):
        with pytest.raises(ValidationError) as exc_info:
            resolve_region("  ", _rows("Central"))
        assert exc_info.value.codes() == ["missing_required_field"]

    def test_canonical_id_shape(self):
        assert looks_like_canonical_id(str(uuid.uuid4()))
        assert not looks_like_canonical_id("Central")
        assert not looks_like_canonical_id(None)


class TestMinistries:
    def test_no_ministries_is_a_resolution_error(self):
        with pytest.raises(ResolutionError):
            ministry_options([])
        with pytest.raises(ResolutionError):
            resolve_ministry(str(uuid.uuid4()), [])

    def test_resolve_known_ministry(self):
        ministries = _rows("Choir", "Ushering")
        assert resolve_ministry(str(ministries[1].id), ministries) == ministries[1].id

    def test_unknown_ministry(self):
        with pytest.raises(ValidationError) as exc_info:
            resolve_ministry("Choir", _rows("Choir"))
        assert exc_info.value.codes() == ["unknown_selection"]
