"""Reference data resolver for region and ministry selections"""

import logging
import re
import uuid
from typing import List, Literal, Optional, Sequence, Union

from pydantic import BaseModel

from regdesk.errors import (
    MissingRequiredField,
    ResolutionError,
    UnknownSelection,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Offered only when the regions table has no active rows
FALLBACK_REGIONS = [
    "Central",
    "Eastern",
    "Northern",
    "Southern",
    "Western",
]

CANONICAL_ID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


class Canonical(BaseModel):
    kind: Literal["canonical"] = "canonical"
    id: uuid.UUID


class Fallback(BaseModel):
    kind: Literal["fallback"] = "fallback"
    name: str


RegionChoice = Union[Canonical, Fallback]


class ChoiceOption(BaseModel):
    """One entry of a region or ministry drop-down"""

    value: str
    label: str


def looks_like_canonical_id(value: Optional[str]) -> bool:
    """True if value has the 36-character hyphenated hex shape of a row id"""
    return bool(value) and CANONICAL_ID_PATTERN.match(value.strip()) is not None


def region_options(canonical_list: Sequence) -> List[ChoiceOption]:
    """Options offered by the public form for the region drop-down"""
    if canonical_list:
        return [ChoiceOption(value=str(r.id), label=r.name) for r in canonical_list]
    return [ChoiceOption(value=name, label=name) for name in FALLBACK_REGIONS]


def ministry_options(ministries: Sequence) -> List[ChoiceOption]:
    """Options for the ministry drop-down; raises if there are none"""
    ensure_ministries_available(ministries)
    return [ChoiceOption(value=str(m.id), label=m.name) for m in ministries]


def ensure_ministries_available(ministries: Sequence) -> None:
    if not ministries:
        raise ResolutionError(
            "No ministries are available yet. Registration cannot be completed."
        )


def resolve_region(selection: Optional[str], canonical_list: Sequence) -> RegionChoice:
    """
    Resolve the submitted region value against the rows offered to the user.

    Args:
        selection: Raw value submitted by the form
        canonical_list: Active Region rows fetched for this request

    Returns:
        Canonical(id) when regions are seeded, Fallback(name) otherwise

    Raises:
        ValidationError: If the selection is empty or not one of the offered values
    """
    selection = (selection or "").strip()
    if not selection:
        raise ValidationError([MissingRequiredField("region_id", "Region")])

    if canonical_list:
        if looks_like_canonical_id(selection):
            wanted = uuid.UUID(selection)
            for region in canonical_list:
                if region.id == wanted:
                    return Canonical(id=region.id)
        raise ValidationError([UnknownSelection("region_id", selection)])

    if looks_like_canonical_id(selection) or selection not in FALLBACK_REGIONS:
        raise ValidationError([UnknownSelection("region_id", selection)])

    logger.info(f"No canonical regions; using fallback region '{selection}'")
    return Fallback(name=selection)


def resolve_ministry(selection: Optional[str], ministries: Sequence) -> uuid.UUID:
    """
    Resolve the submitted ministry id. Ministries have no fallback list.

    Raises:
        ResolutionError: If there are no active ministries at all
        ValidationError: If the selection is not an active ministry id
    """
    ensure_ministries_available(ministries)

    selection = (selection or "").strip()
    if not selection:
        raise ValidationError([MissingRequiredField("ministry_id", "Ministry")])
    if looks_like_canonical_id(selection):
        wanted = uuid.UUID(selection)
        for ministry in ministries:
            if ministry.id == wanted:
                return ministry.id
    raise ValidationError([UnknownSelection("ministry_id", selection)])
