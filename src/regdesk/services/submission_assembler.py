"""Submission assembler: merges fixed attendee attributes and dynamic values.

The assembler never writes anything. It either returns a complete
``RegistrationDraft`` or raises ``ValidationError`` listing every problem it
found, so a rejected submission can simply be corrected and resent.

``extra_data`` is built in two passes: schema-driven values from the active
field definitions first, then side-channel values under reserved keys. If an
admin names a field after a reserved key, the side-channel value wins.
"""

import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from regdesk.errors import (
    FieldError,
    InvalidFieldValue,
    MissingRequiredField,
    ValidationError,
)
from regdesk.models.field_type import FieldType
from regdesk.models.registration import REGION_FALLBACK_KEY, RESERVED_EXTRA_KEYS
from regdesk.services.reference_resolver import (
    Canonical,
    Fallback,
    RegionChoice,
    resolve_ministry,
    resolve_region,
)
from regdesk.services.schema_interpreter import (
    EMAIL_PATTERN,
    coerce_field_type,
    is_blank,
    validate_value,
)

logger = logging.getLogger(__name__)

GENDER_CHOICES = ["Male", "Female", "Prefer not to say"]
AGE_GROUP_CHOICES = ["Adult Ministry", "Children Ministry"]
DEFAULT_GENDER = GENDER_CHOICES[0]
DEFAULT_AGE_GROUP = AGE_GROUP_CHOICES[0]

# Prefix used by the public form for schema-driven inputs ("extra.shirt_size")
DYNAMIC_INPUT_PREFIX = "extra."

REQUIRED_TEXT_ATTRIBUTES = {
    "referrer_email": "Referrer email",
    "attendee_name": "Full name",
    "attendee_email": "Email",
    "attendee_phone": "Phone",
}

FIXED_FORM_KEYS = list(REQUIRED_TEXT_ATTRIBUTES) + [
    "gender",
    "age_group_ministry",
    "region_id",
    "ministry_id",
]


class FixedAttributes(BaseModel):
    """Attendee attributes that every registration carries"""

    referrer_email: str = ""
    attendee_name: str = ""
    attendee_email: str = ""
    attendee_phone: str = ""
    gender: str = DEFAULT_GENDER
    age_group_ministry: str = DEFAULT_AGE_GROUP
    region: Optional[RegionChoice] = None
    ministry_id: Optional[uuid.UUID] = None


class RegistrationDraft(BaseModel):
    """A validated registration waiting to be persisted"""

    referrer_email: str
    attendee_name: str
    attendee_email: str
    attendee_phone: str
    gender: str
    age_group_ministry: str
    region_id: Optional[uuid.UUID] = None
    ministry_id: uuid.UUID
    extra_data: Dict[str, Any] = Field(default_factory=dict)


def _is_form_scalar(value: Any) -> bool:
    """Form posts carry text (or booleans when called directly); uploads are not values"""
    return value is None or isinstance(value, (str, bool))


def _not_text(field: str, label: Optional[str] = None) -> InvalidFieldValue:
    return InvalidFieldValue(field, f"{label or field} must be a text value")


def _check_fixed(fixed: FixedAttributes) -> List[FieldError]:
    errors: List[FieldError] = []
    for attr, label in REQUIRED_TEXT_ATTRIBUTES.items():
        if not getattr(fixed, attr):
            errors.append(MissingRequiredField(attr, label))

    for attr in ("referrer_email", "attendee_email"):
        value = getattr(fixed, attr)
        if value and not EMAIL_PATTERN.match(value):
            errors.append(
                InvalidFieldValue(attr, f"{REQUIRED_TEXT_ATTRIBUTES[attr]} is not a valid email")
            )

    if fixed.gender not in GENDER_CHOICES:
        errors.append(InvalidFieldValue("gender", f"Unknown gender: {fixed.gender!r}"))
    if fixed.age_group_ministry not in AGE_GROUP_CHOICES:
        errors.append(
            InvalidFieldValue(
                "age_group_ministry",
                f"Unknown age group: {fixed.age_group_ministry!r}",
            )
        )
    if fixed.region is None:
        errors.append(MissingRequiredField("region_id", "Region"))
    if fixed.ministry_id is None:
        errors.append(MissingRequiredField("ministry_id", "Ministry"))
    return errors


def assemble(
    fixed: FixedAttributes,
    definitions: Sequence,
    dynamic_values: Mapping[str, Any],
    side_channel_values: Optional[Mapping[str, Any]] = None,
    strict_select: bool = True,
) -> RegistrationDraft:
    """
    Build a registration draft from the submitted values.

    Args:
        fixed: Fixed attendee attributes (strings are trimmed here)
        definitions: Active field definitions at submission time
        dynamic_values: Submitted values keyed by field name
        side_channel_values: Values for reserved extra_data keys
        strict_select: Reject select values that are not configured options

    Returns:
        RegistrationDraft ready to be persisted

    Raises:
        ValidationError: With every field error found
        ValueError: If a side-channel key is not a reserved key
    """
    side_channel_values = side_channel_values or {}
    unknown_keys = set(side_channel_values) - RESERVED_EXTRA_KEYS
    if unknown_keys:
        raise ValueError(f"Unknown side-channel keys: {sorted(unknown_keys)}")

    fixed = fixed.model_copy(
        update={
            name: value.strip()
            for name, value in fixed.model_dump(exclude={"region", "ministry_id"}).items()
            if isinstance(value, str)
        }
    )
    errors = _check_fixed(fixed)

    extra_data: Dict[str, Any] = {}
    for definition in definitions:
        if not definition.is_active:
            continue
        field_type = coerce_field_type(definition.type)
        value = dynamic_values.get(definition.name)

        if not _is_form_scalar(value):
            errors.append(_not_text(definition.name, definition.label))
            continue
        if is_blank(value):
            # Checkboxes left alone never count as missing, even when required
            if definition.required and field_type != FieldType.CHECKBOX:
                errors.append(MissingRequiredField(definition.name, definition.label))
            continue

        value, value_errors = validate_value(definition, value, strict_select)
        errors.extend(value_errors)
        extra_data[definition.name] = value

    region_id = None
    if isinstance(fixed.region, Canonical):
        region_id = fixed.region.id
    elif isinstance(fixed.region, Fallback):
        extra_data[REGION_FALLBACK_KEY] = fixed.region.name

    for key, value in side_channel_values.items():
        if not _is_form_scalar(value):
            errors.append(_not_text(key))
            continue
        if isinstance(value, str):
            value = value.strip()
        if is_blank(value):
            continue
        if key in extra_data:
            logger.warning(f"Side-channel key '{key}' overrides a form field value")
        extra_data[key] = value

    if errors:
        raise ValidationError(errors)

    return RegistrationDraft(
        referrer_email=fixed.referrer_email,
        attendee_name=fixed.attendee_name,
        attendee_email=fixed.attendee_email,
        attendee_phone=fixed.attendee_phone,
        gender=fixed.gender,
        age_group_ministry=fixed.age_group_ministry,
        region_id=region_id,
        ministry_id=fixed.ministry_id,
        extra_data=extra_data,
    )


def _extend_unreported(errors: List[FieldError], new_errors: Sequence[FieldError]) -> None:
    """Append errors for fields that have no error yet"""
    reported = {error.field for error in errors}
    errors.extend(error for error in new_errors if error.field not in reported)


def split_form_data(form_data: Mapping[str, Any]) -> tuple:
    """
    Split a flat form post into fixed values, dynamic values and side-channel values.

    Returns:
        Tuple of (fixed dict, dynamic dict, side-channel dict)
    """
    fixed = {}
    dynamic = {}
    side_channel = {}
    for key, value in form_data.items():
        if key.startswith(DYNAMIC_INPUT_PREFIX):
            dynamic[key[len(DYNAMIC_INPUT_PREFIX):]] = value
        elif key in RESERVED_EXTRA_KEYS:
            side_channel[key] = value
        else:
            fixed[key] = value
    return fixed, dynamic, side_channel


def assemble_submission(
    form_data: Mapping[str, Any],
    definitions: Sequence,
    regions: Sequence,
    ministries: Sequence,
    strict_select: bool = True,
) -> RegistrationDraft:
    """
    Resolve reference selections and assemble a draft from a raw form post.

    Resolution and assembly errors are reported together, one per field.

    Raises:
        ResolutionError: If no ministries exist (the form is blocked)
        ValidationError: With every field error found
    """
    fixed_values, dynamic_values, side_channel = split_form_data(form_data)
    errors: List[FieldError] = []
    for key in FIXED_FORM_KEYS:
        value = fixed_values.get(key)
        if value is not None and not isinstance(value, str):
            errors.append(_not_text(key))
            fixed_values[key] = None
    # The fallback region name is decided by the resolver, never posted directly
    side_channel.pop(REGION_FALLBACK_KEY, None)

    region = None
    ministry_id = None
    try:
        region = resolve_region(fixed_values.get("region_id"), regions)
    except ValidationError as e:
        _extend_unreported(errors, e.errors)
    try:
        ministry_id = resolve_ministry(fixed_values.get("ministry_id"), ministries)
    except ValidationError as e:
        _extend_unreported(errors, e.errors)

    fixed = FixedAttributes(
        referrer_email=str(fixed_values.get("referrer_email") or ""),
        attendee_name=str(fixed_values.get("attendee_name") or ""),
        attendee_email=str(fixed_values.get("attendee_email") or ""),
        attendee_phone=str(fixed_values.get("attendee_phone") or ""),
        gender=str(fixed_values.get("gender") or DEFAULT_GENDER),
        age_group_ministry=str(fixed_values.get("age_group_ministry") or DEFAULT_AGE_GROUP),
        region=region,
        ministry_id=ministry_id,
    )

    try:
        draft = assemble(fixed, definitions, dynamic_values, side_channel, strict_select)
    except ValidationError as e:
        _extend_unreported(errors, e.errors)
        raise ValidationError(errors)
    if errors:
        raise ValidationError(errors)
    return draft
