"""Schema interpreter: turns a field definition into a rendering directive.

Every field type maps to exactly one control kind through ``CONTROL_TABLE``.
Adding a new field type means adding one entry to the table; nothing else in
the rendering or validation path branches on the raw type string.
"""

import math
import re
from datetime import date
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel

from regdesk.errors import (
    InvalidFieldDefinition,
    InvalidFieldValue,
    InvalidSelectOption,
    UnsupportedFieldType,
    ValidationError,
)
from regdesk.models.field_type import FieldType

TRUTHY_CHECKBOX_VALUES = {"true", "on", "yes", "1"}

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")


class ControlKind(str, Enum):
    """Kind of input control rendered for a field"""

    INPUT = "input"
    SELECT = "select"
    CHECKBOX = "checkbox"
    TEXTAREA = "textarea"


class ControlSpec(BaseModel):
    """Row of the dispatch table"""

    control_kind: ControlKind
    input_type: Optional[str] = None  # HTML input type for INPUT controls


class RenderDirective(BaseModel):
    """Everything a template needs to render one dynamic field"""

    name: str
    label: str
    control_kind: ControlKind
    input_type: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None


CONTROL_TABLE = {
    FieldType.TEXT: ControlSpec(control_kind=ControlKind.INPUT, input_type="text"),
    FieldType.EMAIL: ControlSpec(control_kind=ControlKind.INPUT, input_type="email"),
    FieldType.NUMBER: ControlSpec(
        control_kind=ControlKind.INPUT, input_type="number"
    ),
    FieldType.DATE: ControlSpec(control_kind=ControlKind.INPUT, input_type="date"),
    FieldType.SELECT: ControlSpec(control_kind=ControlKind.SELECT),
    FieldType.CHECKBOX: ControlSpec(control_kind=ControlKind.CHECKBOX),
    FieldType.TEXTAREA: ControlSpec(control_kind=ControlKind.TEXTAREA),
}


def coerce_field_type(raw_type: Any) -> FieldType:
    """Convert a stored or submitted type value into a FieldType"""
    if isinstance(raw_type, FieldType):
        return raw_type
    try:
        return FieldType(raw_type)
    except ValueError:
        raise UnsupportedFieldType(raw_type)


def control_for(raw_type: Any) -> ControlSpec:
    field_type = coerce_field_type(raw_type)
    try:
        return CONTROL_TABLE[field_type]
    except KeyError:
        raise UnsupportedFieldType(raw_type)


def interpret(definition) -> RenderDirective:
    """
    Map a field definition to its rendering directive.

    Args:
        definition: Any object exposing name, label, type, required and options
            (a FormField row or a plain namespace)

    Returns:
        RenderDirective for the field

    Raises:
        UnsupportedFieldType: If the definition's type is not recognized
    """
    spec = control_for(definition.type)
    options = None
    if spec.control_kind == ControlKind.SELECT:
        options = list(definition.options or [])

    return RenderDirective(
        name=definition.name,
        label=definition.label,
        control_kind=spec.control_kind,
        input_type=spec.input_type,
        required=bool(definition.required),
        options=options,
    )


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def validate_value(definition, value: Any, strict_select: bool = True) -> Tuple[Any, list]:
    """
    Normalize a submitted value for a definition and collect value errors.

    Blank values are not checked here; requiredness is the assembler's job.

    Returns:
        Tuple of (normalized value, list of FieldError)
    """
    field_type = coerce_field_type(definition.type)
    spec = CONTROL_TABLE[field_type]

    if spec.control_kind == ControlKind.CHECKBOX:
        if isinstance(value, bool):
            return value, []
        return str(value).strip().lower() in TRUTHY_CHECKBOX_VALUES, []

    if isinstance(value, str):
        value = value.strip()

    errors = []
    if field_type == FieldType.NUMBER:
        try:
            finite = math.isfinite(float(value))
        except (TypeError, ValueError):
            finite = False
        if not finite:
            errors.append(
                InvalidFieldValue(
                    definition.name, f"{definition.label} must be a valid number"
                )
            )
    elif field_type == FieldType.DATE:
        try:
            date.fromisoformat(str(value))
        except ValueError:
            errors.append(
                InvalidFieldValue(
                    definition.name,
                    f"{definition.label} must be a date (YYYY-MM-DD)",
                )
            )
    elif field_type == FieldType.EMAIL:
        if not EMAIL_PATTERN.match(str(value)):
            errors.append(
                InvalidFieldValue(
                    definition.name, f"{definition.label} is not a valid email"
                )
            )
    elif field_type == FieldType.SELECT and strict_select:
        if value not in (definition.options or []):
            errors.append(
                InvalidSelectOption(definition.name, value, label=definition.label)
            )

    return value, errors


def normalize_field_name(name: str) -> str:
    """Lowercase the key and replace whitespace with underscores"""
    return re.sub(r"\s", "_", (name or "").strip().lower())


def parse_options_text(options_text: Optional[str]) -> List[str]:
    """Parse the admin options editor value ("A, B, C") into a list"""
    if not options_text:
        return []
    return [opt.strip() for opt in options_text.split(",") if opt.strip()]


def validate_definition(data: dict) -> dict:
    """
    Validate and normalize a field definition before it is written.

    Args:
        data: Dictionary with label, name, type, required, options,
            field_order and is_active

    Returns:
        Normalized copy of the definition data

    Raises:
        UnsupportedFieldType: If type is not recognized
        ValidationError: If label/name are empty or a select has no options
    """
    cleaned = dict(data)
    field_type = coerce_field_type(cleaned.get("type", FieldType.TEXT.value))
    cleaned["type"] = field_type
    cleaned["name"] = normalize_field_name(cleaned.get("name", ""))
    cleaned["label"] = (cleaned.get("label") or "").strip()

    errors = []
    if not cleaned["label"]:
        errors.append(InvalidFieldDefinition("label", "Label is required"))
    if not cleaned["name"]:
        errors.append(InvalidFieldDefinition("name", "Field name is required"))

    if field_type == FieldType.SELECT:
        options = [str(opt).strip() for opt in cleaned.get("options") or []]
        options = [opt for opt in options if opt]
        if not options:
            errors.append(
                InvalidFieldDefinition(
                    cleaned["name"] or "options",
                    "Select fields need at least one option",
                )
            )
        cleaned["options"] = options
    else:
        cleaned["options"] = None

    if errors:
        raise ValidationError(errors)
    return cleaned
