"""Error taxonomy shared by services and routers"""

from typing import List, Optional

from pydantic import BaseModel


class FieldError(BaseModel):
    """A single problem found while validating a submission or definition"""

    code: str
    field: str
    message: str


class MissingRequiredField(FieldError):
    code: str = "missing_required_field"

    def __init__(self, field: str, label: Optional[str] = None, **data):
        data.setdefault("message", f"{label or field} is required")
        super().__init__(field=field, **data)


class InvalidSelectOption(FieldError):
    code: str = "invalid_select_option"

    def __init__(self, field: str, value=None, label: Optional[str] = None, **data):
        data.setdefault("message", f"Invalid option for {label or field}: {value!r}")
        super().__init__(field=field, **data)


class InvalidFieldValue(FieldError):
    code: str = "invalid_field_value"

    def __init__(self, field: str, message: str, **data):
        super().__init__(field=field, message=message, **data)


class DuplicateFieldName(FieldError):
    code: str = "duplicate_field_name"

    def __init__(self, field: str, **data):
        data.setdefault(
            "message", f"An active field named '{field}' already exists"
        )
        super().__init__(field=field, **data)


class InvalidFieldDefinition(FieldError):
    code: str = "invalid_field_definition"

    def __init__(self, field: str, message: str, **data):
        super().__init__(field=field, message=message, **data)


class UnknownSelection(FieldError):
    code: str = "unknown_selection"

    def __init__(self, field: str, value=None, **data):
        data.setdefault("message", f"Unknown {field} selection: {value!r}")
        super().__init__(field=field, **data)


class RegDeskError(Exception):
    """Base class for all application errors"""


class ValidationError(RegDeskError):
    """One or more field errors; raised before anything is written"""

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        summary = "; ".join(e.message for e in self.errors) or "Validation failed"
        super().__init__(summary)

    def codes(self) -> List[str]:
        return [e.code for e in self.errors]

    def to_dict(self) -> dict:
        return {
            "detail": str(self),
            "errors": [e.model_dump() for e in self.errors],
        }


class UnsupportedFieldType(RegDeskError):
    """Field type outside the recognized set"""

    def __init__(self, field_type):
        self.field_type = field_type
        super().__init__(f"Unsupported field type: {field_type!r}")


class ResolutionError(RegDeskError):
    """Reference data needed to complete the form is unavailable"""


class BackendError(RegDeskError):
    """Failure reported by the database or the identity service"""


class AuthError(RegDeskError):
    """Invalid credentials or a missing/expired admin session"""
