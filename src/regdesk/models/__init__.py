"""Database models for RegDesk"""

from regdesk.models.field_type import FieldType
from regdesk.models.form_field import FormField
from regdesk.models.reference import Ministry, Region
from regdesk.models.registration import Registration

__all__ = [
    "FieldType",
    "FormField",
    "Ministry",
    "Region",
    "Registration",
]
