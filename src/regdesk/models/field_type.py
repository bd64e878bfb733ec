from enum import Enum


class FieldType(str, Enum):
    """Types an admin can pick for a dynamic registration question"""

    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    SELECT = "select"
    CHECKBOX = "checkbox"
    TEXTAREA = "textarea"
    DATE = "date"  # ISO YYYY-MM-DD
