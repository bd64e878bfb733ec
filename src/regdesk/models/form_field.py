"""SQLModel FormField model for admin-configured form fields"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlalchemy import Enum as SQLEnum
from sqlmodel import Field, SQLModel

from regdesk.models.field_type import FieldType


class FormField(SQLModel, table=True):
    """Model for dynamic form fields shown on the public registration form"""

    __tablename__ = "form_fields"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    label: str  # Display label (e.g., 'T-shirt size')
    name: str = Field(index=True)  # Key inside registrations.extra_data
    type: FieldType = Field(
        sa_column=Column(
            "type",
            SQLEnum(
                FieldType,
                name="form_field_type",
                values_callable=lambda x: [e.value for e in x],
            ),
            nullable=False,
        )
    )
    required: bool = Field(default=False)
    options: Optional[List[str]] = Field(
        default=None, sa_column=Column(JSON)
    )  # For select fields only
    field_order: int = Field(default=0)  # Display order
    is_active: bool = Field(default=True)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
