"""SQLModel Registration model"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

# Reserved extra_data keys written by the assembler outside the field schema
REGION_FALLBACK_KEY = "region_fallback_name"
TOWN_CITY_KEY = "town_city"
ALTERNATE_PHONE_KEY = "alternate_phone"

RESERVED_EXTRA_KEYS = frozenset(
    {REGION_FALLBACK_KEY, TOWN_CITY_KEY, ALTERNATE_PHONE_KEY}
)


class Registration(SQLModel, table=True):
    """Registration model for public form submissions"""

    __tablename__ = "registrations"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(timezone.utc), index=True
    )
    referrer_email: str = Field(index=True)
    attendee_name: str
    attendee_email: str
    attendee_phone: str
    gender: str
    age_group_ministry: str
    region_id: Optional[uuid.UUID] = Field(default=None, foreign_key="regions.id")
    ministry_id: uuid.UUID = Field(foreign_key="ministries.id")
    extra_data: dict = Field(default_factory=dict, sa_column=Column(JSON))
