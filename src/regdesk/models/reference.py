"""SQLModel reference data models (regions and ministries)"""

import uuid

from sqlmodel import Field, SQLModel


class Region(SQLModel, table=True):
    """Region an attendee comes from; seeded by migration"""

    __tablename__ = "regions"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str
    is_active: bool = Field(default=True)


class Ministry(SQLModel, table=True):
    """Ministry an attendee serves in; managed from the admin console"""

    __tablename__ = "ministries"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(unique=True)
    is_active: bool = Field(default=True)
