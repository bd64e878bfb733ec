"""Region and Ministry services - reference data used by the public form"""

import csv
import io
import logging
import uuid
from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from regdesk.errors import BackendError
from regdesk.models.reference import Ministry, Region

logger = logging.getLogger(__name__)


class IngestResult(BaseModel):
    """Outcome of a bulk ministry upload"""

    created: List[str]
    skipped: List[str]


class RegionService:
    """Service for reading and toggling regions"""

    def __init__(self, db_session: Session):
        self.db = db_session

    def list_regions(self, active_only: bool = False) -> List[Region]:
        """List regions ordered by name"""
        statement = select(Region).order_by(Region.name)
        if active_only:
            statement = statement.where(Region.is_active == True)  # noqa: E712
        try:
            return list(self.db.exec(statement).all())
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving regions: {e}")
            raise BackendError(f"Failed to load regions: {e}") from e

    def set_active(self, region_id: uuid.UUID, active: bool) -> Optional[Region]:
        """Show or hide a region on the public form"""
        region = self.db.get(Region, region_id)
        if not region:
            return None
        region.is_active = active
        try:
            self.db.add(region)
            self.db.commit()
            self.db.refresh(region)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error toggling region {region_id}: {e}")
            raise BackendError(f"Failed to update region: {e}") from e

        logger.info(f"Region '{region.name}' is_active={region.is_active}")
        return region

    def toggle_active(self, region_id: uuid.UUID) -> Optional[Region]:
        region = self.db.get(Region, region_id)
        if not region:
            return None
        return self.set_active(region_id, not region.is_active)


def parse_bulk_text(text: str) -> List[str]:
    """
    Turn pasted text into ministry names.

    One name per line. Names are trimmed, blanks dropped and exact
    (case-sensitive) duplicates collapsed, keeping first-seen order.
    """
    names = []
    seen = set()
    for line in (text or "").splitlines():
        name = line.strip()
        if name and name not in seen:
            seen.add(name)
            names.append(name)
    return names


def csv_first_column(text: str) -> str:
    """Reduce uploaded CSV content to one name per line (first column)"""
    lines = [row[0] for row in csv.reader(io.StringIO(text or "")) if row]
    return "\n".join(lines)


class MinistryService:
    """Service for managing ministries"""

    def __init__(self, db_session: Session):
        self.db = db_session

    def list_ministries(self, active_only: bool = False) -> List[Ministry]:
        """List ministries ordered by name"""
        statement = select(Ministry).order_by(Ministry.name)
        if active_only:
            statement = statement.where(Ministry.is_active == True)  # noqa: E712
        try:
            return list(self.db.exec(statement).all())
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving ministries: {e}")
            raise BackendError(f"Failed to load ministries: {e}") from e

    def get_by_name(self, name: str) -> Optional[Ministry]:
        return self.db.exec(select(Ministry).where(Ministry.name == name)).first()

    def create_ministry(self, name: str) -> Optional[Ministry]:
        """
        Create a single ministry.

        Returns:
            The new Ministry, the existing one if the name is taken, or None
            for a blank name
        """
        name = (name or "").strip()
        if not name:
            return None
        existing = self.get_by_name(name)
        if existing:
            logger.info(f"Ministry '{name}' already exists")
            return existing

        ministry = Ministry(name=name)
        try:
            self.db.add(ministry)
            self.db.commit()
            self.db.refresh(ministry)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating ministry '{name}': {e}")
            raise BackendError(f"Failed to create ministry: {e}") from e

        logger.info(f"Created ministry '{name}'")
        return ministry

    def set_active(self, ministry_id: uuid.UUID, active: bool) -> Optional[Ministry]:
        ministry = self.db.get(Ministry, ministry_id)
        if not ministry:
            return None
        ministry.is_active = active
        try:
            self.db.add(ministry)
            self.db.commit()
            self.db.refresh(ministry)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error toggling ministry {ministry_id}: {e}")
            raise BackendError(f"Failed to update ministry: {e}") from e
        return ministry

    def toggle_active(self, ministry_id: uuid.UUID) -> Optional[Ministry]:
        ministry = self.db.get(Ministry, ministry_id)
        if not ministry:
            return None
        return self.set_active(ministry_id, not ministry.is_active)

    def _existing_names(self, names: List[str]) -> set:
        statement = select(Ministry.name).where(Ministry.name.in_(names))
        return set(self.db.exec(statement).all())

    def bulk_ingest(self, text: str) -> IngestResult:
        """
        Insert every new name from a pasted list; existing names are skipped.

        Args:
            text: Pasted text or uploaded file contents

        Returns:
            IngestResult with created and skipped names
        """
        names = parse_bulk_text(text)
        if not names:
            return IngestResult(created=[], skipped=[])

        existing = self._existing_names(names)
        created = []
        skipped = []
        for name in names:
            if name in existing:
                skipped.append(name)
                continue
            try:
                self.db.add(Ministry(name=name))
                self.db.commit()
            except IntegrityError:
                # Inserted concurrently since the lookup
                self.db.rollback()
                logger.info(f"Ministry '{name}' already exists, skipping")
                skipped.append(name)
                continue
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Error uploading ministries: {e}")
                raise BackendError(f"Error uploading: {e}") from e
            created.append(name)

        logger.info(
            f"Bulk ministry upload: {len(created)} created, {len(skipped)} skipped"
        )
        return IngestResult(created=created, skipped=skipped)
