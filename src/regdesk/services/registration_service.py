"""Registration service for handling form submissions and referral lookups"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from regdesk.errors import BackendError
from regdesk.models.reference import Ministry, Region
from regdesk.models.registration import REGION_FALLBACK_KEY, Registration
from regdesk.services.submission_assembler import RegistrationDraft

logger = logging.getLogger(__name__)


class RegistrationRow(BaseModel):
    """Registration joined with region and ministry display names"""

    id: uuid.UUID
    created_at: Optional[datetime] = None
    referrer_email: str
    attendee_name: str
    attendee_email: str
    attendee_phone: str
    gender: str
    age_group_ministry: str
    region_id: Optional[uuid.UUID] = None
    region_name: Optional[str] = None
    ministry_id: Optional[uuid.UUID] = None
    ministry_name: Optional[str] = None
    extra_data: Dict[str, Any] = {}


class ReferralEntry(BaseModel):
    """What a referrer is allowed to see about the people they registered"""

    attendee_name: str
    region_name: Optional[str] = None
    ministry_name: Optional[str] = None
    created_at: Optional[datetime] = None


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class RegistrationService:
    """Service for managing registrations"""

    def __init__(self, db_session: Session):
        self.db = db_session

    def create_registration(self, draft: RegistrationDraft) -> Registration:
        """
        Persist an assembled registration draft.

        Args:
            draft: Validated draft from the submission assembler

        Returns:
            Registration: The created registration (id and created_at assigned)

        Raises:
            BackendError: If the database rejects the write
        """
        registration = Registration(**draft.model_dump())

        try:
            self.db.add(registration)
            self.db.commit()
            self.db.refresh(registration)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating registration: {type(e).__name__}: {e}")
            raise BackendError(f"Registration failed: {e}") from e

        logger.info(
            f"Created registration {registration.id} referred by {registration.referrer_email}"
        )
        return registration

    def get_registration_by_id(
        self, registration_id: uuid.UUID
    ) -> Optional[Registration]:
        """Get a registration by ID"""
        return self.db.get(Registration, registration_id)

    def _joined(self):
        return (
            select(Registration, Region.name, Ministry.name)
            .join(Region, Registration.region_id == Region.id, isouter=True)
            .join(Ministry, Registration.ministry_id == Ministry.id, isouter=True)
        )

    def list_registrations(self) -> List[RegistrationRow]:
        """All registrations with region/ministry names, newest first"""
        statement = self._joined().order_by(Registration.created_at.desc())
        try:
            results = self.db.exec(statement).all()
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving registrations: {e}")
            raise BackendError(f"Failed to load registrations: {e}") from e

        rows = []
        for registration, region_name, ministry_name in results:
            rows.append(
                RegistrationRow(
                    **registration.model_dump(),
                    region_name=region_name,
                    ministry_name=ministry_name,
                )
            )
        logger.info(f"Retrieved {len(rows)} registrations")
        return rows

    def get_referral_count(self, referrer_email: str) -> int:
        """Number of registrations filed under a referrer email"""
        email = _normalize_email(referrer_email)
        statement = select(func.count(Registration.id)).where(
            func.lower(Registration.referrer_email) == email
        )
        try:
            return int(self.db.exec(statement).one())
        except SQLAlchemyError as e:
            logger.error(f"Error counting referrals for {email}: {e}")
            raise BackendError(f"Failed to count referrals: {e}") from e

    def get_referrals(self, referrer_email: str) -> List[ReferralEntry]:
        """Registrations filed under a referrer email, newest first"""
        email = _normalize_email(referrer_email)
        statement = (
            self._joined()
            .where(func.lower(Registration.referrer_email) == email)
            .order_by(Registration.created_at.desc())
        )
        try:
            results = self.db.exec(statement).all()
        except SQLAlchemyError as e:
            logger.error(f"Error listing referrals for {email}: {e}")
            raise BackendError(f"Failed to list referrals: {e}") from e

        return [
            ReferralEntry(
                attendee_name=registration.attendee_name,
                region_name=region_name
                or (registration.extra_data or {}).get(REGION_FALLBACK_KEY),
                ministry_name=ministry_name,
                created_at=registration.created_at,
            )
            for registration, region_name, ministry_name in results
        ]
