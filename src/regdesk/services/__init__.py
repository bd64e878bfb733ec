"""Service layer for RegDesk"""

from regdesk.services.form_field_service import FormFieldService
from regdesk.services.reference_service import (
    IngestResult,
    MinistryService,
    RegionService,
)
from regdesk.services.registration_service import RegistrationService

__all__ = [
    "FormFieldService",
    "IngestResult",
    "MinistryService",
    "RegionService",
    "RegistrationService",
]
