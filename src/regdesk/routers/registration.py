"""Public registration form and referral lookup endpoints"""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.templating import Jinja2Templates
from sqlmodel import Session

from regdesk.auth.dependencies import get_theme_preference
from regdesk.auth.models import ThemePreference
from regdesk.config import config
from regdesk.models.database import get_db
from regdesk.services.form_field_service import FormFieldService
from regdesk.services.reference_service import MinistryService, RegionService
from regdesk.services.registration_form import FormPlan, build_form_plan
from regdesk.services.registration_service import RegistrationService
from regdesk.services.submission_assembler import assemble_submission

router = APIRouter(tags=["Registration"])

# Get template directory relative to this file
template_dir = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=str(template_dir))

logger = logging.getLogger(__name__)


def _load_form_inputs(db: Session):
    """Active regions, ministries and field definitions, in that order"""
    regions = RegionService(db).list_regions(active_only=True)
    ministries = MinistryService(db).list_ministries(active_only=True)
    definitions = FormFieldService(db).get_active_fields()
    return regions, ministries, definitions


@router.get("/", include_in_schema=False)
async def serve_registration_form(
    request: Request,
    db: Session = Depends(get_db),
    theme: ThemePreference = Depends(get_theme_preference),
):
    """Serve the public registration form"""
    plan = build_form_plan(*_load_form_inputs(db))
    if plan.blocked:
        logger.warning(f"Registration form blocked: {plan.blocked_reason}")

    return templates.TemplateResponse(
        request,
        "registration_form.html",
        {"plan": plan, "theme": theme.get()},
    )


@router.get("/api/form", response_model=FormPlan)
async def get_form_plan(db: Session = Depends(get_db)):
    """Rendering plan for clients that build the form themselves"""
    return build_form_plan(*_load_form_inputs(db))


@router.post("/")
async def submit_registration(request: Request, db: Session = Depends(get_db)):
    """Handle a registration form submission"""
    form_data = await request.form()
    logger.info(f"Submitting registration with fields: {sorted(form_data.keys())}")

    regions, ministries, definitions = _load_form_inputs(db)
    draft = assemble_submission(
        form_data,
        definitions,
        regions,
        ministries,
        strict_select=config["strict_select_options"],
    )
    registration = RegistrationService(db).create_registration(draft)

    return {
        "success": True,
        "message": "Registration successful!",
        "registration_id": str(registration.id),
    }


@router.get("/api/referrals")
async def get_referrals(email: str = "", db: Session = Depends(get_db)):
    """People registered under a referrer email"""
    email = email.strip()
    if not email:
        raise HTTPException(status_code=400, detail="Email is required")

    registration_service = RegistrationService(db)
    count = registration_service.get_referral_count(email)
    referrals = registration_service.get_referrals(email)
    return {
        "email": email.lower(),
        "count": count,
        "referrals": [r.model_dump(mode="json") for r in referrals],
    }
