"""Admin console routes: login, registrations, ministries, regions and form fields"""

import logging
import uuid
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel
from sqlmodel import Session

from regdesk.auth.dependencies import get_identity_client, require_admin_session
from regdesk.auth.identity import IdentityClient
from regdesk.auth.models import AdminSession
from regdesk.errors import AuthError
from regdesk.models.database import get_db
from regdesk.services.form_field_service import FormFieldService
from regdesk.services.reference_service import (
    MinistryService,
    RegionService,
    csv_first_column,
    parse_bulk_text,
)
from regdesk.services.registration_service import RegistrationService
from regdesk.services.registration_view import (
    CSV_FILENAME,
    SortDirection,
    SortState,
    export_csv,
    filter_registrations,
    sort_registrations,
)
from regdesk.services.schema_interpreter import interpret, parse_options_text

router = APIRouter(prefix="/admin", tags=["Admin"])

template_dir = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=str(template_dir))

logger = logging.getLogger(__name__)

SORT_SESSION_KEY = "registrations_sort"


class MinistryPayload(BaseModel):
    name: str


class BulkPayload(BaseModel):
    text: str


class FormFieldPayload(BaseModel):
    """Create/update body for a form field; options may come as a list or as text"""

    label: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    required: Optional[bool] = None
    options: Optional[List[str]] = None
    options_text: Optional[str] = None
    field_order: Optional[int] = None
    is_active: Optional[bool] = None

    def to_field_data(self) -> dict:
        data = self.model_dump(exclude={"options_text"}, exclude_none=True)
        if self.options_text is not None:
            data["options"] = parse_options_text(self.options_text)
        return data


# Login


@router.get("/login", include_in_schema=False)
async def login_page(request: Request):
    """Login notice shown to anyone without an admin session"""
    return templates.TemplateResponse(request, "login.html", {"error": None})


@router.post("/login", include_in_schema=False)
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    identity: IdentityClient = Depends(get_identity_client),
):
    """Exchange credentials for an admin session"""
    try:
        admin = await identity.sign_in(email.strip(), password)
    except AuthError as e:
        return templates.TemplateResponse(
            request, "login.html", {"error": str(e)}, status_code=401
        )

    admin.save(request.session)
    return RedirectResponse(url="/admin/registrations", status_code=303)


@router.post("/logout", include_in_schema=False)
async def logout(request: Request):
    """Clear the admin session"""
    AdminSession.clear(request.session)
    request.session.pop(SORT_SESSION_KEY, None)
    return RedirectResponse(url="/admin/login", status_code=303)


# Registrations


def _sort_state(request: Request) -> SortState:
    data = request.session.get(SORT_SESSION_KEY)
    return SortState(**data) if data else SortState()


def _filtered_sorted(
    db: Session,
    request: Request,
    search: Optional[str],
    region_id: Optional[uuid.UUID],
    ministry_id: Optional[uuid.UUID],
    sort: Optional[str],
    direction: Optional[SortDirection],
):
    rows = RegistrationService(db).list_registrations()
    filtered = filter_registrations(rows, search, region_id, ministry_id)

    state = _sort_state(request)
    if sort:
        state = SortState(column=sort, direction=direction or SortDirection.ASC)
    try:
        ordered = sort_registrations(filtered, state.column, state.direction)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return rows, ordered, state


@router.get("/registrations")
async def list_registrations(
    request: Request,
    search: Optional[str] = None,
    region_id: Optional[uuid.UUID] = None,
    ministry_id: Optional[uuid.UUID] = None,
    sort: Optional[str] = None,
    direction: Optional[SortDirection] = None,
    db: Session = Depends(get_db),
    admin: AdminSession = Depends(require_admin_session),
):
    """Filtered and sorted registrations plus the filter choices"""
    rows, ordered, state = _filtered_sorted(
        db, request, search, region_id, ministry_id, sort, direction
    )
    return {
        "total": len(rows),
        "count": len(ordered),
        "sort": state.model_dump(mode="json"),
        "registrations": [row.model_dump(mode="json") for row in ordered],
        "regions": RegionService(db).list_regions(),
        "ministries": MinistryService(db).list_ministries(),
    }


@router.post("/registrations/sort/{column}")
async def toggle_sort(
    request: Request,
    column: str,
    admin: AdminSession = Depends(require_admin_session),
):
    """Toggle the session-held sort column/direction"""
    try:
        state = _sort_state(request).toggle(column)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    request.session[SORT_SESSION_KEY] = state.model_dump(mode="json")
    return state


@router.get("/registrations/export")
async def export_registrations(
    request: Request,
    search: Optional[str] = None,
    region_id: Optional[uuid.UUID] = None,
    ministry_id: Optional[uuid.UUID] = None,
    sort: Optional[str] = None,
    direction: Optional[SortDirection] = None,
    db: Session = Depends(get_db),
    admin: AdminSession = Depends(require_admin_session),
):
    """Download the filtered registrations as CSV"""
    _, ordered, _ = _filtered_sorted(
        db, request, search, region_id, ministry_id, sort, direction
    )
    logger.info(f"Admin {admin.email} exported {len(ordered)} registrations")
    return Response(
        content=export_csv(ordered),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
    )


# Ministries


@router.get("/ministries")
async def list_ministries(
    db: Session = Depends(get_db),
    admin: AdminSession = Depends(require_admin_session),
):
    return MinistryService(db).list_ministries()


@router.post("/ministries", status_code=201)
async def create_ministry(
    payload: MinistryPayload,
    db: Session = Depends(get_db),
    admin: AdminSession = Depends(require_admin_session),
):
    ministry = MinistryService(db).create_ministry(payload.name)
    if ministry is None:
        raise HTTPException(status_code=400, detail="Ministry name is required")
    return ministry


@router.post("/ministries/{ministry_id}/toggle")
async def toggle_ministry(
    ministry_id: uuid.UUID,
    db: Session = Depends(get_db),
    admin: AdminSession = Depends(require_admin_session),
):
    ministry = MinistryService(db).toggle_active(ministry_id)
    if not ministry:
        raise HTTPException(status_code=404, detail="Ministry not found")
    return ministry


@router.post("/ministries/bulk")
async def bulk_ingest_ministries(
    payload: BulkPayload,
    db: Session = Depends(get_db),
    admin: AdminSession = Depends(require_admin_session),
):
    """Insert every new name from pasted text, one per line"""
    return MinistryService(db).bulk_ingest(payload.text)


@router.post("/ministries/upload")
async def preview_ministry_upload(
    file: UploadFile = File(...),
    admin: AdminSession = Depends(require_admin_session),
):
    """
    Read an uploaded .txt/.csv file and return the names it contains.

    Nothing is written; the returned text is meant to be reviewed and sent
    to /admin/ministries/bulk.
    """
    raw = await file.read()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File must be UTF-8 text")

    if (file.filename or "").lower().endswith(".csv"):
        text = csv_first_column(text)

    return {"filename": file.filename, "text": text, "names": parse_bulk_text(text)}


# Regions


@router.get("/regions")
async def list_regions(
    db: Session = Depends(get_db),
    admin: AdminSession = Depends(require_admin_session),
):
    return RegionService(db).list_regions()


@router.post("/regions/{region_id}/toggle")
async def toggle_region(
    region_id: uuid.UUID,
    db: Session = Depends(get_db),
    admin: AdminSession = Depends(require_admin_session),
):
    region = RegionService(db).toggle_active(region_id)
    if not region:
        raise HTTPException(status_code=404, detail="Region not found")
    return region


# Form fields


@router.get("/form-fields")
async def list_form_fields(
    db: Session = Depends(get_db),
    admin: AdminSession = Depends(require_admin_session),
):
    """Every field definition, with its rendering directive"""
    return [
        {"field": field, "directive": interpret(field)}
        for field in FormFieldService(db).get_all_fields()
    ]


@router.post("/form-fields", status_code=201)
async def create_form_field(
    payload: FormFieldPayload,
    db: Session = Depends(get_db),
    admin: AdminSession = Depends(require_admin_session),
):
    return FormFieldService(db).create_field(payload.to_field_data())


@router.put("/form-fields/{field_id}")
async def update_form_field(
    field_id: uuid.UUID,
    payload: FormFieldPayload,
    db: Session = Depends(get_db),
    admin: AdminSession = Depends(require_admin_session),
):
    form_field = FormFieldService(db).update_field(field_id, payload.to_field_data())
    if not form_field:
        raise HTTPException(status_code=404, detail="Form field not found")
    return form_field


@router.post("/form-fields/{field_id}/toggle")
async def toggle_form_field(
    field_id: uuid.UUID,
    db: Session = Depends(get_db),
    admin: AdminSession = Depends(require_admin_session),
):
    form_field = FormFieldService(db).toggle_active(field_id)
    if not form_field:
        raise HTTPException(status_code=404, detail="Form field not found")
    return form_field
