"""FormField service for managing dynamic form fields"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from regdesk.errors import BackendError, DuplicateFieldName, ValidationError
from regdesk.models.form_field import FormField
from regdesk.services.schema_interpreter import validate_definition

logger = logging.getLogger(__name__)


class FormFieldService:
    """Service for managing form field definitions"""

    def __init__(self, db_session: Session):
        self.db = db_session

    def _ordered(self, statement):
        return statement.order_by(
            FormField.field_order, FormField.created_at, FormField.id
        )

    def get_active_fields(self) -> List[FormField]:
        """
        Get the active form fields in display order

        Returns:
            List of FormField instances ordered by field_order, then insertion
        """
        try:
            statement = self._ordered(
                select(FormField).where(FormField.is_active == True)  # noqa: E712
            )
            fields = list(self.db.exec(statement).all())
            logger.info(f"Retrieved {len(fields)} active form fields")
            return fields
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving active form fields: {e}")
            raise BackendError(f"Failed to load form fields: {e}") from e

    def get_all_fields(self) -> List[FormField]:
        """Get every form field, active or not, in display order"""
        try:
            return list(self.db.exec(self._ordered(select(FormField))).all())
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving form fields: {e}")
            raise BackendError(f"Failed to load form fields: {e}") from e

    def get_field(self, field_id: uuid.UUID) -> Optional[FormField]:
        return self.db.get(FormField, field_id)

    def _ensure_unique_name(
        self, name: str, exclude_id: Optional[uuid.UUID] = None
    ) -> None:
        statement = select(FormField).where(
            FormField.name == name, FormField.is_active == True  # noqa: E712
        )
        for existing in self.db.exec(statement).all():
            if existing.id != exclude_id:
                raise ValidationError([DuplicateFieldName(name)])

    def _commit(self, form_field: FormField, action: str) -> FormField:
        try:
            self.db.add(form_field)
            self.db.commit()
            self.db.refresh(form_field)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error trying to {action} form field {form_field.name}: {e}")
            raise BackendError(f"Failed to {action} form field: {e}") from e
        return form_field

    def create_field(self, field_data: dict) -> FormField:
        """
        Create a form field definition

        Args:
            field_data: Dictionary with label, name, type, required, options,
                field_order and is_active

        Returns:
            The created FormField

        Raises:
            ValidationError: If the definition is invalid or the name is taken
            UnsupportedFieldType: If the type is not recognized
        """
        cleaned = validate_definition(field_data)
        is_active = cleaned.get("is_active", True)
        if is_active:
            self._ensure_unique_name(cleaned["name"])

        form_field = FormField(
            label=cleaned["label"],
            name=cleaned["name"],
            type=cleaned["type"],
            required=bool(cleaned.get("required", False)),
            options=cleaned["options"],
            field_order=int(cleaned.get("field_order") or 0),
            is_active=is_active,
        )
        form_field = self._commit(form_field, "create")
        logger.info(f"Created form field '{form_field.name}' ({form_field.type.value})")
        return form_field

    def update_field(self, field_id: uuid.UUID, field_data: dict) -> Optional[FormField]:
        """
        Update a form field definition; missing keys keep their current values

        Returns:
            The updated FormField, or None if it does not exist
        """
        form_field = self.get_field(field_id)
        if not form_field:
            return None

        merged = {
            "label": form_field.label,
            "name": form_field.name,
            "type": form_field.type,
            "required": form_field.required,
            "options": form_field.options,
            "field_order": form_field.field_order,
            "is_active": form_field.is_active,
        }
        merged.update({k: v for k, v in field_data.items() if v is not None})
        cleaned = validate_definition(merged)
        if cleaned["is_active"]:
            self._ensure_unique_name(cleaned["name"], exclude_id=form_field.id)

        form_field.label = cleaned["label"]
        form_field.name = cleaned["name"]
        form_field.type = cleaned["type"]
        form_field.required = bool(cleaned["required"])
        form_field.options = cleaned["options"]
        form_field.field_order = int(cleaned["field_order"] or 0)
        form_field.is_active = bool(cleaned["is_active"])

        form_field = self._commit(form_field, "update")
        logger.info(f"Updated form field {form_field.id} ('{form_field.name}')")
        return form_field

    def toggle_active(self, field_id: uuid.UUID) -> Optional[FormField]:
        """Flip is_active; re-activation still enforces unique names"""
        form_field = self.get_field(field_id)
        if not form_field:
            return None
        if not form_field.is_active:
            self._ensure_unique_name(form_field.name, exclude_id=form_field.id)
        form_field.is_active = not form_field.is_active
        return self._commit(form_field, "toggle")
