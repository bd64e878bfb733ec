"""Rendering plan for the public registration form"""

from typing import List, Optional, Sequence

from pydantic import BaseModel

from regdesk.errors import ResolutionError
from regdesk.services.reference_resolver import (
    ChoiceOption,
    ministry_options,
    region_options,
)
from regdesk.services.schema_interpreter import RenderDirective, interpret
from regdesk.services.submission_assembler import (
    AGE_GROUP_CHOICES,
    DEFAULT_AGE_GROUP,
    DEFAULT_GENDER,
    DYNAMIC_INPUT_PREFIX,
    GENDER_CHOICES,
)


class FormPlan(BaseModel):
    """Everything the public form needs to render"""

    gender_choices: List[str] = GENDER_CHOICES
    default_gender: str = DEFAULT_GENDER
    age_group_choices: List[str] = AGE_GROUP_CHOICES
    default_age_group: str = DEFAULT_AGE_GROUP
    regions: List[ChoiceOption]
    using_fallback_regions: bool
    ministries: List[ChoiceOption]
    fields: List[RenderDirective]
    input_prefix: str = DYNAMIC_INPUT_PREFIX
    blocked: bool = False
    blocked_reason: Optional[str] = None


def build_form_plan(
    regions: Sequence, ministries: Sequence, definitions: Sequence
) -> FormPlan:
    """
    Build the rendering plan from active reference rows and field definitions.

    A form with no ministries is returned with ``blocked`` set instead of
    raising, so the page can explain why it cannot be completed.
    """
    blocked_reason = None
    try:
        ministry_choices = ministry_options(ministries)
    except ResolutionError as e:
        ministry_choices = []
        blocked_reason = str(e)

    return FormPlan(
        regions=region_options(regions),
        using_fallback_regions=not regions,
        ministries=ministry_choices,
        fields=[interpret(definition) for definition in definitions],
        blocked=blocked_reason is not None,
        blocked_reason=blocked_reason,
    )
