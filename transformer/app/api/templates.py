"""
Template catalogue endpoint.

Lists the template names currently present in the template store, so
that clients can discover valid values for the ?template parameter of
the transformation endpoints. Read-only.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from transformer.app.api.dependencies import get_template_engine
from transformer.app.services.template_engine import TemplateEngine

router = APIRouter(tags=["Templates"])


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class TemplateListResponse(BaseModel):
    templates: List[str]


# ---------------------------------------------------------------------------
# GET /api/templates
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=TemplateListResponse,
    summary="List templates in the template store",
)
def list_templates(
    engine: Annotated[TemplateEngine, Depends(get_template_engine)],
) -> TemplateListResponse:
    return TemplateListResponse(templates=engine.list_templates())
