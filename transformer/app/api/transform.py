"""
Transformation endpoints.

Two entry points feed the same pipeline:

    customer   typed CustomerInput body, optional ?template
               (defaults to the configured customer template)
    raw        arbitrary JSON text body, mandatory ?template

Both render the selected template, parse the rendered text as JSON and
return it with 200. Template failures and payload failures (malformed
input, non-object input, rendered text that is not JSON) are reported
as 500 with a body of the form {"error": "<message>"}.

Any other exception is not handled here and surfaces as the framework's
generic server error.
"""

import logging
from typing import Annotated, Any, Callable, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from transformer.app.api.dependencies import (
    get_app_settings,
    get_transform_service,
)
from transformer.app.config import Settings
from transformer.app.errors import PayloadError, TemplateError
from transformer.app.schemas.customer import CustomerInput
from transformer.app.services.data_model import (
    dump_json,
    parse_rendered_output,
)
from transformer.app.services.transform import TransformService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Transform"])


class TransformResponse(Response):
    """
    JSON response written with the pipeline's own codec, so that values
    parsed from rendered output (integers wider than 64 bits included)
    are serialized exactly as they were read.
    """

    media_type = "application/json"

    def render(self, content: Any) -> bytes:
        return dump_json(content).encode("utf-8")


_RESPONSES = {
    200: {"description": "Rendered template output, parsed as JSON"},
    500: {
        "description": "Template or payload failure",
        "content": {
            "application/json": {
                "example": {"error": 'Template not found for name "x.ftl".'}
            }
        },
    },
}


def _execute(render: Callable[[], str], template: str) -> TransformResponse:
    """
    Run one transformation and build the HTTP response.

    Only the two declared error categories are converted into an error
    body; everything else propagates.
    """
    try:
        rendered = render()
        result = parse_rendered_output(rendered)
    except (PayloadError, TemplateError) as exc:
        logger.exception(
            "transform_failed",
            extra={
                "template": template,
                "error_type": type(exc).__name__,
            },
        )
        return TransformResponse(
            status_code=500,
            content={"error": exc.message},
        )

    return TransformResponse(status_code=200, content=result)


# =============================================================================
# POST /api/transform/customer
# =============================================================================


@router.post(
    "/customer",
    summary="Transform a customer record with a template",
    response_class=TransformResponse,
    responses=_RESPONSES,
)
def transform_customer(
    payload: CustomerInput,
    service: Annotated[TransformService, Depends(get_transform_service)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    template: Annotated[
        Optional[str],
        Query(description="Template name; defaults to the customer template"),
    ] = None,
) -> TransformResponse:
    template_name = template or settings.default_customer_template

    logger.info(
        "customer_transform_requested",
        extra={
            "customer_id": payload.customer_id,
            "template": template_name,
        },
    )

    return _execute(
        lambda: service.transform(payload, template_name),
        template_name,
    )


# =============================================================================
# POST /api/transform/raw
# =============================================================================


@router.post(
    "/raw",
    summary="Transform arbitrary JSON text with a template",
    response_class=TransformResponse,
    responses=_RESPONSES,
)
async def transform_raw(
    request: Request,
    service: Annotated[TransformService, Depends(get_transform_service)],
    template: Annotated[
        str,
        Query(description="Template name (required)"),
    ],
) -> TransformResponse:
    """
    The body is read verbatim regardless of its content type, so that
    malformed JSON reaches the pipeline instead of being rejected by
    request parsing.
    """
    body = await request.body()

    logger.info(
        "raw_transform_requested",
        extra={"template": template, "body_bytes": len(body)},
    )

    # Rendering is blocking; keep it off the event loop.
    return await run_in_threadpool(
        _execute,
        lambda: service.transform_raw(body, template),
        template,
    )
