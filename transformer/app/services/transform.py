"""
Transform service.

Bridges input representations to the template engine:

    input -> data model -> resolve(template) -> render -> text

The service holds no mutable state. The template engine it is given is
read-only after startup, so one instance serves all requests.
"""

import logging
from typing import Any

from transformer.app.services.data_model import (
    DataModel,
    parse_json_text,
    to_data_model,
)
from transformer.app.services.template_engine import TemplateEngine

logger = logging.getLogger(__name__)


class TransformService:
    def __init__(self, engine: TemplateEngine) -> None:
        self.engine = engine

    def transform(self, structured_input: Any, template_name: str) -> str:
        """
        Render a template against a structured input value.

        The input may be a CustomerInput or any mapping.

        Raises:
            ConversionError: the input cannot be represented as a mapping
            TemplateError: resolution or rendering failed
        """
        logger.info(
            "transform_started",
            extra={"template": template_name, "input": "structured"},
        )
        data_model = to_data_model(structured_input)
        return self._render(data_model, template_name)

    def transform_raw(self, json_text: str | bytes, template_name: str) -> str:
        """
        Render a template against raw JSON text.

        Raises:
            MalformedInputError: the text is not valid JSON
            ConversionError: the JSON document is not an object
            TemplateError: resolution or rendering failed
        """
        logger.info(
            "transform_started",
            extra={"template": template_name, "input": "raw"},
        )
        data_model = to_data_model(parse_json_text(json_text))
        return self._render(data_model, template_name)

    def _render(self, data_model: DataModel, template_name: str) -> str:
        template = self.engine.resolve(template_name)
        output = self.engine.render(template, data_model)

        logger.debug(
            "transform_completed",
            extra={"template": template_name, "output": output},
        )
        return output
