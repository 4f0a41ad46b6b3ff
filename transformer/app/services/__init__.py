from .data_model import (
    customer_data_model,
    mapping_data_model,
    parse_json_text,
    parse_rendered_output,
    to_data_model,
)
from .template_engine import TemplateEngine, ensure_template_store
from .transform import TransformService

__all__ = [
    "customer_data_model",
    "mapping_data_model",
    "parse_json_text",
    "parse_rendered_output",
    "to_data_model",
    "TemplateEngine",
    "ensure_template_store",
    "TransformService",
]
