from fastapi import Request

from transformer.app.config import Settings
from transformer.app.services.template_engine import TemplateEngine
from transformer.app.services.transform import TransformService


# =============================================================================
# Dependency providers
# =============================================================================


def get_app_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise RuntimeError("settings not initialized")
    return settings


def get_template_engine(request: Request) -> TemplateEngine:
    engine = getattr(request.app.state, "template_engine", None)
    if engine is None:
        raise RuntimeError("template engine not initialized")
    return engine


def get_transform_service(request: Request) -> TransformService:
    """
    The service is stateless; the instance built at startup is shared
    by all requests.
    """
    service = getattr(request.app.state, "transform_service", None)
    if service is None:
        raise RuntimeError("transform service not initialized")
    return service
