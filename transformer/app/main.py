"""
FastAPI entrypoint for the transformer service.

Accepts JSON input, renders a named template from the template store
against it, and returns the rendered output parsed as JSON.

Run with:

    uvicorn transformer.app.main:app
"""

import logging
import sys
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError, version
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from transformer.app.api.templates import router as templates_router
from transformer.app.api.transform import router as transform_router
from transformer.app.config import Settings, get_settings
from transformer.app.services.template_engine import TemplateEngine
from transformer.app.services.transform import TransformService

logger = logging.getLogger("transformer.main")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def get_app_version() -> str:
    """
    Resolve the installed distribution version.

    Falls back to the source version when running from a checkout.
    """
    try:
        return version("json-template-transformer")
    except PackageNotFoundError:
        return "0.1.0"


def configure_logging(level: str) -> None:
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("transformer").setLevel(level)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    When no Settings instance is supplied, configuration is loaded from
    the environment during startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup:
        - load and validate configuration (fail fast)
        - create the template store if it is missing
        - build the template engine and the transform service once
        """
        try:
            active = settings if settings is not None else get_settings()
        except Exception:
            logger.exception("invalid_transformer_configuration")
            raise

        configure_logging(active.log_level)

        engine = TemplateEngine(active.engine_config())

        app.state.settings = active
        app.state.template_engine = engine
        app.state.transform_service = TransformService(engine)

        logger.info(
            "transformer_startup_complete",
            extra={
                "version": get_app_version(),
                "template_base_path": str(engine.base_dir),
                "default_customer_template": active.default_customer_template,
            },
        )

        try:
            yield
        finally:
            logger.info("transformer_shutdown")

    app = FastAPI(
        title="JSON Template Transformer",
        description=(
            "Renders JSON input through named templates and returns "
            "the rendered output as JSON."
        ),
        version=get_app_version(),
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    app.include_router(transform_router, prefix="/api/transform")
    app.include_router(templates_router, prefix="/api/templates")

    @app.get(
        "/healthz",
        tags=["Monitoring"],
        summary="Liveness check",
    )
    def health_check() -> dict:
        return {
            "status": "ok",
            "service": "transformer",
            "version": app.version,
            "runtime": f"python {sys.version.split()[0]}",
        }

    return app


app = create_app()
