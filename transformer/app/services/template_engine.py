"""
Template engine adapter.

This module owns the single Jinja2 environment used by the service and
exposes it through a narrow interface:

    resolve(name)              -> Template
    render(template, context)  -> str

Design guarantees:
- Templates are loaded from one configured base directory (the store)
- Template files and rendered output are UTF-8
- Undefined references are errors (StrictUndefined), including loops
  over absent collections
- Every evaluation failure propagates to the caller as a TemplateError;
  nothing is logged-and-ignored here

Template syntax:
- variables   ${ expression }
- blocks      {% statement %}
- comments    {# comment #}

The variable delimiters differ from Jinja2's defaults so that templates
producing JSON can use plain braces freely.

Caching:
- Jinja2 keeps compiled templates in its own internal cache and reloads
  them when the file on disk changes. No additional caching occurs in
  this module.
"""

import logging
from pathlib import Path
from typing import Any, List, Mapping

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateNotFound,
    TemplateSyntaxError,
)

from transformer.app.config import TemplateEngineConfig
from transformer.app.errors import (
    RenderingError,
    TemplateNotFoundError,
    TemplateParseError,
)
from transformer.app.services.data_model import dump_json

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Template store
# ---------------------------------------------------------------------------


def ensure_template_store(base_dir: Path) -> Path:
    """
    Create the template store directory (and parents) if it is missing.

    Returns the resolved directory path.
    """
    if not base_dir.is_dir():
        base_dir.mkdir(parents=True, exist_ok=True)
        logger.info(
            "template_store_created",
            extra={"template_base_path": str(base_dir)},
        )
    return base_dir.resolve()


# ---------------------------------------------------------------------------
# Filters for JSON-producing templates
# ---------------------------------------------------------------------------


def json_string_filter(value: Any) -> str:
    """Escape a value for use inside a JSON string literal."""
    return dump_json(str(value))[1:-1]


def json_filter(value: Any) -> str:
    """Serialize a value as a JSON literal."""
    return dump_json(value)


def refuse_null(value: Any) -> Any:
    """
    Output finalizer: a bare null cannot be written into the output.

    Values that are null inside lists reach templates as None; they have
    to go through the json filter, which writes them as null.
    """
    if value is None:
        raise ValueError(
            "null value in template output; use the json filter to emit null"
        )
    return value


_UNDEFINED_BY_NULL_LOOP_POLICY = {"error": StrictUndefined}


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------


class TemplateEngine:
    """
    Wraps one configured Jinja2 environment for the process lifetime.

    The environment is read-only after construction and may be shared
    between concurrent requests.
    """

    def __init__(self, config: TemplateEngineConfig) -> None:
        self.config = config
        self.base_dir = ensure_template_store(config.base_dir)

        self._env = Environment(
            loader=FileSystemLoader(self.base_dir, encoding=config.encoding),
            variable_start_string="${",
            variable_end_string="}",
            block_start_string="{%",
            block_end_string="%}",
            comment_start_string="{#",
            comment_end_string="#}",
            undefined=_UNDEFINED_BY_NULL_LOOP_POLICY[config.null_loop_policy],
            finalize=refuse_null,
            autoescape=False,
            keep_trailing_newline=True,
        )
        self._env.filters["json_string"] = json_string_filter
        self._env.filters["json"] = json_filter

    def resolve(self, name: str) -> Template:
        """
        Load a template by name from the store.

        Raises:
            TemplateNotFoundError: no such file under the base directory
            TemplateParseError: the file is not a valid template
        """
        try:
            return self._env.get_template(name)
        except TemplateNotFound as exc:
            raise TemplateNotFoundError(name) from exc
        except TemplateSyntaxError as exc:
            raise TemplateParseError(
                name, exc.message or str(exc), exc.lineno
            ) from exc
        except UnicodeDecodeError as exc:
            raise TemplateParseError(
                name, f"template is not valid {self.config.encoding}: {exc}"
            ) from exc

    def render(self, template: Template, data_model: Mapping[str, Any]) -> str:
        """
        Evaluate a resolved template against a data model.

        Raises:
            RenderingError: undefined reference, type mismatch or any
                other evaluation-time fault
        """
        try:
            return template.render(data_model)
        except Exception as exc:
            raise RenderingError(
                template.name or "<string>",
                f"{type(exc).__name__}: {exc}",
            ) from exc

    def list_templates(self) -> List[str]:
        """Return the names of all templates in the store, sorted."""
        return sorted(self._env.list_templates())
