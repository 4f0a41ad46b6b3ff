"""
Runtime configuration for the transformer service.

Settings are read once from the environment (prefix ``TRANSFORMER_``) or
an optional ``.env`` file at startup, validated strictly, and treated as
immutable for the lifetime of the process.

The template engine does not read settings directly. It receives an
explicitly constructed TemplateEngineConfig value instead.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CUSTOMER_TEMPLATE = "customer-transform.ftl"


# -------------------------------------------------------------------------
# Template engine configuration
# -------------------------------------------------------------------------


class TemplateEngineConfig(BaseModel):
    """
    Immutable configuration for the template engine adapter.

    - base_dir: directory templates are resolved from
    - encoding: applies to both template files and rendered output
    - exception_policy: "propagate" means every rendering fault reaches
      the caller as an error; nothing is logged and skipped
    - null_loop_policy: "error" means looping over (or printing) an
      absent or null value fails instead of producing empty output

    The policies admit a single value each. They are part of the value
    so that the behavior is stated where the engine is configured.
    """

    base_dir: Path
    encoding: Literal["utf-8"] = "utf-8"
    exception_policy: Literal["propagate"] = "propagate"
    null_loop_policy: Literal["error"] = "error"

    model_config = ConfigDict(frozen=True)


# -------------------------------------------------------------------------
# Settings Model
# -------------------------------------------------------------------------


class Settings(BaseSettings):
    """
    Application settings parsed from the environment.

    Fails fast at startup if a value is malformed.
    """

    template_base_path: Annotated[
        Path,
        Field(
            default=Path("templates"),
            description=(
                "Directory templates are resolved from. "
                "Created on startup if it does not exist."
            ),
        ),
    ]

    default_customer_template: Annotated[
        str,
        Field(
            default=DEFAULT_CUSTOMER_TEMPLATE,
            min_length=1,
            description="Template used by /customer when none is requested",
        ),
    ]

    log_level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        Field(
            default="INFO",
            description="Level of the 'transformer' logger hierarchy",
        ),
    ]

    model_config = SettingsConfigDict(
        env_prefix="TRANSFORMER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    def engine_config(self) -> TemplateEngineConfig:
        return TemplateEngineConfig(base_dir=self.template_base_path)


# -------------------------------------------------------------------------
# Settings Dependency Provider
# -------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Settings provider used when the application factory is not given
    an explicit Settings instance.
    """
    return Settings()
