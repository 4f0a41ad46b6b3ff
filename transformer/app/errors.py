"""
Error taxonomy for the transformation pipeline.

Every failure below the transport layer is raised as one of the
exceptions defined here and travels unmodified up to the route handler.

Two categories are recognized by the handlers:

- TemplateError: the template could not be resolved, parsed or rendered
- PayloadError:  the input could not be read as a data model, or the
                 rendered output could not be read back as JSON

Anything outside these two categories is a programming fault and is left
to the web framework.
"""


class TransformError(Exception):
    """Base class for all pipeline failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# ---------------------------------------------------------------------------
# Template-related failures
# ---------------------------------------------------------------------------


class TemplateError(TransformError):
    """Raised when a template cannot be resolved or rendered."""


class TemplateNotFoundError(TemplateError):
    """No template file with the requested name exists in the store."""

    def __init__(self, name: str) -> None:
        self.template_name = name
        super().__init__(f'Template not found for name "{name}".')


class TemplateParseError(TemplateError):
    """The template file exists but is not syntactically valid."""

    def __init__(self, name: str, detail: str, lineno: int | None = None) -> None:
        self.template_name = name
        self.lineno = lineno
        location = f" (line {lineno})" if lineno is not None else ""
        super().__init__(
            f'Syntax error in template "{name}"{location}: {detail}'
        )


class RenderingError(TemplateError):
    """Evaluation of the template against the data model failed."""

    def __init__(self, name: str, detail: str) -> None:
        self.template_name = name
        super().__init__(f'Error rendering template "{name}": {detail}')


# ---------------------------------------------------------------------------
# Payload / I-O failures
# ---------------------------------------------------------------------------


class PayloadError(TransformError):
    """Raised when input or output JSON cannot be handled."""


class MalformedInputError(PayloadError):
    """The raw input is not syntactically valid JSON."""


class ConversionError(PayloadError):
    """The input cannot be represented as a template data model."""


class OutputNotJsonError(PayloadError):
    """The rendered template output is not valid JSON."""
