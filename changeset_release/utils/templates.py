"""Contains utilities for rendering the Jinja2 templates shipped with the package."""

from pathlib import Path

import jinja2
import structlog
from pydantic import BaseModel

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

TEMPLATES_DIRECTORY = Path(__file__).parent.parent / "templates"


def construct_jinja2_environment(templates_directory: Path = TEMPLATES_DIRECTORY) -> jinja2.Environment:
    """Construct a Jinja2 environment loading templates from a directory.

    Output is markdown, so nothing is escaped; undefined variables raise.
    """
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(templates_directory),
        undefined=jinja2.StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
    )


def get_packaged_template(template_name: str, environment: jinja2.Environment | None = None) -> jinja2.Template:
    """Load one of the templates shipped inside this package by file name."""
    if environment is None:
        environment = construct_jinja2_environment()
    try:
        return environment.get_template(template_name)
    except jinja2.TemplateNotFound:
        logger.error("Jinja2 template not found", template_name=template_name, templates_directory=str(TEMPLATES_DIRECTORY))
        raise


def render_template_with_model(model: BaseModel, template: jinja2.Template) -> str:
    """Render a Jinja2 template against a Pydantic model."""
    try:
        rendered_template = template.render(model.model_dump())
    except jinja2.UndefinedError as exc:
        logger.error("Failed to render template with model", model_type=type(model).__name__, error=str(exc))
        raise
    return rendered_template
