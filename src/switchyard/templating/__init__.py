"""Template rendering: kida integration and the ``Template`` return type."""

from switchyard.templating.integration import create_environment, render, template_filename
from switchyard.templating.returns import Template

__all__ = ["Template", "create_environment", "render", "template_filename"]
