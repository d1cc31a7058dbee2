"""Template return type.

A frozen value that handlers return; the negotiation layer hands it to
the kida renderer.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Template:
    """Render a kida template with the given values.

    Usage::

        return Template("index", title="Hello Title", header="Hello Header")

    ``"index"`` resolves to ``index.html`` under the configured template
    directory (see ``AppConfig.template_extension``).
    """

    name: str
    context: dict[str, Any] = field(default_factory=dict)

    def __init__(self, name: str, /, **context: Any) -> None:
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "context", context)
