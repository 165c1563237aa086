"""
Template generator registry.

Maps a template id to a generator instance. Each generator module registers
its classes with the @register decorator when imported below.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .base import TemplateGenerator


# Generator registry - populated by @register decorator
GENERATORS: dict[str, "TemplateGenerator"] = {}


def register(template_id: str):
    """Decorator to register a template generator."""
    def decorator(cls):
        cls.template_id = template_id
        GENERATORS[template_id] = cls()
        return cls
    return decorator


def get_generator(template_id: str | None) -> "TemplateGenerator | None":
    """Get the generator for a template id, None if unregistered."""
    if not template_id:
        return None
    return GENERATORS.get(template_id)


# Import generators to trigger registration
from .templates import controls  # noqa: E402,F401
from .templates import deductions  # noqa: E402,F401
from .templates import earnings  # noqa: E402,F401

from .base import GeneratedBody, TemplateGenerator  # noqa: E402
from .hydrator import hydrate_question  # noqa: E402

__all__ = [
    "GENERATORS",
    "GeneratedBody",
    "TemplateGenerator",
    "get_generator",
    "hydrate_question",
    "register",
]
