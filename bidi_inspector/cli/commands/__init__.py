"""CLI commands."""

from .contexts import contexts
from .locate import locate
from .logs import logs

__all__ = ["contexts", "locate", "logs"]
