"""CLI commands for Fire Watch."""

from . import init, oneshot, run

__all__ = ["init", "oneshot", "run"]
