"""CLI package for Fire Watch.

Provides the command-line interface:
- Running the alert bot
- First-run credential setup
- One-shot checks and active-alert listings
"""

from .main import cli

__all__ = ["cli"]
