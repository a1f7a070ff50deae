"""Enable running as: python -m firewatch

Usage:
    python -m firewatch --help
    python -m firewatch run
"""

from firewatch.cli.main import cli

if __name__ == "__main__":
    cli()
