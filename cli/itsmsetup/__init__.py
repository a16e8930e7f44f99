"""itsm-setup CLI.

Command-line interface for the ITSM bundle package setup. The Typer app
lives in ``cli.itsmsetup.cli``.
"""

__version__ = "6.0.30"

__all__ = ["__version__"]
