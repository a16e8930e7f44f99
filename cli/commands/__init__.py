"""CLI command modules for itsm-setup."""

from cli.commands.packages import packages_app
from cli.commands.repository import repository_app

__all__ = ["packages_app", "repository_app"]
