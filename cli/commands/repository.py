"""Repository CLI commands.

Inspect and update the package repository list setting of the host.
"""

import typer

from cli.itsmsetup.output import print_error, print_info, print_repositories, print_success
from cli.itsmsetup.state import get_state

repository_app = typer.Typer(
    name="repository",
    help="Manage the package repository list setting.",
)


@repository_app.command("list")
def list_repositories(ctx: typer.Context) -> None:
    """Show the configured package repositories.

    Example:
        itsm-setup repository list
    """
    from packagesetup.repository import repository_entries

    state = get_state(ctx)
    setting_name = state.config.repository.setting_name
    setting = state.host().settings.setting_get(setting_name)

    if setting is None:
        print_error(f"Setting {setting_name} not found")
        raise typer.Exit(1)

    print_repositories(repository_entries(setting.effective_value), setting.is_valid)


@repository_app.command("add")
def add(ctx: typer.Context) -> None:
    """Register the bundle repository, replacing the example entry.

    Running it again leaves the setting unchanged.

    Example:
        itsm-setup repository add
    """
    from packagesetup.repository import add_package_repository

    state = get_state(ctx)
    repository = state.config.repository

    if not add_package_repository(state.host().settings, repository):
        print_error(f"Could not register repository {repository.url}")
        raise typer.Exit(1)

    print_success(f"Repository registered: {repository.name}")
    print_info(repository.url)
