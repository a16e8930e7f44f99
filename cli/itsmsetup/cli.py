"""itsm-setup CLI.

Runs the ITSM bundle package lifecycle hooks against a local host directory.
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from cli.itsmsetup.output import (
    console,
    print_config,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from cli.itsmsetup.state import CliState, get_state

app = typer.Typer(
    name="itsm-setup",
    help="Install, upgrade and uninstall the ITSM package bundle.",
    no_args_is_help=True,
)

# Register sub-apps
from cli.commands.packages import packages_app
from cli.commands.repository import repository_app

app.add_typer(packages_app, name="packages")
app.add_typer(repository_app, name="repository")


def configure_logging(level: str) -> None:
    """Configure the root logger once for the CLI process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@app.callback()
def main_callback(
    ctx: typer.Context,
    home: Optional[Path] = typer.Option(
        None,
        "--home",
        "-H",
        help="Host home directory (default: 'home' from config, or ITSM_HOME)",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to packagesetup.toml",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
) -> None:
    """Load configuration and set up logging for every command."""
    from packagesetup.config import ConfigError, load_config

    try:
        config = load_config(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1)

    configure_logging("DEBUG" if verbose else config.log_level)

    ctx.obj = CliState(config=config, home=Path(home or config.home))


def _run_hook(ctx: typer.Context, action: str) -> None:
    from packagesetup.bundle import BundleSetup

    state = get_state(ctx)
    setup = BundleSetup(state.host(), state.config)
    hooks = {
        "install": setup.code_install,
        "upgrade": setup.code_upgrade,
        "uninstall": setup.code_uninstall,
    }

    print_info(f"Running {action} for {setup.bundle_name} {setup.package_version} in {state.home}")

    if not hooks[action]():
        print_error(f"{action.capitalize()} failed, see log output for details")
        raise typer.Exit(1)

    print_success(f"{action.capitalize()} complete")


@app.command()
def install(ctx: typer.Context) -> None:
    """Install the bundle packages.

    Example:
        itsm-setup --home /opt/otrs install
    """
    _run_hook(ctx, "install")


@app.command()
def upgrade(ctx: typer.Context) -> None:
    """Upgrade the bundle packages."""
    _run_hook(ctx, "upgrade")


@app.command()
def uninstall(
    ctx: typer.Context,
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation",
    ),
) -> None:
    """Uninstall the bundle package.

    Example:
        itsm-setup uninstall --yes
    """
    state = get_state(ctx)
    bundle = state.config.bundle
    if not yes:
        if not typer.confirm(f"Uninstall {bundle.bundle_name} v{bundle.package_version}?"):
            raise typer.Exit(0)

    _run_hook(ctx, "uninstall")


@app.command("check-version")
def check_version_command(
    version1: str = typer.Argument(..., help="Reference version"),
    version2: str = typer.Argument(..., help="Version to check"),
    check_type: str = typer.Option(
        "Min",
        "--type",
        "-t",
        help="Min: VERSION2 >= VERSION1, Max: VERSION2 < VERSION1",
    ),
) -> None:
    """Check a version against a lower or upper bound.

    Exits 0 when the bound is satisfied, 1 otherwise.

    Examples:
        itsm-setup check-version 1.3.1 6.0.30
        itsm-setup check-version 2.0.0 1.9.9 --type Max
    """
    from packagesetup.version import VersionCheckError, check_version

    try:
        satisfied = check_version(version1, version2, check_type)
    except VersionCheckError as e:
        print_error(str(e))
        raise typer.Exit(2)

    relation = ">=" if check_type == "Min" else "<"
    if satisfied:
        print_success(f"{version2} {relation} {version1}")
    else:
        print_warning(f"{version2} is not {relation} {version1}")
        raise typer.Exit(1)


@app.command("config")
def config_show(ctx: typer.Context) -> None:
    """Show current configuration.

    Example:
        itsm-setup config
    """
    state = get_state(ctx)
    config = state.config

    if config.source:
        print_info(f"Config file: {config.source}")
    else:
        print_warning("No packagesetup.toml found (using defaults)")

    print_config(
        {"home": str(state.home), "log_level": config.log_level},
        title="General",
    )
    print_config(config.to_dict()["bundle"], title="Bundle")
    print_config(config.to_dict()["repository"], title="Repository")


@app.command()
def version() -> None:
    """Show itsm-setup version."""
    from cli.itsmsetup import __version__

    console.print(f"itsm-setup v{__version__}")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
