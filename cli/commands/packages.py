"""Package CLI commands.

Inspect the packages installed on the host.
"""

import typer

from cli.itsmsetup.output import console, print_packages, print_warning
from cli.itsmsetup.state import get_state

packages_app = typer.Typer(
    name="packages",
    help="Inspect installed packages.",
)


@packages_app.command("list")
def list_packages(
    ctx: typer.Context,
    bundle_only: bool = typer.Option(
        False,
        "--bundle",
        "-b",
        help="Only show packages that belong to the bundle",
    ),
) -> None:
    """List installed packages.

    Examples:
        itsm-setup packages list
        itsm-setup packages list --bundle
    """
    state = get_state(ctx)
    bundle_names = set(state.config.bundle.package_names) | {state.config.bundle.bundle_name}

    packages = state.host().packages.repository_list()
    if bundle_only:
        packages = [p for p in packages if p.name in bundle_names]

    print_packages(packages, bundle_names)


@packages_app.command("files")
def files(ctx: typer.Context) -> None:
    """Show the bundled package descriptors and whether they are readable.

    Example:
        itsm-setup packages files
    """
    from packagesetup.bundle import BundleSetup
    from packagesetup.descriptor import DescriptorError, PackageDescriptor

    state = get_state(ctx)
    setup = BundleSetup(state.host(), state.config)

    missing = 0
    for package_name in setup.package_names:
        location = setup.package_location(package_name)
        content = setup.host.files.read_file(location)
        if not content:
            console.print(f"  [red]✗[/red] {package_name} [dim]({location})[/dim]")
            missing += 1
            continue
        try:
            descriptor = PackageDescriptor.from_bytes(content)
            console.print(f"  [green]✓[/green] {package_name} {descriptor.version}")
        except DescriptorError as e:
            console.print(f"  [yellow]![/yellow] {package_name}: {e}")

    if missing:
        print_warning(f"{missing} package descriptor(s) missing")
        raise typer.Exit(1)
