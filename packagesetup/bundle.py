"""Code to run during installation of the ITSM bundle package.

The bundle package ships the descriptors of its add-on packages. Installing
or upgrading the bundle installs every add-on package, uninstalling it removes
the bundle package again.
"""

from __future__ import annotations

import logging
from pathlib import Path

from packagesetup.config import SetupConfig, get_config
from packagesetup.host import HostServices
from packagesetup.repository import add_package_repository
from packagesetup.version import VersionCheckType, check_version

logger = logging.getLogger(__name__)


class SetupError(Exception):
    """Raised when a setup step fails."""

    pass


class RequirementError(SetupError):
    """Raised when the host does not meet the bundle requirements."""

    pass


class BundleSetup:
    """Lifecycle hook of the bundle package.

    Example:
        >>> setup = BundleSetup(LocalHost.create(home))
        >>> setup.code_install()
        True
        >>> setup.code_uninstall()
        True
    """

    def __init__(
        self,
        host: HostServices,
        config: SetupConfig | None = None,
    ):
        """Initialize the hook.

        Args:
            host: Host services to delegate to.
            config: Setup configuration (default: global configuration).
        """
        self.host = host
        self.config = config or get_config()

        # Steps below must see the host's current configuration.
        self.host.config.reload()

        bundle = self.config.bundle
        self.package_path = bundle.package_path
        self.package_names = list(bundle.package_names)
        self.bundle_name = bundle.bundle_name
        self.package_version = bundle.package_version
        self.minimum_version = bundle.minimum_version

    def code_install(self) -> bool:
        """Run the code install part.

        Returns:
            True if the bundle packages were installed.
        """
        return self._install_or_upgrade()

    def code_upgrade(self) -> bool:
        """Run the code upgrade part.

        Returns:
            True if the bundle packages were upgraded.
        """
        return self._install_or_upgrade()

    def code_uninstall(self) -> bool:
        """Run the code uninstall part."""
        self.uninstall_packages([self.bundle_name], self.package_version)
        return True

    def _install_or_upgrade(self) -> bool:
        add_package_repository(self.host.settings, self.config.repository)

        if self.check_requirements():
            return self.install_bundle_packages()

        logger.error("Installation failed! See syslog for details.")

        self.uninstall_packages([self.bundle_name], self.package_version)
        return False

    def package_location(self, package_name: str) -> Path:
        """Location of a bundled package descriptor."""
        return self.host.home / self.package_path / f"{package_name}.opm"

    def install_bundle_packages(self) -> bool:
        """Install or upgrade every bundled package, in bundle order.

        Descriptors that are missing or empty are skipped.
        """
        for package_name in self.package_names:
            content = self.host.files.read_file(self.package_location(package_name))
            if not content:
                logger.debug("Skipping %s, no package content", package_name)
                continue

            if self.host.packages.package_install(content):
                logger.info("Installed package %s", package_name)
            else:
                logger.warning("Package %s was not installed", package_name)

        return True

    def check_requirements(self) -> bool:
        """Check installed package versions and the bundled descriptors.

        Returns:
            True if the bundle can be installed. Failures are logged.
        """
        try:
            self._check_installed_versions()
            self._check_package_files()
        except RequirementError as e:
            logger.error("%s", e)
            return False
        return True

    def _check_installed_versions(self) -> None:
        bundle_packages = set(self.package_names)

        for package in self.host.packages.repository_list():
            if package.name not in bundle_packages:
                continue

            if check_version(self.minimum_version, package.version, VersionCheckType.MIN):
                continue

            raise RequirementError(
                f"Package '{package.name}' version {package.version} is installed. "
                f"You need to upgrade to at least version {self.minimum_version} first!"
            )

    def _check_package_files(self) -> None:
        for package_name in self.package_names:
            location = self.package_location(package_name)

            if not self.host.files.is_file(location):
                raise RequirementError(f"Could not find file {package_name}!")

            if not self.host.files.read_file(location):
                raise RequirementError(f"Could not read file {package_name} correctly!")

    def uninstall_packages(
        self,
        package_list: list[str] | None,
        package_version: str | None,
    ) -> bool:
        """Uninstall packages, but only those installed at the given version.

        Args:
            package_list: Names of the packages to uninstall.
            package_version: Exact version an installed package must have.

        Returns:
            False if an argument is missing, True otherwise.
        """
        for attribute, value in (
            ("package_list", package_list),
            ("package_version", package_version),
        ):
            if not value:
                logger.error("Need %s!", attribute)
                return False

        installed = self.host.packages.repository_list()

        for package_name in package_list:
            for package in installed:
                if package.name != package_name:
                    continue
                if package.version != package_version:
                    continue

                content = self.host.packages.repository_get(package.name, package.version)
                if not content:
                    logger.warning(
                        "No repository content for %s %s", package.name, package.version
                    )
                    continue

                self.host.packages.package_uninstall(content)
                logger.info("Uninstalled package %s %s", package.name, package.version)

        return True
