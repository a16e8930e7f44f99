"""Package setup hook for the ITSM bundle.

Installs, upgrades and uninstalls the add-on packages shipped with the ITSM
bundle package, and registers the bundle's package repository in the host
settings.

The hook only talks to the host through the protocols in
``packagesetup.host``; ``packagesetup.local_host`` provides a file-backed
implementation of them.
"""

from packagesetup.bundle import BundleSetup, RequirementError, SetupError
from packagesetup.config import SetupConfig, load_config
from packagesetup.descriptor import DescriptorError, PackageDescriptor
from packagesetup.host import HostServices, InstalledPackage, Setting, SettingUpdate
from packagesetup.local_host import LocalHost
from packagesetup.repository import (
    RepositoryEntry,
    add_package_repository,
    reconcile_repository_list,
)
from packagesetup.version import VersionCheckError, VersionCheckType, check_version

__version__ = "6.0.30"

__all__ = [
    "BundleSetup",
    "DescriptorError",
    "HostServices",
    "InstalledPackage",
    "LocalHost",
    "PackageDescriptor",
    "RepositoryEntry",
    "RequirementError",
    "Setting",
    "SettingUpdate",
    "SetupConfig",
    "SetupError",
    "VersionCheckError",
    "VersionCheckType",
    "__version__",
    "add_package_repository",
    "check_version",
    "load_config",
    "reconcile_repository_list",
]
