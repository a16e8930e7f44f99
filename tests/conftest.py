"""Shared fixtures: an in-memory host and a populated local host directory."""

from pathlib import Path
from typing import Any

import pytest

from packagesetup.config import BundleConfig, SetupConfig
from packagesetup.descriptor import PackageDescriptor
from packagesetup.host import HostServices, InstalledPackage, Setting, SettingUpdate

PLACEHOLDER = {
    "Name": "Example repository 1",
    "URL": "https://download.example.com/packages/",
    "AuthHeaderKey": "",
    "AuthHeaderValue": "",
}


def descriptor_bytes(name: str, version: str = "6.0.30") -> bytes:
    return PackageDescriptor(name=name, version=version).to_bytes()


class FakeConfig:
    def __init__(self, home: Path):
        self.home = home
        self.reloads = 0

    def get(self, key: str) -> Any:
        return str(self.home) if key == "Home" else None

    def reload(self) -> None:
        self.reloads += 1


class FakeFiles:
    def __init__(self):
        self.files: dict[Path, bytes] = {}

    def is_file(self, location: Path) -> bool:
        return Path(location) in self.files

    def read_file(self, location: Path) -> bytes | None:
        return self.files.get(Path(location))


class FakePackages:
    def __init__(self):
        self.installed: list[InstalledPackage] = []
        self.installs: list[str] = []
        self.uninstalls: list[tuple[str, str]] = []

    def add(self, name: str, version: str) -> None:
        self.installed.append(InstalledPackage(name=name, version=version))

    def repository_list(self) -> list[InstalledPackage]:
        return list(self.installed)

    def repository_get(self, name: str, version: str) -> bytes | None:
        for package in self.installed:
            if package.name == name and package.version == version:
                return descriptor_bytes(name, version)
        return None

    def package_install(self, content: bytes) -> bool:
        descriptor = PackageDescriptor.from_bytes(content)
        self.installs.append(descriptor.name)
        return True

    def package_uninstall(self, content: bytes) -> bool:
        descriptor = PackageDescriptor.from_bytes(content)
        self.uninstalls.append((descriptor.name, descriptor.version))
        return True


class FakeSettings:
    def __init__(self):
        self.settings: dict[str, Setting] = {}
        self.calls: list[tuple[int, str, list[SettingUpdate]]] = []
        self.fail_writes = False

    def setting_get(self, name: str) -> Setting | None:
        return self.settings.get(name)

    def settings_set(self, user_id: int, comments: str, settings: list[SettingUpdate]) -> bool:
        self.calls.append((user_id, comments, settings))
        if self.fail_writes:
            return False
        for update in settings:
            self.settings[update.name] = Setting(
                name=update.name,
                effective_value=update.effective_value,
                is_valid=update.is_valid,
            )
        return True

    def put(self, value: list[dict[str, Any]], is_valid: bool = False) -> None:
        self.settings["Package::RepositoryList"] = Setting(
            name="Package::RepositoryList",
            effective_value=value,
            is_valid=is_valid,
        )


@pytest.fixture
def setup_config() -> SetupConfig:
    return SetupConfig(bundle=BundleConfig())


@pytest.fixture
def fake_host(tmp_path) -> HostServices:
    settings = FakeSettings()
    settings.put([dict(PLACEHOLDER)])
    return HostServices(
        config=FakeConfig(tmp_path),
        files=FakeFiles(),
        packages=FakePackages(),
        settings=settings,
    )


@pytest.fixture
def bundled_files(fake_host, setup_config) -> HostServices:
    """Fake host with every bundle descriptor present."""
    bundle_dir = Path(fake_host.config.get("Home")) / setup_config.bundle.package_path
    for name in setup_config.bundle.package_names:
        fake_host.files.files[bundle_dir / f"{name}.opm"] = descriptor_bytes(name)
    return fake_host


@pytest.fixture
def local_home(tmp_path, setup_config) -> Path:
    """Host directory with the bundle descriptors on disk."""
    home = tmp_path / "otrs"
    bundle_dir = home / setup_config.bundle.package_path
    bundle_dir.mkdir(parents=True)
    for name in setup_config.bundle.package_names:
        (bundle_dir / f"{name}.opm").write_bytes(descriptor_bytes(name))
    return home
