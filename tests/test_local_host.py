"""Tests for the file-backed host and an end-to-end install against it."""

import yaml

from conftest import descriptor_bytes

from packagesetup.bundle import BundleSetup
from packagesetup.host import SettingUpdate
from packagesetup.local_host import LocalHost, LocalPackageManager, LocalSettingsService


def test_fresh_settings_hold_placeholder(tmp_path):
    settings = LocalSettingsService(tmp_path)
    setting = settings.setting_get("Package::RepositoryList")

    assert setting.is_valid is False
    assert [e["Name"] for e in setting.effective_value] == ["Example repository 1"]
    assert settings.setting_get("Unknown::Setting") is None


def test_settings_set_persists_and_records_deployment(tmp_path):
    settings = LocalSettingsService(tmp_path)
    ok = settings.settings_set(
        user_id=1,
        comments="test",
        settings=[SettingUpdate(name="Ticket::Hook", effective_value="Ticket#", is_valid=True)],
    )

    assert ok is True
    reread = LocalSettingsService(tmp_path)
    assert reread.setting_get("Ticket::Hook").effective_value == "Ticket#"
    deployments = reread.deployments()
    assert len(deployments) == 1
    assert deployments[0].settings == ["Ticket::Hook"]
    assert deployments[0].comments == "test"


def test_config_store_caches_until_reload(tmp_path):
    host = LocalHost.create(tmp_path)
    assert host.config.get("Home") == str(tmp_path.resolve())
    assert host.config.get("Package::RepositoryList")[0]["Name"] == "Example repository 1"

    host.settings.settings_set(
        user_id=1,
        comments="",
        settings=[SettingUpdate(name="Package::RepositoryList", effective_value=[], is_valid=True)],
    )
    assert host.config.get("Package::RepositoryList") != []

    host.config.reload()
    assert host.config.get("Package::RepositoryList") == []


def test_package_install_and_upgrade(tmp_path):
    packages = LocalPackageManager(tmp_path)

    assert packages.package_install(descriptor_bytes("ITSMCore", "6.0.29")) is True
    assert packages.package_install(descriptor_bytes("ITSMCore", "6.0.30")) is True

    installed = packages.repository_list()
    assert [(p.name, p.version) for p in installed] == [("ITSMCore", "6.0.30")]
    assert packages.repository_get("ITSMCore", "6.0.29") is None
    assert not (packages.packages_dir / "ITSMCore-6.0.29.opm").exists()

    registry = yaml.safe_load(packages.registry_path.read_text())
    assert registry["packages"][0]["file"] == "ITSMCore-6.0.30.opm"


def test_package_install_rejects_garbage(tmp_path):
    packages = LocalPackageManager(tmp_path)
    assert packages.package_install(b"not a package") is False
    assert packages.repository_list() == []


def test_package_install_stays_in_package_directory(tmp_path):
    home = tmp_path / "home"
    packages = LocalPackageManager(home)
    content = b"<otrs_package><Name>../../../escaped</Name><Version>1</Version></otrs_package>"

    assert packages.package_install(content) is False
    assert packages.package_uninstall(content) is False
    assert list(tmp_path.rglob("escaped*")) == []
    assert packages.repository_list() == []


def test_package_uninstall(tmp_path):
    packages = LocalPackageManager(tmp_path)
    packages.package_install(descriptor_bytes("ImportExport"))

    content = packages.repository_get("ImportExport", "6.0.30")
    assert packages.package_uninstall(content) is True
    assert packages.repository_list() == []
    assert packages.package_uninstall(content) is False


def test_file_reader(tmp_path):
    host = LocalHost.create(tmp_path)
    path = tmp_path / "x.opm"
    assert host.files.read_file(path) is None
    assert host.files.is_file(path) is False

    path.write_bytes(b"data")
    assert host.files.read_file(path) == b"data"


def test_end_to_end_install_and_uninstall(local_home, setup_config):
    host = LocalHost.create(local_home)

    assert BundleSetup(host, setup_config).code_install() is True
    names = sorted(p.name for p in host.packages.repository_list())
    assert names == sorted(setup_config.bundle.package_names)

    repositories = host.settings.setting_get("Package::RepositoryList")
    assert repositories.is_valid is True
    assert [e["URL"] for e in repositories.effective_value] == [
        "https://download.znuny.org/releases/itsm/bundle6x/"
    ]

    # Running again installs the same versions and leaves the setting alone
    assert BundleSetup(host, setup_config).code_upgrade() is True
    assert len(host.settings.deployments()) == 1

    host.packages.package_install(descriptor_bytes("ITSM"))
    assert BundleSetup(host, setup_config).code_uninstall() is True
    assert "ITSM" not in {p.name for p in host.packages.repository_list()}


def test_end_to_end_missing_descriptor(local_home, setup_config):
    (local_home / setup_config.bundle.package_path / "ImportExport.opm").unlink()
    host = LocalHost.create(local_home)
    host.packages.package_install(descriptor_bytes("ITSM"))

    assert BundleSetup(host, setup_config).code_install() is False
    assert [p.name for p in host.packages.repository_list()] == []
