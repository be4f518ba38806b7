"""End-to-end tests of the entry points with the external tools mocked out."""

from unittest.mock import MagicMock, patch

import pytest

from args import parse_args
from common.errors import InstallationError, ResolutionError
from constants import Constants
from runtime_sync import node_main, run
from versioning.models import InstalledVersion, ResolvedVersions, SupportTier, Version


def v(text):
    return Version.parse(text)


def installed(*versions):
    return [InstalledVersion(version=v(t), paths=(f"/opt/{t}",)) for t in versions]


NODE_RESOLVED = ResolvedVersions(
    supported=(v("v20.17.1"), v("v22.17.1"), v("v24.17.1")),
    primary=v("v22.17.1"),
    tiers=(
        (v("v24.17.1"), SupportTier.CURRENT),
        (v("v22.17.1"), SupportTier.ACTIVE_LTS),
        (v("v20.17.1"), SupportTier.MAINTENANCE_LTS),
    ),
)

DOTNET_RESOLVED = ResolvedVersions(
    supported=(v("8.0.412"), v("9.0.303")),
    primary=v("9.0.303"),
    tiers=((v("9.0.303"), SupportTier.CURRENT), (v("8.0.412"), SupportTier.LTS)),
)


@pytest.fixture(autouse=True)
def no_config_file(monkeypatch, tmp_path):
    monkeypatch.setenv(Constants.ENV_CONFIG, str(tmp_path / "absent.yml"))
    monkeypatch.delenv(Constants.ENV_LOG_FILE, raising=False)
    monkeypatch.delenv(Constants.ENV_LOG_LEVEL, raising=False)


@pytest.fixture
def log_file(tmp_path):
    return tmp_path / "sync.log"


@pytest.fixture
def nvm():
    client = MagicMock()
    client.check.return_value = "0.40.3"
    client.list_installed.return_value = installed("v18.20.0", "v20.17.1", "v22.17.1")
    client.install.return_value = MagicMock(ok=True)
    client.uninstall.return_value = MagicMock(ok=True)
    client.set_default.return_value = MagicMock(ok=True)
    client.active_versions.return_value = (v("v22.17.1"), "10.9.2")
    return client


class TestNodeSync:
    """node-sync wiring."""

    def test_dry_run(self, nvm, log_file):
        resolver = MagicMock()
        resolver.resolve.return_value = NODE_RESOLVED
        with patch("cli_node.NvmClient", return_value=nvm), \
                patch("cli_node.NodeVersionResolver", return_value=resolver):
            code = run(parse_args(["--dry-run", "--log-file", str(log_file)], tool="node"))

        assert code == 0
        nvm.install.assert_not_called()
        nvm.uninstall.assert_not_called()
        nvm.set_default.assert_not_called()
        content = log_file.read_text(encoding="utf-8")
        assert "=== Starting node-sync v1.0.0 ===" in content
        assert "DRY RUN: Would install Node.js v24.17.1" in content
        assert "DRY RUN: Would uninstall Node.js v18.20.0" in content
        assert "=== Completed node-sync v1.0.0 ===" in content

    def test_live_run(self, nvm, log_file):
        resolver = MagicMock()
        resolver.resolve.return_value = NODE_RESOLVED
        with patch("cli_node.NvmClient", return_value=nvm), \
                patch("cli_node.NodeVersionResolver", return_value=resolver):
            code = run(parse_args(["--log-file", str(log_file)], tool="node"))

        assert code == 0
        nvm.install.assert_called_once_with(v("v24.17.1"))
        nvm.set_default.assert_called_once_with(v("v22.17.1"))
        nvm.uninstall.assert_called_once_with(v("v18.20.0"))

    def test_resolution_error_exits_1(self, nvm, log_file, capsys):
        resolver = MagicMock()
        resolver.resolve.side_effect = ResolutionError("Failed to fetch Node.js release index")
        with patch("cli_node.NvmClient", return_value=nvm), \
                patch("cli_node.NodeVersionResolver", return_value=resolver):
            code = run(parse_args(["--log-file", str(log_file)], tool="node"))

        assert code == 1
        assert "Failed to fetch Node.js release index" in capsys.readouterr().err
        content = log_file.read_text(encoding="utf-8")
        assert "ERROR: Sync failed with exit code 1" in content
        assert "Completed" not in content

    def test_unexpected_error_still_logged(self, nvm, log_file):
        nvm.check.side_effect = RuntimeError("kaboom")
        with patch("cli_node.NvmClient", return_value=nvm):
            code = run(parse_args(["--log-file", str(log_file)], tool="node"))

        assert code == 1
        content = log_file.read_text(encoding="utf-8")
        assert "Unexpected error" in content
        assert "Sync failed with exit code 1" in content

    def test_quiet_hides_info(self, nvm, log_file, capsys):
        resolver = MagicMock()
        resolver.resolve.return_value = NODE_RESOLVED
        with patch("cli_node.NvmClient", return_value=nvm), \
                patch("cli_node.NodeVersionResolver", return_value=resolver):
            run(parse_args(["-q", "--dry-run", "--log-file", str(log_file)], tool="node"))

        assert "Supported Node.js versions" not in capsys.readouterr().out
        assert "Supported Node.js versions" in log_file.read_text(encoding="utf-8")

    def test_usage_error_exit_code(self):
        with pytest.raises(SystemExit) as exc:
            node_main(["--bogus"])
        assert exc.value.code == 1


class TestDotnetSync:
    """dotnet-sync wiring."""

    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.list_installed.return_value = installed("8.0.400", "8.0.412", "9.0.200")
        client.remove.return_value = ["/opt/8.0.400"]
        return client

    def test_live_run(self, client, log_file, capsys):
        resolver = MagicMock()
        resolver.resolve.return_value = DOTNET_RESOLVED
        configurator = MagicMock()
        with patch("cli_dotnet.DotnetClient", return_value=client), \
                patch("cli_dotnet.DotnetVersionResolver", return_value=resolver), \
                patch("cli_dotnet.EnvironmentConfigurator", return_value=configurator):
            code = run(parse_args(["dotnet", "--log-file", str(log_file)]))

        assert code == 0
        client.install.assert_called_once_with(v("9.0.303"))
        assert [c[0][0].version for c in client.remove.call_args_list] == [v("8.0.400")]
        configurator.configure.assert_called_once()
        out = capsys.readouterr().out
        assert "Next steps" in out
        assert "older patch version: 8.0.400 (keeping latest: 8.0.412)" in log_file.read_text(encoding="utf-8")

    def test_no_cleanup(self, client, log_file):
        resolver = MagicMock()
        resolver.resolve.return_value = DOTNET_RESOLVED
        with patch("cli_dotnet.DotnetClient", return_value=client), \
                patch("cli_dotnet.DotnetVersionResolver", return_value=resolver), \
                patch("cli_dotnet.EnvironmentConfigurator", return_value=MagicMock()):
            code = run(parse_args(["dotnet", "--no-cleanup", "--log-file", str(log_file)]))

        assert code == 0
        client.remove.assert_not_called()

    def test_install_failure_exits_1(self, client, log_file):
        resolver = MagicMock()
        resolver.resolve.return_value = DOTNET_RESOLVED
        client.install.side_effect = InstallationError("Failed to install .NET 9.0.303")
        with patch("cli_dotnet.DotnetClient", return_value=client), \
                patch("cli_dotnet.DotnetVersionResolver", return_value=resolver), \
                patch("cli_dotnet.EnvironmentConfigurator", return_value=MagicMock()):
            code = run(parse_args(["dotnet", "--log-file", str(log_file)]))

        assert code == 1
        client.remove.assert_not_called()
        client.cleanup_installer.assert_called_once()
