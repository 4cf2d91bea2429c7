"""
Tests for the CLI commands.
"""

import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from toolconf.adapters.mock import MockAdapter
from toolconf.adapters.registry import AdapterRegistry
from toolconf.core.context import ToolContext
from toolconf.main import cli

from tests.helpers import write_template


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config(workspace: Path) -> Path:
    path = workspace / "toolconf.yml"
    path.write_text("variables: {}\n")
    return path


@pytest.fixture
def fake_process(monkeypatch: pytest.MonkeyPatch) -> MockAdapter:
    mock = MockAdapter(adapter_name="process")
    mock.set_output("encrypt-master-password", "{masterCipher==}")
    mock.set_output("encrypt-password", "{secretCipher==}")

    def _registry() -> AdapterRegistry:
        reg = AdapterRegistry()
        reg.register(mock)
        return reg

    monkeypatch.setattr("toolconf.core.use_cases.provision.default_registry", _registry)
    return mock


class TestCLI:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("provision", "args", "folders", "variables", "audit", "plugin"):
            assert command in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_variables(self, tmp_path: Path):
        template = tmp_path / "settings.xml"
        template.write_text("<u>[USER]</u><p>[PASS]</p><u>[USER]</u>${OTHER}")
        result = CliRunner().invoke(cli, ["variables", str(template)])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["USER", "PASS"]

    def test_variables_curly(self, tmp_path: Path):
        template = tmp_path / "settings.xml"
        template.write_text("[USER] ${OTHER}")
        result = CliRunner().invoke(cli, ["variables", "--syntax", "curly", str(template)])
        assert result.output.splitlines() == ["OTHER"]


class TestProvisionCommand:
    def test_without_templates(self, config: Path):
        result = CliRunner().invoke(cli, ["-c", str(config), "provision"])
        assert result.exit_code == 0
        assert "template-missing" in result.output
        assert "0 created, 2 skipped, 0 failed" in result.output

    def test_provision_prompts_for_secrets(self, config: Path, fake_process: MockAdapter):
        context = ToolContext(workspace_root=config.parent)
        write_template(context)

        result = CliRunner().invoke(
            cli, ["-c", str(config), "provision", "mvn"], input="alice\npw\n",
        )

        assert result.exit_code == 0, result.output
        assert "Please enter secret value for variable REPO_USER" in result.output
        assert "2 created" in result.output
        settings = config.parent / "conf" / "mvn" / "settings.xml"
        assert "<password>{secretCipher==}</password>" in settings.read_text()
        assert ">pw<" not in settings.read_text()

    def test_json_output(self, config: Path, fake_process: MockAdapter):
        result = CliRunner().invoke(cli, ["-q", "-c", str(config), "provision", "--json", "--no-audit"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["report"]["tool"] == "mvn"
        assert {s["reason"] for s in data["report"]["skips"]} == {"template-missing"}
        assert not (config.parent / ".state").exists()

    def test_failure_exit_code(self, config: Path, fake_process: MockAdapter):
        write_template(ToolContext(workspace_root=config.parent))
        fake_process.set_failure("encrypt-master-password", "mvn broken")

        result = CliRunner().invoke(cli, ["-c", str(config), "provision"])

        assert result.exit_code == 1
        assert "Failed to create settings security file" in result.output

    def test_unknown_tool(self, config: Path):
        result = CliRunner().invoke(cli, ["-c", str(config), "provision", "ant"])
        assert result.exit_code == 1
        assert "Unknown tool 'ant'" in result.output


class TestArgsAndFolders:
    def test_args_before_provisioning(self, config: Path):
        result = CliRunner().invoke(cli, ["-c", str(config), "args"])
        assert result.exit_code == 1
        assert "No settings file provisioned for mvn" in result.output

    def test_args_after_provisioning(self, config: Path):
        conf = config.parent / "conf" / "mvn"
        conf.mkdir(parents=True)
        (conf / "settings.xml").write_text("<settings/>")
        (conf / "settings-security.xml").write_text("<settingsSecurity/>")

        result = CliRunner().invoke(cli, ["-c", str(config), "args"])

        assert result.exit_code == 0
        assert result.output.strip() == (
            f"-s {conf / 'settings.xml'} -Dsettings.security={conf / 'settings-security.xml'}"
        )

    def test_folders_json(self, config: Path):
        write_template(ToolContext(workspace_root=config.parent), folder=".m2")

        result = CliRunner().invoke(cli, ["-q", "-c", str(config), "folders", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["tool"] == "mvn"
        assert data["templates"]["layout"] == "legacy"
        assert data["conf"] is None
        assert not (config.parent / "conf").exists()


class TestAuditCommand:
    def test_empty(self, config: Path):
        result = CliRunner().invoke(cli, ["-c", str(config), "audit"])
        assert result.exit_code == 0
        assert "No provisioning runs recorded." in result.output

    def test_after_provision(self, config: Path):
        runner = CliRunner()
        runner.invoke(cli, ["-c", str(config), "provision"])

        result = runner.invoke(cli, ["-c", str(config), "audit", "--json"])

        assert result.exit_code == 0
        entries = json.loads(result.output)
        assert len(entries) == 1
        assert entries[0]["operation_type"] == "provision"
        assert entries[0]["tool"] == "mvn"


class TestPluginCommand:
    def test_install_failure(self, config: Path, tmp_path: Path):
        missing = (tmp_path / "missing.jar").as_uri()
        result = CliRunner().invoke(cli, ["-c", str(config), "plugin", "install", "demo", missing])
        assert result.exit_code == 1
        assert "Plugin demo.jar has wrong properties" in result.output

    def test_install_from_file_url(self, config: Path, tmp_path: Path):
        artifact = tmp_path / "demo-1.0.jar"
        artifact.write_bytes(b"jar")

        result = CliRunner().invoke(
            cli, ["-c", str(config), "plugin", "install", "demo", artifact.as_uri()],
        )

        assert result.exit_code == 0, result.output
        assert (config.parent / "software" / "mvn" / "lib" / "ext" / "demo.jar").is_file()
        assert "Successfully added demo" in result.output
