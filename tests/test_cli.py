"""CLI smoke tests using typer's CliRunner."""

import json
from pathlib import Path

from typer.testing import CliRunner

from traitgen.cli.app import app
from traitgen.cli.utils import ExitCode

runner = CliRunner()


class TestVersionFlag:
    """Test the --version flag."""

    def test_version_output(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "traitgen" in result.output


class TestConfigCommand:
    """Tests for the config command."""

    def test_config_show(self):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "Generation" in result.output
        assert "Render" in result.output

    def test_config_set_and_reset(self, isolated_config):
        result = runner.invoke(app, ["config", "set", "render.workers", "4"])
        assert result.exit_code == 0
        assert json.loads(isolated_config.read_text())["render"]["workers"] == 4

        result = runner.invoke(app, ["config", "reset"])
        assert result.exit_code == 0
        assert not isolated_config.exists()

    def test_config_set_invalid_key(self):
        result = runner.invoke(app, ["config", "set", "invalid.key", "value"])
        assert result.exit_code == 1
        assert "Unknown key" in result.output

    def test_config_set_invalid_int_value(self):
        result = runner.invoke(app, ["config", "set", "render.workers", "abc"])
        assert result.exit_code == 1
        assert "Invalid integer" in result.output

    def test_config_set_invalid_resource_mode(self):
        result = runner.invoke(app, ["config", "set", "render.resource_mode", "turbo"])
        assert result.exit_code == 1

    def test_config_set_missing_args(self):
        result = runner.invoke(app, ["config", "set"])
        assert result.exit_code == 1

    def test_config_unknown_action(self):
        result = runner.invoke(app, ["config", "unknown_action"])
        assert result.exit_code == 1
        assert "Unknown action" in result.output


class TestInspectCommand:
    """Tests for the inspect command."""

    def test_inspect_json(self, config_file):
        result = runner.invoke(app, ["--json", "inspect", str(config_file)])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ceiling"] == 18
        assert [row["Layer"] for row in data["layers"]] == ["Background", "Face", "Hair"]
        assert data["quota_plan"][-1]["Quota"] == "residual"
        assert data["quota_plan"][-1]["Available"] == "18"

    def test_inspect_human(self, config_file):
        result = runner.invoke(app, ["inspect", str(config_file)])
        assert result.exit_code == 0
        assert "Quota Plan" in result.output

    def test_inspect_missing_config(self, tmp_path):
        result = runner.invoke(app, ["inspect", str(tmp_path / "nope.json")])
        assert result.exit_code == ExitCode.FILE_NOT_FOUND

    def test_inspect_infeasible(self, collection_data, tmp_path):
        collection_data["totalSupply"] = 100
        path = tmp_path / "big.json"
        path.write_text(json.dumps(collection_data))
        result = runner.invoke(app, ["inspect", str(path)])
        assert result.exit_code == ExitCode.GENERATION_ERROR


class TestGenerateCommand:
    """Tests for the generate command."""

    def test_dry_run_writes_nothing(self, config_file, collection_data):
        result = runner.invoke(
            app, ["--json", "generate", str(config_file), "--seed", "1", "--dry-run"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["generated_count"] == 10
        assert data["seed"] == 1
        assert data["dry_run"] is True
        assert not Path(collection_data["outputPath"]).exists()

    def test_generate_renders_collection(self, config_file, collection_data):
        output = Path(collection_data["outputPath"])
        output.mkdir()
        (output / "stale.png").write_bytes(b"")

        result = runner.invoke(
            app, ["generate", str(config_file), "--seed", "3", "--workers", "2"]
        )
        assert result.exit_code == 0

        assert not (output / "stale.png").exists()
        assert sorted(p.name for p in output.glob("*.png")) == sorted(
            f"{i}.png" for i in range(10)
        )
        editions = {json.loads(p.read_text())["edition"] for p in output.glob("*.json")}
        assert editions == set(range(10))

    def test_generate_with_report(self, config_file):
        result = runner.invoke(
            app, ["generate", str(config_file), "--seed", "2", "--dry-run", "--report"]
        )
        assert result.exit_code == 0
        assert "GENERATION REPORT" in result.output

    def test_layer_mismatch_exit_code(self, collection_data, tmp_path):
        collection_data["layerFolders"] = ["Background", "Face", "Hat"]
        path = tmp_path / "mismatch.json"
        path.write_text(json.dumps(collection_data))

        result = runner.invoke(app, ["generate", str(path), "--dry-run"])
        assert result.exit_code == ExitCode.VALIDATION_ERROR
        assert "Invalid trait config" in result.output

    def test_invalid_config_exit_code(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"totalSupply": "lots"}))
        result = runner.invoke(app, ["generate", str(path)])
        assert result.exit_code == ExitCode.VALIDATION_ERROR

    def test_quota_overflow_exit_code(self, collection_data, tmp_path):
        collection_data["forcedCombinations"] = [
            {"combo": [{"layer": "Face", "value": "Happy"}], "percentage": 70},
            {"combo": [{"layer": "Face", "value": "Sad"}], "percentage": 40},
        ]
        path = tmp_path / "overflow.json"
        path.write_text(json.dumps(collection_data))

        result = runner.invoke(app, ["--json", "generate", str(path), "--dry-run"])
        assert result.exit_code == ExitCode.VALIDATION_ERROR
        data = json.loads(result.stdout)
        assert data["status"] == "error"

    def test_unreadable_layer_tree_exit_code(self, config_file, monkeypatch):
        from traitgen.cli import collection

        def deny(root, name=".DS_Store"):
            raise PermissionError(13, "Permission denied", f"{root}.DS_Store")

        monkeypatch.setattr(collection, "remove_named_files", deny)
        result = runner.invoke(app, ["--json", "generate", str(config_file), "--dry-run"])
        assert result.exit_code == ExitCode.FILE_NOT_FOUND
        data = json.loads(result.stdout)
        assert data["status"] == "error"
        assert "Permission denied" in result.stdout

    def test_rule_matching_no_option_exit_code(self, collection_data, tmp_path):
        collection_data["forcedCombinations"] = [
            {"combo": [{"layer": "Face", "value": "Grumpy"}], "percentage": 50},
        ]
        path = tmp_path / "typo.json"
        path.write_text(json.dumps(collection_data))

        result = runner.invoke(app, ["--json", "generate", str(path), "--dry-run"])
        assert result.exit_code == ExitCode.VALIDATION_ERROR
        message = json.loads(result.stdout)["errors"][0]["message"]
        assert "forced[0] matches no option in layer Face" in message
