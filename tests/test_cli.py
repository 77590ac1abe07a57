import json
from pathlib import Path

import yaml
from click.testing import CliRunner

from openapi_declare.cli import main

FIXTURES = Path(__file__).parent / "fixtures"
PETSTORE = str(FIXTURES / "petstore_api.py")
BROKEN = f"{PETSTORE}:broken_registry"


class TestCliGenerate:
    def test_generate_json_to_file(self, tmp_path):
        output_file = tmp_path / "out" / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, ["generate", PETSTORE, "-o", str(output_file)])

        assert result.exit_code == 0
        doc = json.loads(output_file.read_text(encoding="utf-8"))
        assert doc["openapi"] == "3.0.0"
        assert list(doc["paths"]) == ["/pets", "/pets/{petId}"]
        assert list(doc["paths"]["/pets"]) == ["get", "post"]
        assert list(doc["paths"]["/pets"]["post"]["responses"]) == ["201", "422"]
        assert doc["components"]["schemas"]["Pet"]["properties"]["status"]["enum"] == ["available", "pending", "sold"]

    def test_generate_yaml_with_info_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OPENAPI_TITLE", "From env")
        monkeypatch.setenv("OPENAPI_VERSION", "9.9")
        output_file = tmp_path / "openapi.yaml"
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", PETSTORE,
            "-o", str(output_file),
            "--format", "yaml",
            "--title", "Petstore",
        ])

        assert result.exit_code == 0
        doc = yaml.safe_load(output_file.read_text(encoding="utf-8"))
        assert doc["info"]["title"] == "Petstore"
        assert doc["info"]["version"] == "9.9"

    def test_generate_to_stdout(self):
        runner = CliRunner()
        result = runner.invoke(main, ["generate", PETSTORE])

        assert result.exit_code == 0
        doc = json.loads(result.stdout)
        assert "Category" in doc["components"]["schemas"]

    def test_generate_strict_fails_on_broken(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["generate", BROKEN, "--strict", "-o", str(tmp_path / "x.json")])

        assert result.exit_code != 0
        assert "components.Widget.properties.parts" in result.output
        assert not (tmp_path / "x.json").exists()

    def test_generate_bad_target(self):
        runner = CliRunner()
        result = runner.invoke(main, ["generate", "no_such_module_for_openapi_declare"])

        assert result.exit_code != 0
        assert "Cannot import module" in result.output


class TestCliCheck:
    def test_check_clean(self):
        runner = CliRunner()
        result = runner.invoke(main, ["check", PETSTORE])

        assert result.exit_code == 0
        assert "OK: 2 components, 3 endpoints." in result.output

    def test_check_reports_problems(self):
        runner = CliRunner()
        result = runner.invoke(main, ["check", BROKEN])

        assert result.exit_code == 1
        assert "components.Widget.properties.parts: array type requires 'of'" in result.output
        assert "references unknown component 'Gadget'" in result.output
        assert "2 problem(s) found." in result.output


class TestCliValidate:
    def test_validate_coerces(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "validate", PETSTORE,
            "--path", "/pets/{petId}",
            "--data", '{"petId": "12"}',
        ])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"petId": 12}

    def test_validate_body_failure(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "validate", PETSTORE,
            "--path", "/pets",
            "--method", "POST",
            "--data", '{"status": "sold"}',
        ])

        assert result.exit_code == 1
        assert '"name"' in result.output
        assert "Validation failed." in result.output

    def test_validate_unknown_endpoint(self):
        runner = CliRunner()
        result = runner.invoke(main, ["validate", PETSTORE, "--path", "/orders"])

        assert result.exit_code != 0
        assert "No endpoint declares GET /orders" in result.output

    def test_validate_bad_json(self):
        runner = CliRunner()
        result = runner.invoke(main, ["validate", PETSTORE, "--path", "/pets", "--data", "{nope"])

        assert result.exit_code != 0
        assert "--data" in result.output
