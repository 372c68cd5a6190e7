import yaml
from typer.testing import CliRunner

from blackduck_deploy import cli
from blackduck_deploy.cli import app


runner = CliRunner()

SPEC = """name: app
namespace: blackduck
version: "2023.1"
size: small
persistentStorage: false
platform: OPENSHIFT
imageRegistries:
  - registry.example.com/custom-coordination:9.9
"""


def test_top_level_commands_present() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("compile", "apply", "delete", "flavors"):
        assert command in result.stdout


def test_compile_writes_manifests(tmp_path) -> None:
    spec_file = tmp_path / "app.yaml"
    spec_file.write_text(SPEC)
    output_file = tmp_path / "out" / "manifests.yaml"

    result = runner.invoke(app, ["compile", str(spec_file), "--output-file", str(output_file)])

    assert result.exit_code == 0, result.output
    documents = list(yaml.safe_load_all(output_file.read_text()))
    kinds = [doc["kind"] for doc in documents]
    assert "Route" in kinds
    assert "PersistentVolumeClaim" not in kinds
    images = [
        doc["spec"]["template"]["spec"]["containers"][0]["image"] for doc in documents if doc["kind"] == "Deployment"
    ]
    assert "registry.example.com/custom-coordination:9.9" in images


def test_compile_unknown_size_exits_with_configuration_error(tmp_path) -> None:
    spec_file = tmp_path / "app.yaml"
    spec_file.write_text(SPEC.replace("size: small", "size: gigantic"))

    result = runner.invoke(app, ["compile", str(spec_file)])

    assert result.exit_code == 2


def test_compile_rejects_non_mapping_spec(tmp_path) -> None:
    spec_file = tmp_path / "app.yaml"
    spec_file.write_text("- just\n- a list\n")

    result = runner.invoke(app, ["compile", str(spec_file)])

    assert result.exit_code == 2


def test_apply_dry_run_never_connects(tmp_path, monkeypatch) -> None:
    def _refuse(context):
        raise AssertionError("dry run must not build a cluster client")

    monkeypatch.setattr(cli, "_create_api", _refuse)
    config_file = tmp_path / "deploy.yaml"
    config_file.write_text("application:\n" + "".join(f"  {line}\n" for line in SPEC.splitlines()))

    result = runner.invoke(app, ["apply", str(config_file), "--dry-run", "--namespace", "other"])

    assert result.exit_code == 0, result.output
    assert "validated" in result.stdout


def test_flavors_table() -> None:
    result = runner.invoke(app, ["flavors"])
    assert result.exit_code == 0
    assert "xlarge" in result.stdout


def test_compile_rejects_unknown_service_type(tmp_path) -> None:
    spec_file = tmp_path / "app.yaml"
    spec_file.write_text(SPEC + "exposedServiceType: Ingress\n")

    result = runner.invoke(app, ["compile", str(spec_file)])

    assert result.exit_code == 2


def test_compile_rejects_broken_yaml(tmp_path) -> None:
    spec_file = tmp_path / "app.yaml"
    spec_file.write_text("name: [app\n")
    flavor_file = tmp_path / "flavors.yaml"
    flavor_file.write_text("small: [unclosed\n")
    good_spec = tmp_path / "good.yaml"
    good_spec.write_text(SPEC)

    assert runner.invoke(app, ["compile", str(spec_file)]).exit_code == 2
    assert runner.invoke(app, ["compile", str(good_spec), "--flavor-file", str(flavor_file)]).exit_code == 2
    assert runner.invoke(app, ["flavors", "--flavor-file", str(flavor_file)]).exit_code == 2
