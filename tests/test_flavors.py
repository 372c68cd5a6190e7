import pytest

from blackduck_deploy.errors import ConfigurationError, Diagnostics, SizingGapWarning
from blackduck_deploy.flavors import DEFAULT_ENVELOPE, FLAVORS, FlavorResolver, ResourceEnvelope, load_flavors


def test_every_size_and_component_resolves():
    resolver = FlavorResolver()
    for size, flavor in FLAVORS.items():
        for component in flavor:
            assert resolver.resolve(size, component) == FLAVORS[size][component]


def test_size_lookup_is_case_insensitive():
    assert FlavorResolver().resolve("SMALL", "webapp") == FLAVORS["small"]["webapp"]


def test_unknown_size_is_a_configuration_error():
    with pytest.raises(ConfigurationError, match="huge"):
        FlavorResolver().resolve("huge", "webapp")


def test_missing_component_falls_back_to_default_envelope():
    diagnostics = Diagnostics()
    envelope = FlavorResolver().resolve("small", "jobrunner", diagnostics)
    assert envelope == DEFAULT_ENVELOPE
    warnings = diagnostics.of_type(SizingGapWarning)
    assert len(warnings) == 1
    assert warnings[0].component == "jobrunner"


def test_envelope_resources_omit_missing_values():
    envelope = ResourceEnvelope(cpu_request="500m", memory_request="1Gi", memory_limit="1Gi")
    assert envelope.to_resources() == {
        "requests": {"cpu": "500m", "memory": "1Gi"},
        "limits": {"memory": "1Gi"},
    }


def test_load_flavors_merges_over_builtin_table(tmp_path):
    flavor_file = tmp_path / "flavors.yaml"
    flavor_file.write_text(
        "small:\n"
        "  jobrunner: {cpuRequest: 1, cpuLimit: 2, memoryRequest: 4Gi, memoryLimit: 4Gi}\n"
        "tiny:\n"
        "  webapp: {cpuRequest: 250m, memoryLimit: 1Gi}\n"
    )
    resolver = FlavorResolver(load_flavors(flavor_file))

    jobrunner = resolver.resolve("small", "jobrunner")
    assert jobrunner.cpu_request == "1"
    assert jobrunner.memory_limit == "4Gi"
    assert resolver.resolve("small", "webapp") == FLAVORS["small"]["webapp"]
    assert resolver.resolve("tiny", "webapp").cpu_request == "250m"
    assert "tiny" in resolver.sizes()


def test_load_flavors_rejects_malformed_files(tmp_path):
    not_a_mapping = tmp_path / "list.yaml"
    not_a_mapping.write_text("- small\n- large\n")
    with pytest.raises(ConfigurationError):
        load_flavors(not_a_mapping)

    bad_envelope = tmp_path / "bad.yaml"
    bad_envelope.write_text("small:\n  webapp: {cpuRequest: [1, 2]}\n")
    with pytest.raises(ConfigurationError, match="small/webapp"):
        load_flavors(bad_envelope)


def test_load_flavors_rejects_invalid_yaml(tmp_path):
    broken = tmp_path / "broken.yaml"
    broken.write_text("small: [unclosed\n")
    with pytest.raises(ConfigurationError, match="not valid YAML"):
        load_flavors(broken)
