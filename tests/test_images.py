import pytest

from blackduck_deploy.errors import Diagnostics, OverrideParseWarning
from blackduck_deploy.images import ImageResolver, parse_image_reference

from conftest import make_spec


def test_parse_image_reference():
    reference = parse_image_reference("registry.example.com:5000/team/custom-webapp:9.9")
    assert reference.registry == "registry.example.com:5000"
    assert reference.repository == "team/custom-webapp"
    assert reference.tag == "9.9"
    assert str(reference) == "registry.example.com:5000/team/custom-webapp:9.9"


@pytest.mark.parametrize("text", ["webapp", "webapp:1.0", "docker.io/webapp", "docker.io/Web App:1"])
def test_parse_image_reference_rejects_other_shapes(text):
    with pytest.raises(ValueError):
        parse_image_reference(text)


def test_default_image_is_synthesized_from_version():
    resolved = ImageResolver().resolve(make_spec(), "coordination")
    assert resolved.image == "docker.io/vendor/coordination:2023.1"
    assert resolved.uid is None
    assert not resolved.overridden


def test_default_image_uses_prefix():
    spec = make_spec(default_registry="docker.io/blackducksoftware", image_prefix="blackduck", version="2024.4.0")
    resolved = ImageResolver().resolve(spec, "webapp")
    assert resolved.image == "docker.io/blackducksoftware/blackduck-webapp:2024.4.0"


def test_matching_override_is_returned_verbatim():
    override = "registry.example.com/custom-coordination:9.9"
    spec = make_spec(image_registries=["quay.io/vendor/webapp:1.0", override])
    resolved = ImageResolver().resolve(spec, "coordination")
    assert resolved.image == override
    assert resolved.overridden


def test_first_matching_override_wins():
    spec = make_spec(image_registries=["quay.io/a/webapp:1", "quay.io/b/webapp:2"])
    assert ImageResolver().resolve(spec, "webapp").image == "quay.io/a/webapp:1"


def test_unparseable_override_is_skipped_with_a_warning():
    diagnostics = Diagnostics()
    spec = make_spec(image_registries=["webapp-latest", "quay.io/b/webapp:2"])
    resolved = ImageResolver().resolve(spec, "webapp", diagnostics)
    assert resolved.image == "quay.io/b/webapp:2"
    assert [warning.component for warning in diagnostics.of_type(OverrideParseWarning)] == ["webapp"]


def test_only_unparseable_overrides_fall_back_to_default():
    diagnostics = Diagnostics()
    spec = make_spec(image_registries=["webapp:::"])
    resolved = ImageResolver().resolve(spec, "webapp", diagnostics)
    assert resolved.image == "docker.io/vendor/webapp:2023.1"
    assert len(diagnostics) == 1


def test_uid_override_is_attached_independently():
    spec = make_spec(image_uids={"webapp": 100}, image_registries=["quay.io/b/webapp:2"])
    assert ImageResolver().resolve(spec, "webapp").uid == 100
    assert ImageResolver().resolve(spec, "webserver").uid is None
