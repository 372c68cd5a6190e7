import pytest

from blackduck_deploy.config import ApplicationSpec


def make_spec(**overrides) -> ApplicationSpec:
    values = {
        "name": "app",
        "namespace": "blackduck",
        "version": "2023.1",
        "persistent_storage": True,
        "size": "small",
        "default_registry": "docker.io/vendor",
        "image_prefix": "",
    }
    values.update(overrides)
    return ApplicationSpec(**values)


@pytest.fixture
def spec() -> ApplicationSpec:
    return make_spec()
