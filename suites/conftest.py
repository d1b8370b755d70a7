import logging

import pytest

from clusterprobe.configuration import ClientConfiguration


def require_environment(config: ClientConfiguration) -> None:
    if not config.TOKEN:
        pytest.fail(
            "please specify a Containership Cloud token via CONTAINERSHIP_TOKEN env var"
        )
    if not config.KUBECONFIG:
        pytest.fail("please set KUBECONFIG environment variable")


@pytest.fixture(scope="session")
def client_config(request) -> ClientConfiguration:
    debug = request.config.getoption("api_debug", default=False)
    config = ClientConfiguration(debug=debug or None)
    require_environment(config)
    if config.DEBUG:
        logging.getLogger("clusterprobe").setLevel(logging.DEBUG)
    return config
