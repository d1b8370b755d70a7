import pytest

from clusterprobe.context import ProvisionContext
from clusterprobe.templates import load_ssh_public_key


def pytest_addoption(parser):
    parser.addoption("--template", action="store", help="path to template file to use")
    parser.addoption("--provider", action="store", help="provider ID to use")
    parser.addoption(
        "--kubernetes-version",
        action="store",
        help="Kubernetes version to provision (without leading 'v')",
    )
    parser.addoption(
        "--ssh-public-key-file",
        action="store",
        help="path to SSH public key file to provide in template if applicable (can't be combined with --ssh-public-key)",  # noqa: E501
    )
    parser.addoption(
        "--ssh-public-key",
        action="store",
        help="Base64-encoded SSH public key to provide in template if applicable (can't be combined with --ssh-public-key-file)",  # noqa: E501
    )
    parser.addoption(
        "--api-debug",
        action="store_true",
        default=False,
        help="log every request to the provision API",
    )


def _required(request, name: str, flag: str) -> str:
    value = request.config.getoption(name)
    if not value:
        pytest.fail(f"please specify {flag}")
    return value


@pytest.fixture(scope="module")
def provision_args(request) -> dict:
    return {
        "template": _required(
            request, "template", "template filename (full path) using --template"
        ),
        "provider": _required(request, "provider", "provider ID using --provider"),
        "kubernetes_version": _required(
            request,
            "kubernetes_version",
            "Kubernetes version using --kubernetes-version",
        ),
        "ssh_public_key_file": request.config.getoption("ssh_public_key_file"),
        "ssh_public_key": request.config.getoption("ssh_public_key"),
    }


@pytest.fixture(scope="module")
def ssh_public_key(provision_args) -> str:
    return load_ssh_public_key(
        filename=provision_args["ssh_public_key_file"],
        b64=provision_args["ssh_public_key"],
    )


@pytest.fixture(scope="module")
def context(client_config) -> ProvisionContext:
    return ProvisionContext(
        config=client_config,
        organization_id=client_config.ORGANIZATION_ID,
        kubeconfig_filename=client_config.KUBECONFIG,
    )
