import pytest

from clusterprobe.context import RunContext, ScaleContext
from clusterprobe.kube import get_cluster_id_from_kubernetes


@pytest.fixture(scope="module")
def run_context(client_config) -> RunContext:
    kube_api = client_config.K8S_CORE_API
    return RunContext(
        config=client_config,
        organization_id=client_config.ORGANIZATION_ID,
        cluster_id=get_cluster_id_from_kubernetes(kube_api),
        kube_api=kube_api,
    )


@pytest.fixture(scope="module")
def context(run_context) -> ScaleContext:
    return ScaleContext(run=run_context)
