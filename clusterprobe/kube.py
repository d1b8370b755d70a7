import logging

import kubernetes as k8s

logger = logging.getLogger(__name__)

CLUSTER_ID_LABEL = "containership.io/cluster-id"
NODE_POOL_ID_LABEL = "containership.io/node-pool-id"


def kube_client_from_kubeconfig(kubeconfig: str) -> k8s.client.CoreV1Api:
    """
    It builds a CoreV1Api bound to the given kubeconfig file, without touching the global config

    :param kubeconfig: path to the kubeconfig file
    :return: A CoreV1Api
    """
    try:
        api_client = k8s.config.new_client_from_config(config_file=kubeconfig)
    except k8s.config.ConfigException as e:
        raise RuntimeError(f"Could not load KUBECONFIG: {e}") from None
    return k8s.client.CoreV1Api(api_client=api_client)


def is_node_ready(node: k8s.client.V1Node) -> bool:
    """
    Returns True if the node has a Ready condition with status True
    See https://kubernetes.io/docs/concepts/nodes/node/#condition
    """
    conditions = (node.status and node.status.conditions) or []
    for condition in conditions:
        if condition.type == "Ready" and condition.status == "True":
            return True
    return False


def get_cluster_id_from_kubernetes(core_api: k8s.client.CoreV1Api) -> str:
    """
    It gets the cluster ID from the cluster-id label of the cluster's nodes

    :param core_api: CoreV1Api of the cluster under test
    :return: the cluster ID
    """
    try:
        nodes = core_api.list_node()
    except k8s.client.exceptions.ApiException as e:  # type: ignore
        raise RuntimeError(
            f"Listing nodes to get cluster ID failed: {e.reason} ({e.status})"
        ) from e
    if not nodes.items:
        raise RuntimeError("The cluster has no nodes to read the cluster ID from")
    # any node will do
    node = nodes.items[0]
    cluster_id = (node.metadata.labels or {}).get(CLUSTER_ID_LABEL)
    if not cluster_id:
        raise RuntimeError(
            f"Node '{node.metadata.name}' is missing the {CLUSTER_ID_LABEL} label"
        )
    return cluster_id


def list_node_pool_nodes(
    core_api: k8s.client.CoreV1Api, pool_id: str
) -> list[k8s.client.V1Node]:
    nodes = core_api.list_node(label_selector=f"{NODE_POOL_ID_LABEL}={pool_id}")
    return nodes.items
