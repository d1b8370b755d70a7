import logging

from clusterprobe.api.rest import organization_path, request
from clusterprobe.api.utils import stopwatch
from clusterprobe.configuration import ClientConfiguration, default_configuration
from clusterprobe.types import NodePool

logger = logging.getLogger(__name__)


def _node_pools_path(config: ClientConfiguration, cluster_id: str, *parts: str) -> str:
    return organization_path(config, "clusters", cluster_id, "node-pools", *parts)


@stopwatch
def read_all_node_pools(
    cluster_id: str, config: ClientConfiguration = default_configuration
) -> list[NodePool]:
    """
    Reads all node pools of a cluster.

    :param cluster_id: The cluster the node pools belong to.
    :param config: The configuration to use.
    :return: A list of NodePools.
    """
    data = request(config, "GET", _node_pools_path(config, cluster_id)) or []
    return [NodePool.from_raw(p) for p in data]


@stopwatch
def read_node_pool(
    cluster_id: str, pool_id: str, config: ClientConfiguration = default_configuration
) -> NodePool:
    data = request(config, "GET", _node_pools_path(config, cluster_id, pool_id))
    return NodePool.from_raw(data)


@stopwatch
def scale_node_pool(
    cluster_id: str,
    pool_id: str,
    count: int,
    config: ClientConfiguration = default_configuration,
) -> NodePool:
    """
    It requests a node pool to be scaled to the given node count

    :param cluster_id: The cluster the node pool belongs to
    :param pool_id: The node pool to scale
    :param count: The requested number of nodes
    :return: The NodePool as returned by the API
    """
    if count < 0:
        raise ValueError(f"Cannot scale node pool {pool_id} to {count} nodes")
    logger.info(f"Now scaling node pool {pool_id} to {count} node(s)")
    data = request(
        config, "PATCH", _node_pools_path(config, cluster_id, pool_id), {"count": count}
    )
    return NodePool.from_raw(data)
