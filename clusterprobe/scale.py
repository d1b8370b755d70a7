import logging
from typing import Iterable

from clusterprobe import api
from clusterprobe.configuration import ClientConfiguration, default_configuration
from clusterprobe.types import NodePool

logger = logging.getLogger(__name__)


def select_worker_pool(pools: Iterable[NodePool]) -> NodePool:
    # any worker pool will do
    for pool in pools:
        if pool.is_worker:
            return pool
    raise RuntimeError("The cluster has no worker node pool")


def scale_by(
    cluster_id: str,
    pool: NodePool,
    delta: int,
    config: ClientConfiguration = default_configuration,
) -> NodePool:
    """
    It requests a node pool to be scaled relative to its current count

    :param cluster_id: the cluster the node pool belongs to
    :param pool: the node pool as last read
    :param delta: the number of nodes to add (or remove if negative)
    :return: the NodePool as returned by the API
    :raises RuntimeError: if the API did not accept the requested count
    """
    target = pool.count + delta
    scaled = api.scale_node_pool(cluster_id, pool.id, target, config=config)
    if scaled.count != target:
        raise RuntimeError(
            f"Node pool {pool.id} reports {scaled.count} node(s) after requesting {target}"
        )
    return scaled
