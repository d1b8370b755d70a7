import logging

from clusterprobe.api.rest import organization_path, request
from clusterprobe.api.utils import stopwatch
from clusterprobe.configuration import ClientConfiguration, default_configuration
from clusterprobe.errors import CloudAPIError
from clusterprobe.types import Cluster, ClusterCreateRequest

logger = logging.getLogger(__name__)


@stopwatch
def create_cluster(
    req: ClusterCreateRequest, config: ClientConfiguration = default_configuration
) -> Cluster:
    """
    It requests the provisioning of a cluster

    :param req: ClusterCreateRequest
    :type req: ClusterCreateRequest
    :param config: ClientConfiguration = default_configuration
    :return: The Cluster as accepted by the API
    """
    logger.info(f"Now requesting cluster '{req.name}' ({req.provider.value})")
    try:
        data = request(
            config, "POST", organization_path(config, "clusters"), req.as_dict()
        )
    except CloudAPIError as e:
        if e.status == 409:
            raise RuntimeError(
                f"The requested cluster '{req.name}' already exists."
            ) from None
        raise
    if not data:
        raise RuntimeError("The cluster create request returned no cluster")
    cluster = Cluster.from_raw(data)
    logger.debug(f"Successfully requested cluster {cluster.id}")
    return cluster


@stopwatch
def read_cluster(
    cluster_id: str, config: ClientConfiguration = default_configuration
) -> Cluster:
    """
    Reads a cluster from the provision API.

    :param cluster_id: The ID of the cluster to read.
    :param config: The configuration to use.
    :return: The Cluster.
    :raises CloudAPIError: If the request fails, e.g. with 404 when the cluster does not exist.
    """
    data = request(config, "GET", organization_path(config, "clusters", cluster_id))
    return Cluster.from_raw(data)


@stopwatch
def read_all_clusters(
    config: ClientConfiguration = default_configuration,
) -> list[Cluster]:
    data = request(config, "GET", organization_path(config, "clusters")) or []
    return [Cluster.from_raw(c) for c in data]


@stopwatch
def delete_cluster(
    cluster_id: str, config: ClientConfiguration = default_configuration
) -> None:
    """
    Request the deletion of a cluster

    :param cluster_id: The cluster to be deleted
    :type cluster_id: str
    """
    logger.info(f"Now requesting deletion of cluster {cluster_id}")
    try:
        request(config, "DELETE", organization_path(config, "clusters", cluster_id))
    except CloudAPIError as e:
        if e.is_not_found:
            raise RuntimeWarning(f"Cluster {cluster_id} does not exist")
        raise RuntimeError(
            f"Error deleting cluster {cluster_id}: {e.reason} ({e.status})"
        ) from e
    logger.debug(f"Successfully requested deletion of cluster {cluster_id}")
