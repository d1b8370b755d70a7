import logging
from threading import Event
from typing import Optional

import kubernetes as k8s

from clusterprobe import api
from clusterprobe.configuration import (
    ClientConfiguration,
    default_configuration,
    DEFAULT_POLL,
    DELETE_POLL,
    PROVISION_POLL,
)
from clusterprobe.errors import AuthGrace, is_not_found, is_retryable_api_error
from clusterprobe.kube import is_node_ready
from clusterprobe.types import ClusterStatus, NodePoolStatus
from clusterprobe.watch import Outcome, PollSpec, await_convergence

logger = logging.getLogger(__name__)


def _unexpected(kind: str, _id: str, status: str) -> Outcome:
    return Outcome.failed(f'{kind} "{_id}" entered unexpected state "{status}"')


def wait_for_cluster_running(
    cluster_id: str,
    config: ClientConfiguration = default_configuration,
    spec: PollSpec = PROVISION_POLL,
    cancel: Optional[Event] = None,
) -> int:
    def check() -> Outcome:
        status = api.read_cluster(cluster_id, config=config).status
        if status == ClusterStatus.RUNNING.value:
            return Outcome.CONVERGED
        if status == ClusterStatus.PROVISIONING.value:
            return Outcome.pending(status)
        return _unexpected("cluster", cluster_id, status)

    return await_convergence(
        spec,
        check,
        is_transient=is_retryable_api_error,
        cancel=cancel,
        description=f"cluster {cluster_id} to be {ClusterStatus.RUNNING.value}",
    )


def wait_for_all_node_pools_running(
    cluster_id: str,
    config: ClientConfiguration = default_configuration,
    spec: PollSpec = DEFAULT_POLL,
    cancel: Optional[Event] = None,
) -> int:
    def check() -> Outcome:
        pools = api.read_all_node_pools(cluster_id, config=config)
        updating = []
        for pool in pools:
            if pool.status == NodePoolStatus.RUNNING.value:
                continue
            elif pool.status == NodePoolStatus.UPDATING.value:
                updating.append(pool.id)
            else:
                return _unexpected("node pool", pool.id, pool.status)
        if updating:
            return Outcome.pending(f"node pool(s) {', '.join(updating)} updating")
        return Outcome.CONVERGED

    return await_convergence(
        spec,
        check,
        is_transient=is_retryable_api_error,
        cancel=cancel,
        description=f"all node pools of cluster {cluster_id} to be running",
    )


def _wait_for_node_pool_state(
    cluster_id: str,
    pool_id: str,
    awaited: NodePoolStatus,
    allowed: NodePoolStatus,
    config: ClientConfiguration,
    spec: PollSpec,
    cancel: Optional[Event],
) -> int:
    def check() -> Outcome:
        status = api.read_node_pool(cluster_id, pool_id, config=config).status
        if status == awaited.value:
            return Outcome.CONVERGED
        if status == allowed.value:
            return Outcome.pending(status)
        return _unexpected("node pool", pool_id, status)

    return await_convergence(
        spec,
        check,
        is_transient=is_retryable_api_error,
        cancel=cancel,
        description=f"node pool {pool_id} to be {awaited.value}",
    )


def wait_for_node_pool_updating(
    cluster_id: str,
    pool_id: str,
    config: ClientConfiguration = default_configuration,
    spec: PollSpec = DEFAULT_POLL,
    cancel: Optional[Event] = None,
) -> int:
    return _wait_for_node_pool_state(
        cluster_id,
        pool_id,
        awaited=NodePoolStatus.UPDATING,
        allowed=NodePoolStatus.RUNNING,
        config=config,
        spec=spec,
        cancel=cancel,
    )


def wait_for_node_pool_running(
    cluster_id: str,
    pool_id: str,
    config: ClientConfiguration = default_configuration,
    spec: PollSpec = DEFAULT_POLL,
    cancel: Optional[Event] = None,
) -> int:
    return _wait_for_node_pool_state(
        cluster_id,
        pool_id,
        awaited=NodePoolStatus.RUNNING,
        allowed=NodePoolStatus.UPDATING,
        config=config,
        spec=spec,
        cancel=cancel,
    )


def wait_for_cluster_deleted(
    cluster_id: str,
    config: ClientConfiguration = default_configuration,
    spec: PollSpec = DELETE_POLL,
    cancel: Optional[Event] = None,
) -> int:
    def check() -> Outcome:
        try:
            cluster = api.read_cluster(cluster_id, config=config)
        except Exception as e:  # noqa
            if is_not_found(e):
                return Outcome.CONVERGED
            raise
        # short-circuit if the cluster went into an unexpected state
        if cluster.status in (
            ClusterStatus.RUNNING.value,
            ClusterStatus.DELETING.value,
        ):
            return Outcome.pending(cluster.status)
        return _unexpected("cluster", cluster_id, cluster.status)

    return await_convergence(
        spec,
        check,
        is_transient=is_retryable_api_error,
        cancel=cancel,
        description=f"cluster {cluster_id} to be deleted",
    )


def wait_for_kubernetes_nodes_ready(
    core_api: k8s.client.CoreV1Api,
    spec: PollSpec = DEFAULT_POLL,
    cancel: Optional[Event] = None,
) -> int:
    def check() -> Outcome:
        nodes = core_api.list_node()
        not_ready = [
            node.metadata.name for node in nodes.items if not is_node_ready(node)
        ]
        if not_ready:
            return Outcome.pending(f"node(s) not ready: {', '.join(not_ready)}")
        return Outcome.CONVERGED

    return await_convergence(
        spec,
        check,
        is_transient=is_retryable_api_error,
        cancel=cancel,
        description="all Kubernetes nodes to be ready",
    )


def wait_for_kubernetes_api_ready(
    core_api: k8s.client.CoreV1Api,
    auth_error_grace: float = default_configuration.AUTH_ERROR_GRACE,
    spec: PollSpec = DEFAULT_POLL,
    cancel: Optional[Event] = None,
) -> int:
    """
    Wait until pods in the default namespace can be listed

    The cluster is polled aggressively, before its roles and bindings may be synced, so
    authorization errors are retried for `auth_error_grace` seconds.
    """

    def check() -> Outcome:
        core_api.list_namespaced_pod(namespace="default")
        return Outcome.CONVERGED

    return await_convergence(
        spec,
        check,
        is_transient=AuthGrace(auth_error_grace),
        cancel=cancel,
        description="the Kubernetes API server to be reachable",
    )
