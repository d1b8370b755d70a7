import time

import click

from clusterprobe import api
from clusterprobe.waiters import wait_for_cluster_deleted, wait_for_cluster_running
from clusterprobe.watch import PollSpec
from cli.console import info, success, heading, table
from cli.utils import parse_labels, standard_error_handler
from cli.__main__ import cluster


@cluster.command(
    "list",
    alias=["ls"],
    help="List all clusters of the organization (filtered when labels option is used)",
)
@click.option(
    "--label",
    "-l",
    type=str,
    multiple=True,
    help="Filter clusters based on the label (use multiple times, e.g. --label environment=e2e-test)",
)
@click.pass_context
@standard_error_handler
def list_clusters(ctx, label):
    _labels = parse_labels(label) if label else {}
    clusters = [
        c
        for c in api.read_all_clusters(config=ctx.obj["config"])
        if all(c.labels.get(k) == v for k, v in _labels.items())
    ]
    if clusters:
        tab = [
            (c.id, c.name or "-", c.provider_name or "-", c.status) for c in clusters
        ]
        table(tab, headers=["ID", "Name", "Provider", "Status"])
    else:
        info("No cluster(s) found")


@cluster.command(
    "inspect", alias=["get"], help="Display detailed information of one cluster"
)
@click.argument("cluster_id")
@click.pass_context
@standard_error_handler
def inspect(ctx, cluster_id):
    config = ctx.obj["config"]
    c = api.read_cluster(cluster_id, config=config)
    info("ID: " + c.id)
    info("Name: " + (c.name or "-"))
    info("Provider: " + (c.provider_name or "-"))
    info("Labels: " + str(c.labels))
    info("Status: " + c.status)

    heading("\nNode pools:")
    pooltab = [
        (p.id, p.name or "-", p.kubernetes_mode, p.count, p.status, p.kubernetes_version or "-")
        for p in api.read_all_node_pools(cluster_id, config=config)
    ]
    table(pooltab, headers=["ID", "Name", "Mode", "Count", "Status", "Kubernetes"])


@cluster.command(
    "delete", alias=["rm", "remove"], help="Request the deletion of a cluster"
)
@click.argument("cluster_id")
@click.option("-w", "--wait", is_flag=True, help="Wait until the cluster is gone")
@click.option(
    "--timeout", type=int, default=8 * 60, help="Seconds to wait for the deletion"
)
@click.pass_context
@standard_error_handler
def delete_cluster(ctx, cluster_id, wait, timeout):
    config = ctx.obj["config"]
    api.delete_cluster(cluster_id, config=config)
    info(f"Cluster '{cluster_id}' marked for deletion")
    if wait:
        start_time = time.time()
        wait_for_cluster_deleted(
            cluster_id, config=config, spec=PollSpec(interval=1, timeout=timeout)
        )
        success(f"Cluster deleted in {time.time() - start_time:.1f} seconds")


@cluster.command("wait", help="Wait for a cluster to report as RUNNING")
@click.argument("cluster_id")
@click.option(
    "--timeout", type=int, default=30 * 60, help="Seconds to wait for the cluster"
)
@click.pass_context
@standard_error_handler
def wait_cluster(ctx, cluster_id, timeout):
    start_time = time.time()
    wait_for_cluster_running(
        cluster_id,
        config=ctx.obj["config"],
        spec=PollSpec(interval=1, timeout=timeout),
    )
    success(f"Cluster became running in {time.time() - start_time:.1f} seconds")
