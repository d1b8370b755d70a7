import time

import click

from clusterprobe import api
from clusterprobe.waiters import wait_for_node_pool_running, wait_for_node_pool_updating
from clusterprobe.watch import PollSpec
from cli.console import info, success, table
from cli.utils import standard_error_handler
from cli.__main__ import nodepool


@nodepool.command("list", alias=["ls"], help="List the node pools of a cluster")
@click.argument("cluster_id")
@click.pass_context
@standard_error_handler
def list_node_pools(ctx, cluster_id):
    pools = api.read_all_node_pools(cluster_id, config=ctx.obj["config"])
    if pools:
        tab = [
            (p.id, p.name or "-", p.kubernetes_mode, p.count, p.status)
            for p in pools
        ]
        table(tab, headers=["ID", "Name", "Mode", "Count", "Status"])
    else:
        info(f"Cluster '{cluster_id}' has no node pool(s)")


@nodepool.command("scale", help="Scale a node pool to the given node count")
@click.argument("cluster_id")
@click.argument("pool_id")
@click.argument("count", type=click.IntRange(min=0))
@click.option("-w", "--wait", is_flag=True, help="Wait until the pool is RUNNING again")
@click.option(
    "--timeout", type=int, default=5 * 60, help="Seconds to wait for the node pool"
)
@click.pass_context
@standard_error_handler
def scale_node_pool(ctx, cluster_id, pool_id, count, wait, timeout):
    config = ctx.obj["config"]
    # read before scaling, a scale up is only done once it was UPDATING
    current = api.read_node_pool(cluster_id, pool_id, config=config) if wait else None
    pool = api.scale_node_pool(cluster_id, pool_id, count, config=config)
    info(f"Node pool '{pool.id}' requested to scale to {pool.count} node(s)")
    if wait:
        start_time = time.time()
        spec = PollSpec(interval=0.5, timeout=timeout, immediate=False)
        # a scale down can finish before UPDATING is ever observed
        if count > current.count:
            wait_for_node_pool_updating(cluster_id, pool_id, config=config, spec=spec)
        wait_for_node_pool_running(
            cluster_id,
            pool_id,
            config=config,
            spec=spec,
        )
        success(f"Node pool became running in {time.time() - start_time:.1f} seconds")
