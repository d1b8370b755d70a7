import click

from clusterprobe.templates import write_kubeconfig
from cli.console import info
from cli.utils import standard_error_handler
from cli.__main__ import cli as _cli


@_cli.command(
    "kubeconfig",
    help="Write a kubeconfig that reaches a cluster through the cloud proxy",
)
@click.argument("cluster_id")
@click.option(
    "-o",
    "--output",
    help="The file to write the kubeconfig to (default: KUBECONFIG)",
)
@click.pass_context
@standard_error_handler
def kubeconfig(ctx, cluster_id, output):
    config = ctx.obj["config"]
    target = output or config.KUBECONFIG
    if not target:
        raise RuntimeError("Please pass --output or set the KUBECONFIG environment variable")
    if not config.TOKEN:
        raise RuntimeError(
            "Please specify a Containership Cloud token via CONTAINERSHIP_TOKEN env var"
        )
    path = write_kubeconfig(
        target,
        organization_id=config.ORGANIZATION_ID,
        cluster_id=cluster_id,
        token=config.TOKEN,
        proxy_base_url=config.PROXY_BASE_URL,
    )
    info(f"You can now set 'export KUBECONFIG={path}' and work with the cluster.")
