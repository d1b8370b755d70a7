import logging
import sys

import click

from clusterprobe.configuration import ClientConfiguration
from .console import info
from .utils import AliasedGroup


@click.group(cls=AliasedGroup)
@click.option(
    "--organization",
    help="The organization ID to operate in instead of the test organization",
)
@click.option(
    "--kubeconfig",
    help="Path to the kubeconfig file of the cluster under test (default: KUBECONFIG)",
)
@click.option(
    "--api-debug",
    default=False,
    is_flag=True,
    help="Log every request to and response from the provision API",
)
@click.option("-d", "--debug", default=False, is_flag=True)
@click.pass_context
def cli(ctx, organization, kubeconfig, api_debug, debug):
    ctx.ensure_object(dict)
    if "config" not in ctx.obj:
        ctx.obj["config"] = ClientConfiguration(
            organization_id=organization,
            kubeconfig=kubeconfig,
            debug=api_debug or None,
        )
    if debug or api_debug:
        console = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter("[%(levelname)s] %(message)s")
        console.setFormatter(formatter)

        logger = logging.getLogger("clusterprobe")
        logger.setLevel(logging.DEBUG)
        logger.addHandler(console)


@cli.group("cluster", cls=AliasedGroup, help="Inspect and delete clusters")
@click.pass_context
def cluster(ctx):
    pass


@cli.group("nodepool", cls=AliasedGroup, help="Inspect and scale node pools")
@click.pass_context
def nodepool(ctx):
    pass


@cli.command()
@click.pass_context
def version(ctx):
    from clusterprobe.configuration import __VERSION__

    info("clusterprobe version: " + __VERSION__)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()

from .cluster import *  # noqa
from .nodepool import *  # noqa
from .kubeconfig import *  # noqa
