from .utils import stopwatch  # noqa

from .templates import create_template, read_template  # noqa
from .clusters import (  # noqa
    create_cluster,
    read_cluster,
    read_all_clusters,
    delete_cluster,
)
from .nodepools import read_all_node_pools, read_node_pool, scale_node_pool  # noqa
