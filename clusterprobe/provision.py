import logging
from pathlib import Path
from typing import Union

from clusterprobe import api
from clusterprobe.configuration import ClientConfiguration, default_configuration
from clusterprobe.templates import TemplateValues, build_template_request
from clusterprobe.types import Cluster, ClusterCreateRequest, Template

logger = logging.getLogger(__name__)


def create_template_from_file(
    path: Union[str, Path],
    kubernetes_version: str,
    ssh_public_key: str = "",
    config: ClientConfiguration = default_configuration,
) -> Template:
    """
    It renders the template file for a Kubernetes version and creates the template

    :param path: path to the template file
    :param kubernetes_version: the Kubernetes version (without leading 'v')
    :param ssh_public_key: the SSH public key placed into the template, if any
    :return: The created Template
    """
    values = TemplateValues.for_version(kubernetes_version, ssh_public_key)
    req = build_template_request(path, values)
    return api.create_template(req, config=config)


def create_cluster_from_template(
    template_id: str,
    provider_id: str,
    config: ClientConfiguration = default_configuration,
) -> Cluster:
    template = api.read_template(template_id, config=config)
    req = ClusterCreateRequest.for_template(template, provider_id)
    return api.create_cluster(req, config=config)
