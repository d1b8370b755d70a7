import logging

from clusterprobe.api.rest import organization_path, request
from clusterprobe.api.utils import stopwatch
from clusterprobe.configuration import ClientConfiguration, default_configuration
from clusterprobe.types import Template

logger = logging.getLogger(__name__)


@stopwatch
def create_template(
    body: dict, config: ClientConfiguration = default_configuration
) -> Template:
    """
    It creates a cluster template from a rendered template request

    :param body: the template create request
    :type body: dict
    :param config: ClientConfiguration = default_configuration
    :return: The created Template
    """
    logger.debug(f"Creating template '{body.get('description')}'")
    data = request(config, "POST", organization_path(config, "templates"), body)
    if not data:
        raise RuntimeError("The template create request returned no template")
    template = Template.from_raw(data)
    logger.debug(f"Successfully created template {template.id}")
    return template


@stopwatch
def read_template(
    template_id: str, config: ClientConfiguration = default_configuration
) -> Template:
    data = request(config, "GET", organization_path(config, "templates", template_id))
    return Template.from_raw(data)
