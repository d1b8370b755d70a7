import logging
from typing import Any, Optional

from clusterprobe.configuration import ClientConfiguration
from clusterprobe.errors import CloudAPIError

logger = logging.getLogger(__name__)


def organization_path(config: ClientConfiguration, *parts: str) -> str:
    return "/".join(["/v3/organizations", config.ORGANIZATION_ID, *parts])


def request(
    config: ClientConfiguration,
    method: str,
    path: str,
    body: Optional[dict] = None,
) -> Any:
    """
    It sends one request to the provision API and decodes the JSON response

    :param config: the configuration holding the session and base URL
    :param method: the HTTP method
    :param path: the path below the provision base URL
    :param body: an optional JSON body
    :return: the decoded response, or None for empty responses
    :raises CloudAPIError: if the API answers with a non-2xx status
    """
    url = f"{config.PROVISION_BASE_URL}{path}"
    if config.DEBUG:
        logger.debug(f"{method} {url} {body if body is not None else ''}")
    response = config.HTTP_SESSION.request(
        method, url, json=body, timeout=config.REQUEST_TIMEOUT
    )
    if config.DEBUG:
        logger.debug(f"{method} {url} -> {response.status_code}: {response.text}")
    if not response.ok:
        raise CloudAPIError.from_response(response)
    if not response.content:
        return None
    return response.json()
