import base64
import binascii
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from jinja2 import (
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    TemplateError,
)

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.strftime(TIMESTAMP_FORMAT)


@dataclass
class TemplateValues:
    # the same version and OS are assumed across all node pools
    MasterKubernetesVersion: str
    WorkerKubernetesVersion: str
    Description: str
    Timestamp: str = field(default_factory=timestamp)
    SSHPublicKey: str = field(default_factory=lambda: "")

    @classmethod
    def for_version(
        cls, kubernetes_version: str, ssh_public_key: str = ""
    ) -> "TemplateValues":
        return cls(
            MasterKubernetesVersion=kubernetes_version,
            WorkerKubernetesVersion=kubernetes_version,
            Description=f"e2e-{kubernetes_version}",
            SSHPublicKey=ssh_public_key,
        )


def _create_env(loader) -> Environment:
    return Environment(
        loader=loader,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def render_template(path: Union[str, Path], values: Dict[str, Any]) -> str:
    """
    Render a template file with the given values

    :param path: path to the template file
    :param values: variables passed to the template
    :return: the rendered template
    :raises RuntimeError: if the template cannot be read or rendered
    """
    template_path = Path(path)
    if not template_path.is_file():
        raise RuntimeError(f"The template file {template_path} does not exist")
    env = _create_env(FileSystemLoader(str(template_path.parent)))
    try:
        return env.get_template(template_path.name).render(**values)
    except TemplateError as e:
        raise RuntimeError(f"Cannot render template {template_path}: {e}") from None


def load_ssh_public_key(
    filename: Optional[str] = None, b64: Optional[str] = None
) -> str:
    """
    It returns the SSH public key to place in a template, read from a file or decoded from base64

    :param filename: path to a public key file
    :param b64: a base64 encoded public key
    :return: the public key, or an empty string if neither is given
    """
    if filename and b64:
        raise RuntimeError(
            "Please specify one or neither of --ssh-public-key-file or --ssh-public-key, but not both"
        )
    if filename:
        logger.debug(f"Reading SSH public key from {filename}")
        return Path(filename).read_text()
    if b64:
        try:
            return base64.b64decode(b64.encode("utf-8"), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise RuntimeError(f"Cannot decode the SSH public key: {e}") from None
    return ""


def operating_system_of(request: dict) -> str:
    # the same OS is assumed across all node pools, so any will do
    variables = (request.get("configuration") or {}).get("variable") or {}
    for variable in variables.values():
        os_name = ((variable or {}).get("default") or {}).get("os")
        if not os_name:
            raise RuntimeError("The template's node pool variable does not define an OS")
        return os_name
    raise RuntimeError("The template does not define any node pool variable")


def build_template_request(path: Union[str, Path], values: TemplateValues) -> dict:
    """
    It renders a template file and turns it into a template create request

    The operating system is only known from the rendered template, so it is appended to
    the description.

    :param path: path to the template file
    :param values: TemplateValues
    :return: the template create request
    """
    rendered = render_template(path, asdict(values))
    try:
        req = yaml.safe_load(rendered)
    except yaml.YAMLError as e:
        raise RuntimeError(f"The rendered template is not valid YAML: {e}") from None
    if not isinstance(req, dict):
        raise RuntimeError("The rendered template is not a mapping")
    operating_system = operating_system_of(req)
    req["description"] = f"{req.get('description') or values.Description}-{operating_system}"
    return req


def render_kubeconfig(
    organization_id: str, cluster_id: str, token: str, proxy_base_url: str
) -> str:
    env = _create_env(PackageLoader("clusterprobe", "resources"))
    return env.get_template("kubeconfig.yaml.j2").render(
        ProxyBaseURL=proxy_base_url,
        OrganizationID=organization_id,
        ClusterID=cluster_id,
        AuthToken=token,
    )


def write_kubeconfig(
    filename: Union[str, Path],
    organization_id: str,
    cluster_id: str,
    token: str,
    proxy_base_url: str,
) -> str:
    """
    It writes a kubeconfig that reaches the cluster's API server through the cloud proxy

    :return: the path the kubeconfig was written to
    """
    kubeconfig = render_kubeconfig(organization_id, cluster_id, token, proxy_base_url)
    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(kubeconfig)
    logger.info(f"KUBECONFIG file for cluster {cluster_id} written to: {path}")
    return str(path)
