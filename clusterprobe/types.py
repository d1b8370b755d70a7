import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ClusterStatus(Enum):
    PROVISIONING = "PROVISIONING"
    RUNNING = "RUNNING"
    DELETING = "DELETING"


class NodePoolStatus(Enum):
    RUNNING = "RUNNING"
    UPDATING = "UPDATING"


class KubernetesMode(Enum):
    MASTER = "master"
    WORKER = "worker"


class Provider(Enum):
    AMAZON_WEB_SERVICES = "amazon_web_services"
    AZURE = "azure"
    DIGITAL_OCEAN = "digital_ocean"
    GOOGLE = "google"
    PACKET = "packet"


MISSING_STATUS = "<missing>"


def _status_type(data: dict) -> str:
    # unknown values are kept so watchers can report them
    status = data.get("status") or {}
    status_type = status.get("type")
    return str(status_type) if status_type is not None else MISSING_STATUS


@dataclass
class Template:
    id: str
    description: Optional[str]
    provider_name: Optional[str]
    _data: Dict[str, Any] = field(repr=False, default_factory=dict)

    @classmethod
    def from_raw(cls, data: dict) -> "Template":
        return cls(
            id=data["id"],
            description=data.get("description"),
            provider_name=data.get("provider_name"),
            _data=data,
        )


@dataclass
class Cluster:
    id: str
    name: Optional[str]
    provider_name: Optional[str]
    # the raw status type as reported by the API
    status: str
    labels: Dict[str, str] = field(default_factory=dict)
    _data: Dict[str, Any] = field(repr=False, default_factory=dict)

    @classmethod
    def from_raw(cls, data: dict) -> "Cluster":
        return cls(
            id=data["id"],
            name=data.get("name") or (data.get("labels") or {}).get("name"),
            provider_name=data.get("provider_name"),
            status=_status_type(data),
            labels=data.get("labels") or {},
            _data=data,
        )


@dataclass
class NodePool:
    id: str
    name: Optional[str]
    kubernetes_mode: str
    count: int
    status: str
    kubernetes_version: Optional[str] = None
    os: Optional[str] = None
    _data: Dict[str, Any] = field(repr=False, default_factory=dict)

    @classmethod
    def from_raw(cls, data: dict) -> "NodePool":
        return cls(
            id=data["id"],
            name=data.get("name"),
            kubernetes_mode=str(data.get("kubernetes_mode")),
            count=int(data.get("count") or 0),
            status=_status_type(data),
            kubernetes_version=data.get("kubernetes_version"),
            os=data.get("os"),
            _data=data,
        )

    @property
    def is_worker(self) -> bool:
        return self.kubernetes_mode == KubernetesMode.WORKER.value


@dataclass
class ClusterCreateRequest:
    # the provider (credentials) ID used to provision the cluster
    provider_id: str
    template_id: str
    # the name of the cluster, becomes the "name" label
    name: str
    provider: Provider
    environment: str = field(default_factory=lambda: "e2e-test")
    labels: Dict[str, str] = field(default_factory=lambda: {})

    @classmethod
    def for_template(
        cls,
        template: Template,
        provider_id: str,
        environment: str = "e2e-test",
    ) -> "ClusterCreateRequest":
        """
        It builds the create request for the provider the template was made for

        :param template: the template the cluster is created from
        :param provider_id: the ID of the provider credentials to use
        :param environment: the environment label of the cluster
        :return: A ClusterCreateRequest
        :raises RuntimeError: if the template's provider is unknown
        """
        try:
            provider = Provider(template.provider_name)
        except ValueError:
            raise RuntimeError(
                f"unknown provider name '{template.provider_name}'"
            ) from None
        if not provider_id:
            raise RuntimeError("A provider ID is required to create a cluster")
        if not template.description:
            raise RuntimeError(f"The template {template.id} has no description")
        return cls(
            provider_id=provider_id,
            template_id=template.id,
            name=template.description,
            environment=environment,
            provider=provider,
        )

    def as_dict(self) -> dict[str, Any]:
        labels = {"name": self.name, "environment": self.environment}
        labels.update(self.labels)
        return {
            "provider_id": self.provider_id,
            "template_id": self.template_id,
            "labels": labels,
        }
