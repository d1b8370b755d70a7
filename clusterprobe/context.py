import logging
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

from clusterprobe.configuration import ClientConfiguration

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WriteOnce(Generic[T]):
    """
    A value that is discovered during a run and must never change once it is set
    """

    def __init__(self, name: str):
        self.name = name
        self._value: Optional[T] = None
        self._set = False

    def set(self, value: T) -> T:
        if self._set:
            raise RuntimeError(
                f"{self.name} is already set to '{self._value}' and cannot be changed"
            )
        self._value = value
        self._set = True
        logger.debug(f"{self.name} set to '{value}'")
        return value

    def get(self) -> T:
        if not self._set:
            raise RuntimeError(f"{self.name} has not been set yet")
        return self._value  # type: ignore

    @property
    def is_set(self) -> bool:
        return self._set

    def __repr__(self):
        return f"WriteOnce({self.name}={self._value if self._set else '<unset>'})"


@dataclass(frozen=True)
class RunContext:
    # state for one suite; built once and handed to every step
    config: ClientConfiguration
    organization_id: str
    cluster_id: str
    kube_api: Any


@dataclass(frozen=True)
class ProvisionContext:
    config: ClientConfiguration
    organization_id: str
    kubeconfig_filename: str
    # discovered while provisioning
    template_id: WriteOnce[str] = field(
        default_factory=lambda: WriteOnce("template ID")
    )
    cluster_id: WriteOnce[str] = field(default_factory=lambda: WriteOnce("cluster ID"))
    kube_api: WriteOnce[Any] = field(
        default_factory=lambda: WriteOnce("Kubernetes API")
    )


@dataclass(frozen=True)
class ScaleContext:
    run: RunContext
    # the node pool operated on across steps, so it is scaled up and back down
    node_pool_id: WriteOnce[str] = field(
        default_factory=lambda: WriteOnce("node pool ID")
    )
