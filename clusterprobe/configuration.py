import sys
import logging
from typing import Optional

from decouple import config

from clusterprobe.watch import PollSpec

console = logging.StreamHandler(sys.stdout)
formatter = logging.Formatter("[%(levelname)s] %(message)s")
console.setFormatter(formatter)

logger = logging.getLogger(__name__)
logger.addHandler(console)

__VERSION__ = "0.3.0"

TEST_ORGANIZATION_ID = "62e4e86f-fe2e-4740-a814-a950bf377daf"

STAGE_PROVISION_BASE_URL = "https://stage-provision.containership.io"
STAGE_PROXY_BASE_URL = "https://stage-proxy.containership.io"

# polling rapidly gives faster feedback, e2e runs have nothing to lose by it
DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_TIMEOUT = 5 * 60

PROVISION_POLL_INTERVAL = 1.0
PROVISION_TIMEOUT = 30 * 60

DELETE_POLL_INTERVAL = 1.0
DELETE_TIMEOUT = 8 * 60

# role bindings may not be synced right after the API server comes up
AUTH_ERROR_GRACE = 2 * 60

DEFAULT_POLL = PollSpec(
    interval=DEFAULT_POLL_INTERVAL, timeout=DEFAULT_TIMEOUT, immediate=True
)
PROVISION_POLL = PollSpec(
    interval=PROVISION_POLL_INTERVAL, timeout=PROVISION_TIMEOUT, immediate=True
)
DELETE_POLL = PollSpec(
    interval=DELETE_POLL_INTERVAL, timeout=DELETE_TIMEOUT, immediate=True
)


class ClientConfiguration(object):
    def __init__(
        self,
        token: Optional[str] = None,
        kubeconfig: Optional[str] = None,
        organization_id: Optional[str] = None,
        provision_base_url: Optional[str] = None,
        proxy_base_url: Optional[str] = None,
        debug: Optional[bool] = None,
        request_timeout: int = 30,
        auth_error_grace: int = AUTH_ERROR_GRACE,
    ):
        self.TOKEN = token or config("CONTAINERSHIP_TOKEN", default=None)
        self.KUBECONFIG = kubeconfig or config("KUBECONFIG", default=None)
        self.ORGANIZATION_ID = organization_id or config(
            "CLUSTERPROBE_ORGANIZATION_ID", default=TEST_ORGANIZATION_ID
        )
        self.PROVISION_BASE_URL = (
            provision_base_url
            or config("CLUSTERPROBE_PROVISION_URL", default=STAGE_PROVISION_BASE_URL)
        ).rstrip("/")
        self.PROXY_BASE_URL = (
            proxy_base_url
            or config("CLUSTERPROBE_PROXY_URL", default=STAGE_PROXY_BASE_URL)
        ).rstrip("/")
        if self.PROVISION_BASE_URL != STAGE_PROVISION_BASE_URL:
            logger.debug(
                f"Using provision API (other than default): {self.PROVISION_BASE_URL}"
            )
        if debug is None:
            debug = config("CLUSTERPROBE_API_DEBUG", default=False, cast=bool)
        self.DEBUG = debug
        self.REQUEST_TIMEOUT = request_timeout
        self.AUTH_ERROR_GRACE = auth_error_grace

    def _init_session(self):
        import requests

        if not self.TOKEN:
            raise RuntimeError(
                "Please specify a Containership Cloud token via CONTAINERSHIP_TOKEN env var"
            )
        session = requests.Session()
        session.headers.update(
            {
                "Authorization": f"JWT {self.TOKEN}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )
        self.HTTP_SESSION = session

    def _init_kubeapi(self):
        from clusterprobe.kube import kube_client_from_kubeconfig

        if not self.KUBECONFIG:
            raise RuntimeError("Please set the KUBECONFIG environment variable")
        self.K8S_CORE_API = kube_client_from_kubeconfig(self.KUBECONFIG)

    def __getattr__(self, item):
        if item == "HTTP_SESSION":
            try:
                return self.__getattribute__(item)
            except AttributeError:
                self._init_session()
        if item == "K8S_CORE_API":
            try:
                return self.__getattribute__(item)
            except AttributeError:
                self._init_kubeapi()

        return self.__getattribute__(item)

    def to_dict(self):
        return {
            k: v for k, v in self.__dict__.items() if k.isupper() and k != "TOKEN"
        }

    def __str__(self):
        return str(self.to_dict())


default_configuration = ClientConfiguration()
