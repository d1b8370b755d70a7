import logging
from time import monotonic
from typing import Callable, Optional

import kubernetes as k8s
import requests
from urllib3.exceptions import ProtocolError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = (429, 500, 504)
AUTH_STATUS = (401, 403)


class CloudAPIError(RuntimeError):
    def __init__(
        self,
        status: int,
        reason: str,
        body: Optional[str] = None,
        retry_after: Optional[str] = None,
    ):
        super().__init__(f"{reason} ({status})")
        self.status = status
        self.reason = reason
        self.body = body
        self.retry_after = retry_after

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    @classmethod
    def from_response(cls, response: requests.Response) -> "CloudAPIError":
        reason = response.reason or "Request failed"
        try:
            data = response.json()
        except ValueError:
            data = None
        message = data.get("message") if isinstance(data, dict) else None
        if message:
            reason = f"{reason}: {message}"
        return cls(
            status=response.status_code,
            reason=reason,
            body=response.text,
            retry_after=response.headers.get("Retry-After"),
        )


def _status_of(error: Exception) -> Optional[int]:
    if isinstance(error, CloudAPIError):
        return error.status
    if isinstance(error, k8s.client.exceptions.ApiException):  # type: ignore
        return error.status
    if isinstance(error, requests.HTTPError) and error.response is not None:
        return error.response.status_code
    return None


def _suggests_client_delay(error: Exception) -> bool:
    if isinstance(error, CloudAPIError):
        return bool(error.retry_after)
    if isinstance(error, k8s.client.exceptions.ApiException):  # type: ignore
        return bool(error.headers and error.headers.get("Retry-After"))
    if isinstance(error, requests.HTTPError) and error.response is not None:
        return bool(error.response.headers.get("Retry-After"))
    return False


def _is_probable_eof_or_reset(error: Exception) -> bool:
    if isinstance(error, (ConnectionResetError, EOFError, ProtocolError)):
        return True
    if isinstance(error, (requests.ConnectionError, requests.Timeout)):
        return True
    message = str(error)
    return "connection reset by peer" in message or "unexpected EOF" in message


def is_retryable_api_error(error: Exception) -> bool:
    """
    Tells whether an error is likely transient, so the failed call is worth another try

    :param error: an error raised by the cloud API client or the Kubernetes client
    :return: True for server errors, throttling, timeouts, resets and explicit Retry-After hints
    """
    if _status_of(error) in RETRYABLE_STATUS:
        return True
    if _is_probable_eof_or_reset(error):
        return True
    # a Retry-After header is an explicit confirmation that a retry is expected
    return _suggests_client_delay(error)


def is_auth_error(error: Exception) -> bool:
    return _status_of(error) in AUTH_STATUS


def is_not_found(error: Exception) -> bool:
    return _status_of(error) == 404


class AuthGrace:
    """
    A transient-error predicate that tolerates authorization errors for a limited window

    Right after a cluster comes up, its role bindings may not be synced yet, so 401/403
    responses are retried. Once `window` seconds have passed since the first authorization
    error, they count as permanent, which surfaces a real permission misconfiguration
    instead of hiding it behind a timeout.
    """

    def __init__(
        self,
        window: float,
        retryable: Callable[[Exception], bool] = is_retryable_api_error,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.window = window
        self._retryable = retryable
        self._clock = clock or monotonic
        self._first_auth_error: Optional[float] = None

    def __call__(self, error: Exception) -> bool:
        if self._retryable(error):
            return True
        if not is_auth_error(error):
            return False
        now = self._clock()
        if self._first_auth_error is None:
            self._first_auth_error = now
        if now - self._first_auth_error < self.window:
            logger.debug(
                f"Ignoring authorization error ({now - self._first_auth_error:.1f}s/{self.window}s): {error}"
            )
            return True
        return False
