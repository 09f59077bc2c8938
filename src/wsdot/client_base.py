from __future__ import annotations

import os
import logging
from typing import Any, Dict, Optional

import requests


logger = logging.getLogger(__name__)


API_KEY_ENV = "WSDOT_API_KEY"
TIMEOUT_ENV = "WSDOT_TIMEOUT_SEC"


class WSDOTClientError(RuntimeError):
    """Base error for WSDOT client failures."""


class InvalidConfigurationError(WSDOTClientError):
    """Raised when the client is constructed without a usable API key or timeout."""


class MissingClientError(WSDOTClientError):
    """Raised when a sub-API client is created without a WSDOTClient."""


class RequestConstructionError(WSDOTClientError):
    """Raised when the outbound request cannot be built."""


class TransportError(WSDOTClientError):
    """Raised when the request fails at the network level."""


class RequestTimeoutError(TransportError):
    """Raised when request times out."""


class UnexpectedStatusError(WSDOTClientError):
    """Raised for any response whose status is not 200."""

    def __init__(self, status_code: int, url: str = "") -> None:
        self.status_code = status_code
        self.url = url
        message = f"unexpected status code: {status_code}"
        if url:
            message = f"{message} from {url}"
        super().__init__(message)


class DecodeError(WSDOTClientError):
    """Raised when a response body does not match the expected JSON shape."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        message = f"error decoding response for {operation}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class MalformedTimestampError(WSDOTClientError, ValueError):
    """Raised when a /Date(...)/ string does not match the expected format."""


class InvalidOffsetError(WSDOTClientError, ValueError):
    """Raised when a ±HHMM offset string cannot be parsed."""


def require_positive_id(name: str, value: Any) -> int:
    """Validate an id before it is placed in a query string or URL path."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise RequestConstructionError(
            f"{name} must be a positive integer, got {value!r}"
        )
    return value


class WSDOTClient:
    """
    Shared configuration for every WSDOT sub-API client.

    Holds:
    - The HTTP transport (a requests.Session)
    - The API key attached to every request
    - An optional per-request timeout handed to the transport

    The client is read-only after construction and is safe to hand to
    several CamerasClient / FerriesClient instances.
    """

    DEFAULT_HEADERS = {
        "User-Agent": "wsdot-client/0.1.0",
        "Accept": "application/json",
    }

    def __init__(
        self,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:

        if api_key is None:
            api_key = os.getenv(API_KEY_ENV, "")
        if not api_key or not api_key.strip():
            raise InvalidConfigurationError(
                f"invalid api key: pass api_key or set {API_KEY_ENV}."
            )

        if timeout is None:
            timeout = self._timeout_from_env()

        self._api_key = api_key
        self._timeout = timeout

        # Only sessions we create are ours to configure and close.
        self._owns_session = session is None
        if session is None:
            session = requests.Session()
            session.headers.update(self.DEFAULT_HEADERS)
        self._session = session

        # Never log the key.
        logger.info(
            "WSDOTClient initialized (timeout=%s, own_session=%s).",
            self._timeout,
            self._owns_session,
        )

    @staticmethod
    def _timeout_from_env() -> Optional[float]:
        raw = os.getenv(TIMEOUT_ENV, "").strip()
        if not raw:
            return None
        try:
            timeout_sec = float(raw)
        except ValueError as e:
            raise InvalidConfigurationError(
                f"{TIMEOUT_ENV} must be a number, got '{raw}'."
            ) from e
        if timeout_sec <= 0:
            raise InvalidConfigurationError(
                f"{TIMEOUT_ENV} must be positive, got '{raw}'."
            )
        return timeout_sec

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def session(self) -> requests.Session:
        return self._session

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    def _redact(self, err: Exception) -> str:
        return str(err).replace(self._api_key, "***")

    def __repr__(self) -> str:
        return f"WSDOTClient(timeout={self._timeout!r})"

    # ---------------------------------------------------
    # Core request method
    # ---------------------------------------------------
    def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        operation: str = "request",
    ) -> Any:
        """
        Send one GET request and return parsed JSON.

        `params` must already contain the access-code parameter for the
        sub-API being called. Raises clean, structured errors; nothing is
        retried.

        Error messages never contain the API key. The chained `__cause__` of a
        TransportError is the raw requests exception, whose text can include
        the full request URL (key included); do not log it verbatim.
        """
        request = requests.Request(
            "GET",
            url,
            params=params,
            headers={"Content-Type": "application/json"},
        )

        try:
            prepared = self._session.prepare_request(request)
        except (requests.RequestException, ValueError) as e:
            raise RequestConstructionError(
                f"error creating request for {operation}: {url}"
            ) from e

        settings = self._session.merge_environment_settings(
            prepared.url, {}, None, None, None
        )

        logger.debug("GET %s (%s)", url, operation)
        try:
            response = self._session.send(prepared, timeout=self._timeout, **settings)
        except requests.Timeout as e:
            raise RequestTimeoutError(
                f"Request timed out calling {url}: {self._redact(e)}"
            ) from e
        except requests.RequestException as e:
            raise TransportError(
                f"error making request to {url}: {self._redact(e)}"
            ) from e

        if response.status_code != 200:
            raise UnexpectedStatusError(response.status_code, url)

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(operation, "invalid JSON") from e

    # ---------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------
    def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "WSDOTClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
