"""HTTP client for the source-of-truth provider's bulk inquiry API.

Pure I/O: submits a batch, probes job status, downloads the result file. It
knows nothing about the job lifecycle; polling belongs to the caller.
"""
import threading
from typing import Any

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from bioverify_core.provider.models import ProviderJobStatus
from bioverify_core.tenants import TenantProviderConfig
from bioverify_core.util import ProviderError

logger = structlog.get_logger()

SUBMIT_PATH = "/bulk-inquiry"
STATUS_PATH = "/bulk-inquiry/{job_id}/status"
CLIENT_ID_HEADER = "client-id"
BODY_SAMPLE_CHARS = 500


class ProviderClient:
    """Client bound to one provider base URL and client id."""

    def __init__(
        self,
        base_url: str,
        client_id: str,
        timeout: float = 60.0,
        retries: int = 3,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client_id = client_id
        # HTTPTransport retries cover connection failures only
        self._http = httpx.Client(
            timeout=timeout,
            transport=transport or httpx.HTTPTransport(retries=retries),
            headers={"User-Agent": "bioverify-bulk/1.0", "Accept": "application/json"},
            follow_redirects=True,
        )

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._http.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"Provider API call failed. Status: {e.response.status_code}, "
                f"Body: {e.response.text[:BODY_SAMPLE_CHARS]}"
            ) from e
        except httpx.RequestError as e:
            raise ProviderError(f"Provider API request to {url} failed: {e}") from e
        return response

    def _data(self, response: httpx.Response) -> dict[str, Any]:
        """Return the nested ``data`` object of a JSON response."""
        try:
            body = response.json()
        except ValueError as e:
            raise ProviderError(
                f"Provider returned a non-JSON body: {response.text[:BODY_SAMPLE_CHARS]}"
            ) from e
        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise ProviderError(f"Provider response has no data object: {str(body)[:BODY_SAMPLE_CHARS]}")
        return data

    def submit(self, correlation_keys: list[str]) -> str:
        """Submit a batch inquiry; returns the provider's job id."""
        response = self._request(
            "POST",
            self.base_url + SUBMIT_PATH,
            json={"psnList": list(correlation_keys)},
            headers={CLIENT_ID_HEADER: self.client_id},
        )
        data = self._data(response)
        job_id = data.get("jobId")
        if job_id is None or not str(job_id).strip():
            raise ProviderError(
                f"Failed to get a valid jobId from the provider's response. Data object: {data}"
            )
        logger.info("provider_job_submitted", provider_job_id=str(job_id), count=len(correlation_keys))
        return str(job_id)

    def poll_status(self, provider_job_id: str) -> ProviderJobStatus:
        """Single synchronous status probe."""
        response = self._request(
            "GET",
            self.base_url + STATUS_PATH.format(job_id=provider_job_id),
            headers={CLIENT_ID_HEADER: self.client_id},
        )
        data = self._data(response)
        try:
            status = ProviderJobStatus.model_validate(data)
        except PydanticValidationError as e:
            raise ProviderError(f"Provider returned a malformed status object: {data}") from e
        if not status.status.strip():
            raise ProviderError(f"Provider returned a blank job status: {data}")
        return status

    def fetch_artifact(self, url: str) -> bytes:
        """Download the raw result container."""
        response = self._request("GET", url, headers={"Accept": "*/*"})
        logger.info("artifact_downloaded", size=len(response.content))
        return response.content


_clients: dict[str, ProviderClient] = {}
_clients_lock = threading.Lock()


def get_provider_client(
    config: TenantProviderConfig, timeout: float = 60.0, retries: int = 3
) -> ProviderClient:
    """Get a client for a tenant configuration (cached per configuration)."""
    key = config.fingerprint()
    with _clients_lock:
        client = _clients.get(key)
        if client is None:
            client = ProviderClient(
                config.api_base_url, config.client_id, timeout=timeout, retries=retries
            )
            _clients[key] = client
        return client


def clear_client_cache() -> None:
    """Close and forget cached clients."""
    with _clients_lock:
        for client in _clients.values():
            client.close()
        _clients.clear()
