# 📄 File: gardenview/shared/infrastructure/external_apis/api_client.py

# 🧭 Purpose (Layman Explanation):
# A shared HTTP helper that talks to outside services (the AI helper and the weather
# service), with timeouts and clear error messages when something goes wrong.

# 🧪 Purpose (Technical Summary):
# Generic async aiohttp client: lazy session creation, JSON requests and status-code
# to ExternalServiceError mapping. One request per call and no retries; callers
# decide what a failure means.

# 🔗 Dependencies:
# - aiohttp: Async HTTP client
# - gardenview.shared.core.exceptions: ExternalServiceError

# 🔄 Connected Modules / Calls From:
# Used by: WeatherClient, AIClient

import asyncio
import time
from typing import Any, Dict, List, Mapping, Optional, Union

import aiohttp
from aiohttp import ClientSession, ClientTimeout

from gardenview.shared.core.exceptions import ExternalServiceError
from gardenview.shared.utils.logging import get_logger

logger = get_logger(__name__)

JSONBody = Union[Dict[str, Any], List[Any]]

# Bytes of an error body kept in ExternalServiceError details
RESPONSE_EXCERPT = 500


def _status_message(api_name: str, response: aiohttp.ClientResponse) -> str:
    status = response.status
    if status in (401, 403):
        return f"Access denied by {api_name} ({status})"
    if status == 429:
        return f"Rate limit exceeded for {api_name}, retry after {response.headers.get('Retry-After', '?')}s"
    if 400 <= status < 500:
        return f"Client error for {api_name} ({status})"
    if status >= 500:
        return f"{api_name} unavailable ({status})"
    return f"Unexpected status code for {api_name}: {status}"


class APIClient:
    """
    Async JSON-over-HTTP client for one external service.

    The aiohttp session is opened on first use and reopened after ``close()``.
    """

    def __init__(
        self,
        base_url: str,
        api_name: str,
        timeout: int = 30,
        user_agent: str = "GardenView/1.0",
        headers: Optional[Mapping[str, str]] = None
    ):
        self.base_url = base_url.rstrip('/')
        self.api_name = api_name
        self.timeout = timeout
        self.headers = {
            'User-Agent': f'{user_agent} ({api_name}-client)',
            'Accept': 'application/json',
            **(headers or {}),
        }
        self.session: Optional[ClientSession] = None

    async def _session(self) -> ClientSession:
        if self.session is None or self.session.closed:
            self.session = ClientSession(timeout=ClientTimeout(total=self.timeout), headers=self.headers)
            logger.debug(f"HTTP session opened for {self.api_name}")
        return self.session

    def _build_url(self, endpoint: str) -> str:
        if endpoint.startswith(('http://', 'https://')):
            return endpoint
        if not endpoint:
            return self.base_url
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    async def request(
        self,
        method: str,
        endpoint: str = '',
        params: Optional[Dict[str, Any]] = None,
        data: Optional[JSONBody] = None,
        timeout: Optional[int] = None
    ) -> Any:
        """
        Send one request and return the decoded JSON body.

        Raises:
            ExternalServiceError: Non-2xx status, invalid JSON, timeout or transport failure
        """
        session = await self._session()
        url = self._build_url(endpoint)
        options: Dict[str, Any] = {}
        if params:
            options['params'] = params
        if data is not None:
            options['json'] = data
        if timeout:
            options['timeout'] = ClientTimeout(total=timeout)

        started = time.monotonic()
        try:
            async with session.request(method, url, **options) as response:
                if not 200 <= response.status < 300:
                    body = await response.text()
                    raise ExternalServiceError(
                        _status_message(self.api_name, response),
                        service=self.api_name,
                        service_response=body[:RESPONSE_EXCERPT],
                    )
                try:
                    payload = await response.json(content_type=None)
                except ValueError as e:
                    raise ExternalServiceError(f"Invalid JSON from {self.api_name}: {e}", service=self.api_name)
        except asyncio.TimeoutError:
            raise self._failed(method, url, ExternalServiceError(
                f"Timeout for {self.api_name}: {method} {url}", service=self.api_name))
        except aiohttp.ClientError as e:
            raise self._failed(method, url, ExternalServiceError(
                f"Client error for {self.api_name}: {e}", service=self.api_name))
        except ExternalServiceError as e:
            raise self._failed(method, url, e)

        logger.debug(f"{self.api_name} {method} {url} -> {response.status}",
                     elapsed_ms=round((time.monotonic() - started) * 1000))
        return payload

    def _failed(self, method: str, url: str, error: ExternalServiceError) -> ExternalServiceError:
        logger.warning(f"{self.api_name} request failed: {error.message}", method=method, url=url)
        return error

    async def get(self, endpoint: str = '', params: Optional[Dict[str, Any]] = None,
                  timeout: Optional[int] = None) -> Any:
        return await self.request('GET', endpoint, params=params, timeout=timeout)

    async def post(self, endpoint: str = '', data: Optional[JSONBody] = None,
                   params: Optional[Dict[str, Any]] = None, timeout: Optional[int] = None) -> Any:
        """POST a JSON body."""
        return await self.request('POST', endpoint, params=params, data=data, timeout=timeout)

    async def close(self):
        if self.session is not None:
            await self.session.close()
            self.session = None
            logger.debug(f"HTTP session closed for {self.api_name}")
