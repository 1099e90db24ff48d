"""
HTTP solver client using httpx.
"""

import json
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from alloyshare.config import SolverConfig
from alloyshare.core.solver.base import SolverClient
from alloyshare.models.instance import SolverRequest, SolverResponse
from alloyshare.utils.exceptions import TransportError
from alloyshare.utils.logger import get_logger

logger = get_logger(__name__)


class HttpSolverClient(SolverClient):
    """
    Solver client posting JSON requests to a remote Alloy service.

    Failures are never retried here; a retry is always a new user action.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        get_instances_path: str = "/getInstances",
        next_instances_path: str = "/nextInstances",
        timeout: float = 60.0,
    ):
        """
        Initialize HTTP solver client.

        Args:
            base_url: Solver service URL
            get_instances_path: Endpoint executing a command
            next_instances_path: Endpoint iterating further instances
            timeout: Request timeout in seconds
        """
        self.base_url = base_url
        self.get_instances_path = get_instances_path
        self.next_instances_path = next_instances_path
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, config: SolverConfig) -> "HttpSolverClient":
        """Create a client from the solver configuration section."""
        return cls(
            base_url=config.url,
            get_instances_path=config.get_instances_path,
            next_instances_path=config.next_instances_path,
            timeout=config.timeout,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Content-Type": "application/json", "Accept": "application/json"},
                timeout=httpx.Timeout(self.timeout),
            )
        return self._client

    async def get_instances(self, request: SolverRequest) -> SolverResponse:
        """Execute a command from scratch."""
        return await self._post(self.get_instances_path, request.to_wire())

    async def next_instances(self, request: SolverRequest) -> SolverResponse:
        """Fetch the next batch of instances."""
        return await self._post(self.next_instances_path, request.to_wire())

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpSolverClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def _post(self, path: str, payload: dict[str, Any]) -> SolverResponse:
        """POST a request and parse the reply."""
        logger.debug(f"Solver request {path} (command {payload.get('commandIndex')})")
        try:
            response = await self.client.post(path, json=payload)
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Solver did not answer within {self.timeout}s", {"path": path}
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Cannot reach solver: {e}", {"path": path}) from e

        return self._handle_response(response, path)

    def _handle_response(self, response: httpx.Response, path: str) -> SolverResponse:
        """Handle solver response and errors."""
        if response.status_code >= 400:
            raise TransportError(
                f"Solver error: {response.status_code}",
                {"path": path, "status_code": response.status_code},
            )

        try:
            data = response.json()
        except json.JSONDecodeError as e:
            raise TransportError("Invalid response format from solver", {"path": path}) from e

        try:
            return SolverResponse.model_validate(data)
        except PydanticValidationError as e:
            raise TransportError(f"Unexpected solver response: {e}", {"path": path}) from e
