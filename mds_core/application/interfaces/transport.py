"""Abstract JSON transport — port for fetching MyDataShare API responses."""

from abc import ABC, abstractmethod
from typing import Any


class JsonTransport(ABC):
    """Port — what the pagination driver needs from an HTTP client."""

    @abstractmethod
    async def fetch_json(
        self,
        url: str,
        *,
        method: str = "GET",
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Raises:
            ApiRequestError: If the response status is not a success.
        """
        ...
