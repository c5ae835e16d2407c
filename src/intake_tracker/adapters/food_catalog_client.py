"""HTTP client for the food catalog service."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class FoodCatalogClient(Protocol):
    """Interface for food catalog API interactions."""

    async def get_food(self, food_id: str) -> dict[str, object]:
        """Fetch a food by id and return raw API data."""

    async def get_foods(self, food_ids: list[str]) -> list[dict[str, object]]:
        """Fetch several foods by id and return raw API data."""


@dataclass
class HttpxFoodCatalogClient(FoodCatalogClient):
    """HTTPX-backed food catalog client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10

    @classmethod
    def create(
        cls, base_url: str, timeout_seconds: float = 10
    ) -> "HttpxFoodCatalogClient":
        """Create a catalog client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def get_food(self, food_id: str) -> dict[str, object]:
        """Fetch a food by id."""
        url = f"{self.base_url}/foods/{food_id}"
        response = await self.http_client.get(url, timeout=self.timeout_seconds)
        response.raise_for_status()
        return response.json()

    async def get_foods(self, food_ids: list[str]) -> list[dict[str, object]]:
        """Fetch foods by ids in a single request."""
        url = f"{self.base_url}/foods/batch"
        response = await self.http_client.post(
            url,
            json={"ids": food_ids},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
