import json
import logging
from typing import Dict, List, Mapping, Optional, Protocol, runtime_checkable

import httpx
from pydantic import ValidationError

from availability_service import config
from availability_service.exceptions import StockSourceError, StockSourceUnavailable
from availability_service.models import InventoryItem, StockLevel

logger = logging.getLogger("stock_source")


@runtime_checkable
class StockSource(Protocol):
    """
    Anything that can report the stock level of a product at a warehouse.

    lookup() returns None when the (product, warehouse) pair is unknown;
    a known pair with no units left returns 0.
    """

    async def load(self) -> None:
        ...

    async def lookup(self, product_id: str, warehouse: str) -> Optional[int]:
        ...


class InMemoryStockSource:
    def __init__(self, levels: Optional[Mapping[str, Mapping[str, int]]] = None):
        # product_id -> warehouse -> stock
        self._inventory: Dict[str, Dict[str, int]] = {
            product_id: dict(warehouses) for product_id, warehouses in (levels or {}).items()
        }

    async def load(self) -> None:
        return None

    async def lookup(self, product_id: str, warehouse: str) -> Optional[int]:
        return self._inventory.get(product_id, {}).get(warehouse)


class FileStockSource:
    """Stock levels read from a JSON array of {product_id, warehouse, stock_level} rows."""

    def __init__(self, path: str):
        self.path = path
        self._items: List[InventoryItem] = []

    async def load(self) -> None:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
        except OSError as e:
            raise StockSourceError(f"failed to read inventory file: {e}") from e

        try:
            rows = json.loads(raw)
            if not isinstance(rows, list):
                raise TypeError("expected a JSON array of inventory items")
            items = [InventoryItem(**row) for row in rows]
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            raise StockSourceError(f"failed to parse inventory JSON: {e}") from e

        self._items = items
        logger.info("Loaded %d inventory rows from %s", len(items), self.path)

    async def lookup(self, product_id: str, warehouse: str) -> Optional[int]:
        for item in self._items:
            if item.product_id == product_id and item.warehouse == warehouse:
                return item.stock_level
        return None


class ApiStockSource:
    """Stock levels fetched from a remote inventory API over HTTP."""

    def __init__(self, base_url: str, timeout_ms: int = 1000, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout_ms = timeout_ms
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        # Convert ms to seconds
        timeout_sec = self.timeout_ms / 1000.0
        return httpx.AsyncClient(base_url=self.base_url, timeout=timeout_sec, transport=self._transport)

    async def load(self) -> None:
        try:
            async with self._client() as client:
                response = await client.get("/health")
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise StockSourceUnavailable(f"inventory API at {self.base_url} is not reachable: {e}") from e
        logger.info("Inventory API at %s is reachable", self.base_url)

    async def lookup(self, product_id: str, warehouse: str) -> Optional[int]:
        params = {"product": product_id, "warehouse": warehouse}
        try:
            async with self._client() as client:
                response = await client.get("/api/inventory", params=params)
        except httpx.TimeoutException as e:
            raise StockSourceUnavailable(f"inventory API timed out after {self.timeout_ms}ms") from e
        except httpx.RequestError as e:
            raise StockSourceUnavailable(f"inventory API unreachable: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise StockSourceUnavailable(
                f"inventory API returned status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return StockLevel.model_validate(response.json()).stock_level
        except (ValueError, ValidationError) as e:
            raise StockSourceUnavailable(f"inventory API returned a malformed body: {e}") from e


def build_stock_source(kind: Optional[str] = None) -> StockSource:
    kind = (kind or config.STOCK_SOURCE).lower()
    if kind == "file":
        return FileStockSource(config.INVENTORY_FILE)
    if kind == "api":
        return ApiStockSource(config.STOCK_API_URL, config.STOCK_API_TIMEOUT_MS)
    raise StockSourceError(f"unknown stock source '{kind}' (expected 'file' or 'api')")
