"""
Async REST client for the storefront and back-office.

Thin wrapper over ``httpx.AsyncClient``; keeps the bearer token from
login/register and attaches it to every call.
"""
import copy
from typing import Any, Dict, List, Optional

import httpx

from chapa_quente.app_logger import get_logger
from chapa_quente.catalog import DEFAULT_MENU, DEFAULT_STOCK

log = get_logger("client.api")


class ApiError(Exception):
    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def bundled_products() -> List[Dict[str, Any]]:
    """The default menu shaped like a /api/products response."""
    products = []
    for idx, entry in enumerate(DEFAULT_MENU, start=1):
        product = copy.deepcopy(entry)
        product.update({"id": idx, "stock": DEFAULT_STOCK, "is_active": True})
        products.append(product)
    return products


class ApiClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self.user: Optional[Dict[str, Any]] = None
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        resp = await self._http.request(method, path, headers=headers, **kwargs)
        if resp.status_code >= 400:
            try:
                detail = resp.json().get("detail", resp.text)
            except ValueError:
                detail = resp.text
            raise ApiError(resp.status_code, str(detail))
        return resp.json()

    # Auth

    def _signed_in(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self.user = data["user"]
        self.token = data.get("token")
        return self.user

    async def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        data = await self._request("POST", "/api/auth/register", json={"name": name, "email": email, "password": password})
        return self._signed_in(data)

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        return self._signed_in(data)

    async def continue_as_guest(self, name: str) -> Dict[str, Any]:
        data = await self._request("POST", "/api/auth/guest", json={"name": name})
        return self._signed_in(data)

    def logout(self) -> None:
        self.user = None
        self.token = None

    # Catalog

    async def list_products(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"category": category} if category else None
        data = await self._request("GET", "/api/products", params=params)
        return data["products"]

    async def load_products(self) -> List[Dict[str, Any]]:
        """Product listing that degrades to the bundled menu instead of failing."""
        try:
            products = await self.list_products()
        except (httpx.HTTPError, ApiError) as e:
            log.warning("product listing unavailable, using bundled menu: %s", e)
            return bundled_products()
        return products or bundled_products()

    # Orders

    async def create_order(self, order: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/api/orders", json=order)

    async def list_orders(self, status: Optional[str] = None, limit: int = 50, offset: int = 0) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"limit": limit, "offset": offset}
        if status:
            params["status"] = status
        data = await self._request("GET", "/api/orders", params=params)
        return data["orders"]

    async def get_order(self, order_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/orders/{order_id}")

    async def update_order_status(self, order_id: str, status: str) -> Dict[str, Any]:
        return await self._request("PATCH", f"/api/orders/{order_id}/status", json={"status": status})

    async def financial_stats(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/orders/stats/financial")

    # Stock

    async def set_stock(self, product_id: int, quantity: int) -> Dict[str, Any]:
        return await self._request("PUT", f"/api/stock/{product_id}", json={"quantity": quantity})

    async def low_stock(self, threshold: int = 10) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/api/stock/alerts/low", params={"threshold": threshold})
        return data["low_stock"]

    # Loyalty

    async def redeem_loyalty(self) -> Dict[str, Any]:
        return await self._request("POST", "/api/users/loyalty/redeem")
