from chapa_quente.client.api import ApiClient, ApiError, bundled_products
from chapa_quente.client.order_state import OrderBoard, OrderPoller

__all__ = ["ApiClient", "ApiError", "OrderBoard", "OrderPoller", "bundled_products"]
