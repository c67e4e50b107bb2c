"""Grocery ordering connectors."""

from kitchly.connectors.base import ConnectorResponse, GroceryOrderConnector
from kitchly.connectors.instacart import InstacartConnector, build_order_client

__all__ = [
    "ConnectorResponse",
    "GroceryOrderConnector",
    "InstacartConnector",
    "build_order_client",
]
