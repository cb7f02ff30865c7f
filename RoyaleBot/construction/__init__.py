"""
RoyaleBot.construction — pending construction orders on map sites.

Public API
----------
    from RoyaleBot.construction import ConstructionOrder, OrderStatus
"""

from RoyaleBot.construction.construction_order import (
    ConstructionOrder,
    OrderStatus,
)

__all__ = [
    "ConstructionOrder",
    "OrderStatus",
]
