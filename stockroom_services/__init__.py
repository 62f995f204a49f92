"""
stockroom_services -- orchestration layer.

Wires the pure kernel, the engines and the configuration into the
InventoryLedger, the one stateful component of the system.
"""

from stockroom_services.inventory_ledger import InventoryLedger

__all__ = ["InventoryLedger"]
