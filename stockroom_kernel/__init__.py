"""
Stockroom Kernel

Pure domain core of the stockroom slotting system:
- Grid coordinates (Slot) and bounded grids (Grid)
- Inventory items and their placement categories
- Read-only occupancy views handed to strategies and filters
- Derived lookup indices kept exact under insert and remove
- Typed exceptions and structured logging
"""

__version__ = "0.1.0"
