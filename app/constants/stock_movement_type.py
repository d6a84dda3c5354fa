# app/constants/stock_movement_type.py

from enum import Enum


class StockMovementType(str, Enum):
    IN = "IN"
    OUT = "OUT"
    ADJUSTMENT = "ADJUSTMENT"


# Default ledger reasons
REASON_INITIAL_STOCK = "Initial stock"
NOTE_INITIAL_STOCK = "Item added to inventory"
REASON_JOB_USAGE = "Used in repair job"
