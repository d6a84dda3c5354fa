# Inventory
from app.models.inventory.category_models import Category
from app.models.inventory.pouch_models import Pouch
from app.models.inventory.inventory_item_models import InventoryItem
from app.models.inventory.stock_movement_models import StockMovement

# Repairs
from app.models.repairs.repair_job_models import RepairJob
from app.models.repairs.job_item_models import JobItem

# System
from app.models.system.number_sequences_models import NumberSequence
