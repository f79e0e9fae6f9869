import json
import logging
import threading
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from .config import DATA_DIR
from .models import InventoryItem, Supplier


logger = logging.getLogger(__name__)

INVENTORY_PATH = DATA_DIR / "inventory.json"
SUPPLIERS_PATH = DATA_DIR / "suppliers.json"

STOCK_STATUSES = ("full", "low", "empty")


def _load_json_list(path: Path) -> List[dict]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except Exception as e:
        logger.warning("[catalog] Failed to load %s: %s", path.name, e)
        return []
    return data if isinstance(data, list) else []


class InventoryStore:
    """Vendor's own stock, held in memory and seeded from JSON."""

    def __init__(self, items: List[InventoryItem]):
        self._lock = threading.Lock()
        self._items: Dict[str, InventoryItem] = {item.id: item for item in items}

    @classmethod
    def from_file(cls, path: Path = INVENTORY_PATH) -> "InventoryStore":
        return cls([InventoryItem(**item) for item in _load_json_list(path)])

    def all(self) -> List[InventoryItem]:
        with self._lock:
            return [item.model_copy() for item in self._items.values()]

    def low_stock(self) -> List[InventoryItem]:
        return [item for item in self.all() if item.quantity <= item.min_threshold]

    def set_stock_status(self, item_id: str, status: str) -> Optional[InventoryItem]:
        """Returns the updated item, or None if no item has that id."""
        if status not in STOCK_STATUSES:
            raise ValueError(f"Invalid stock status: {status!r}")
        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                return None
            item.stock_status = status
            item.last_updated = datetime.now(timezone.utc)
            return item.model_copy()


class SupplierDirectory:
    def __init__(self, suppliers: List[Supplier]):
        self._suppliers = list(suppliers)

    @classmethod
    def from_file(cls, path: Path = SUPPLIERS_PATH) -> "SupplierDirectory":
        return cls([Supplier(**item) for item in _load_json_list(path)])

    def all(self) -> List[Supplier]:
        return list(self._suppliers)

    def categories(self) -> List[str]:
        seen: List[str] = []
        for s in self._suppliers:
            if s.category not in seen:
                seen.append(s.category)
        return seen


@lru_cache(maxsize=1)
def get_inventory_store() -> InventoryStore:
    return InventoryStore.from_file()


@lru_cache(maxsize=1)
def get_supplier_directory() -> SupplierDirectory:
    return SupplierDirectory.from_file()
