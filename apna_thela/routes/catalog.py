from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..catalog import (
    STOCK_STATUSES,
    InventoryStore,
    SupplierDirectory,
    get_inventory_store,
    get_supplier_directory,
)
from ..models import InventoryItem, StockStatusUpdate, Supplier


router = APIRouter()


@router.get("/inventory", response_model=List[InventoryItem])
def list_inventory(store: InventoryStore = Depends(get_inventory_store)):
    return store.all()


@router.get("/inventory/low-stock", response_model=List[InventoryItem])
def list_low_stock(store: InventoryStore = Depends(get_inventory_store)):
    return store.low_stock()


@router.patch("/inventory/{item_id}/status", response_model=InventoryItem)
def update_stock_status(item_id: str, update: StockStatusUpdate, store: InventoryStore = Depends(get_inventory_store)):
    if update.stock_status not in STOCK_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid stock status")
    item = store.set_stock_status(item_id, update.stock_status)
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


@router.get("/suppliers", response_model=List[Supplier])
def list_suppliers(directory: SupplierDirectory = Depends(get_supplier_directory)):
    return directory.all()


@router.get("/suppliers/categories", response_model=List[str])
def list_supplier_categories(directory: SupplierDirectory = Depends(get_supplier_directory)):
    return directory.categories()
